"""
存储层：todos / users 集合的 CRUD

所有 Todo 读写都带 ownerId 过滤（按归属隔离），调用方无法越权访问他人数据。
"""

from todo_api.store.todo_store import TodoStore
from todo_api.store.user_store import UserStore

__all__ = ["TodoStore", "UserStore"]
