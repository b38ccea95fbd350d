"""
数据模型：Todo / User 文档记录与请求 / 响应 schema
"""

from todo_api.models.todo import Todo, TodoCreate, TodoEnvelope, TodoList, TodoUpdate
from todo_api.models.user import LoginRequest, RegisterRequest, TokenEntry, User, UserPublic

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "Todo",
    "TodoCreate",
    "TodoEnvelope",
    "TodoList",
    "TodoUpdate",
    "TokenEntry",
    "User",
    "UserPublic",
]
