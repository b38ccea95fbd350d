"""
/todos 接口：当前用户 Todo 的增删改查

端点（均需 x-auth）：
- POST   /todos     ：创建
- GET    /todos     ：列表（仅本人）
- GET    /todos/:id ：详情
- DELETE /todos/:id ：删除，返回删除前的文档
- PATCH  /todos/:id ：部分更新 text / completed

id 非法 → 404 "Invalid Object Id"；不存在或属于他人 → 404，两者对调用方不可区分。
"""

import structlog
from bson import ObjectId
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from todo_api.db.documents import is_object_id, now_ms, to_object_id
from todo_api.db.mongo import get_db
from todo_api.errors import InvalidId, NotFound
from todo_api.models import Todo, TodoCreate, TodoEnvelope, TodoList, TodoUpdate
from todo_api.observability.metrics import TODO_OPERATION_TOTAL
from todo_api.security.auth import AuthContext, get_current_user
from todo_api.store.todo_store import TodoStore

router = APIRouter(prefix="/todos", tags=["todos"])
log = structlog.get_logger()


def get_todo_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> TodoStore:
    """FastAPI 依赖注入：按请求构造 TodoStore"""
    return TodoStore(db)


def parse_todo_id(todo_id: str) -> ObjectId:
    """路径参数校验：非法 ObjectId 直接 404"""
    if not is_object_id(todo_id):
        raise InvalidId(todo_id)
    return to_object_id(todo_id)


@router.post("", response_model=Todo)
async def create_todo(
    body: TodoCreate,
    auth: AuthContext = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
):
    """创建 Todo，归属当前用户"""
    todo = await store.create(auth.user_oid, body.text)
    TODO_OPERATION_TOTAL.labels(operation="create").inc()
    log.info("Todo 已创建", todo_id=todo.id)
    return todo


@router.get("", response_model=TodoList)
async def list_todos(
    auth: AuthContext = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
):
    todos = await store.list_for_owner(auth.user_oid)
    return TodoList(todos=todos)


@router.get("/{todo_id}", response_model=TodoEnvelope)
async def get_todo(
    todo_id: str,
    auth: AuthContext = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
):
    oid = parse_todo_id(todo_id)
    todo = await store.get(auth.user_oid, oid)
    if todo is None:
        raise NotFound(todo_id)
    return TodoEnvelope(todo=todo)


@router.delete("/{todo_id}", response_model=TodoEnvelope)
async def delete_todo(
    todo_id: str,
    auth: AuthContext = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
):
    """删除 Todo，返回删除前的文档"""
    oid = parse_todo_id(todo_id)
    todo = await store.delete(auth.user_oid, oid)
    if todo is None:
        raise NotFound(todo_id)
    TODO_OPERATION_TOTAL.labels(operation="delete").inc()
    log.info("Todo 已删除", todo_id=todo_id)
    return TodoEnvelope(todo=todo)


@router.patch("/{todo_id}", response_model=TodoEnvelope)
async def update_todo(
    todo_id: str,
    body: TodoUpdate,
    auth: AuthContext = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
):
    """
    部分更新：
    - completed 由 false 变 true 时写入 completedAt（毫秒时间戳），已完成的保持原值
    - completed 设为 false 时 completedAt 一律清空
    """
    oid = parse_todo_id(todo_id)
    current = await store.get(auth.user_oid, oid)
    if current is None:
        raise NotFound(todo_id)

    changes: dict = {}
    if body.text is not None:
        changes["text"] = body.text
    if body.completed is True:
        changes["completed"] = True
        if not current.completed or current.completed_at is None:
            changes["completedAt"] = now_ms()
    elif body.completed is False:
        changes["completed"] = False
        changes["completedAt"] = None

    todo = await store.update(auth.user_oid, oid, changes)
    if todo is None:
        # 读取与更新之间被删除
        raise NotFound(todo_id)
    TODO_OPERATION_TOTAL.labels(operation="update").inc()
    log.info("Todo 已更新", todo_id=todo_id, fields=sorted(changes))
    return TodoEnvelope(todo=todo)
