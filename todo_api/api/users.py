"""
/users 接口：注册 / 登录 / 注销 / 当前用户

- POST   /users          ：注册，响应头 x-auth 携带新 Token
- POST   /users/login    ：登录，追加新会话 Token
- DELETE /users/me/token ：注销当前会话（仅撤销本次请求使用的 Token）
- GET    /users/me       ：当前用户信息

邮箱重复：先做显式预检给出友好错误，uniq_email 唯一索引兜底并发注册。
"""

import asyncio

import structlog
from bson import ObjectId
from fastapi import APIRouter, Depends, Response
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from todo_api.db.mongo import get_db
from todo_api.errors import DuplicateEmail, InvalidCredentials
from todo_api.models import LoginRequest, RegisterRequest, User, UserPublic
from todo_api.observability.metrics import USER_OPERATION_TOTAL
from todo_api.security.auth import AuthContext, get_current_user
from todo_api.security.credentials import hash_password, issue_token, verify_password
from todo_api.store.user_store import UserStore

router = APIRouter(prefix="/users", tags=["users"])
log = structlog.get_logger()

AUTH_HEADER = "x-auth"


def get_user_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserStore:
    """FastAPI 依赖注入：按请求构造 UserStore"""
    return UserStore(db)


def _public(user: User) -> UserPublic:
    return UserPublic(id=user.id, name=user.name, email=user.email)


async def _start_session(store: UserStore, user: User, response: Response) -> None:
    """签发 Token → 追加到用户 tokens → 写入响应头"""
    token = issue_token(user.id)
    await store.add_token(ObjectId(user.id), token)
    response.headers[AUTH_HEADER] = token


@router.post("", response_model=UserPublic)
async def register(
    body: RegisterRequest,
    response: Response,
    store: UserStore = Depends(get_user_store),
):
    """注册新用户并直接登录"""
    if await store.find_by_email(body.email) is not None:
        USER_OPERATION_TOTAL.labels(operation="register", status="failure").inc()
        raise DuplicateEmail()

    # bcrypt 为 CPU 密集操作，放到线程池避免阻塞事件循环
    password_hash = await asyncio.to_thread(hash_password, body.password)
    try:
        user = await store.create(body.name, body.email, password_hash)
    except DuplicateKeyError:
        # 预检与插入之间的并发注册，由唯一索引拦截
        USER_OPERATION_TOTAL.labels(operation="register", status="failure").inc()
        raise DuplicateEmail()

    await _start_session(store, user, response)
    USER_OPERATION_TOTAL.labels(operation="register", status="success").inc()
    log.info("用户注册成功", user_id=user.id)
    return _public(user)


@router.post("/login", response_model=UserPublic)
async def login(
    body: LoginRequest,
    response: Response,
    store: UserStore = Depends(get_user_store),
):
    """邮箱密码登录：账号不存在与密码错误返回同一错误"""
    user = await store.find_by_email(body.email.strip().lower())
    if user is None or not await asyncio.to_thread(
        verify_password, body.password, user.password_hash
    ):
        USER_OPERATION_TOTAL.labels(operation="login", status="failure").inc()
        log.info("登录失败")
        raise InvalidCredentials()

    await _start_session(store, user, response)
    USER_OPERATION_TOTAL.labels(operation="login", status="success").inc()
    log.info("用户登录成功", user_id=user.id)
    return _public(user)


@router.delete("/me/token")
async def logout(
    auth: AuthContext = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
):
    """注销：只移除本次请求使用的 Token"""
    await store.remove_token(auth.user_oid, auth.token)
    USER_OPERATION_TOTAL.labels(operation="logout", status="success").inc()
    log.info("用户注销", user_id=auth.user.id)
    return Response(status_code=200)


@router.get("/me", response_model=UserPublic)
async def me(auth: AuthContext = Depends(get_current_user)):
    return _public(auth.user)
