"""
鉴权模块：x-auth 头 → Token 校验 → 用户文档中的有效会话

注销即时生效：签名仍然有效但已从 tokens 列表移除的 Token 同样返回 401。
"""

from dataclasses import dataclass

import structlog
from bson import ObjectId
from fastapi import Depends, Header, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from todo_api.db.mongo import get_db
from todo_api.errors import Unauthenticated
from todo_api.models import User
from todo_api.observability.context import bind_user
from todo_api.observability.metrics import AUTH_FAILURE_TOTAL
from todo_api.security.credentials import InvalidToken, verify_token
from todo_api.store.user_store import UserStore

log = structlog.get_logger()


@dataclass
class AuthContext:
    """鉴权后的请求上下文：当前用户 + 本次请求使用的 Token"""

    user: User
    token: str

    @property
    def user_oid(self) -> ObjectId:
        return ObjectId(self.user.id)


async def get_current_user(
    request: Request,
    x_auth: str | None = Header(default=None),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> AuthContext:
    """FastAPI 依赖注入：校验 x-auth 并返回鉴权上下文，失败时 401"""
    if not x_auth:
        AUTH_FAILURE_TOTAL.labels(reason="missing_token").inc()
        raise Unauthenticated()

    # 1. 校验签名与载荷
    try:
        claims = verify_token(x_auth)
    except InvalidToken as e:
        AUTH_FAILURE_TOTAL.labels(reason="invalid_token").inc()
        log.info("Token 校验失败", reason=str(e))
        raise Unauthenticated() from e

    # 2. 校验会话仍然有效（未被注销）
    user = await UserStore(db).find_by_token(ObjectId(claims.user_id), x_auth)
    if user is None:
        AUTH_FAILURE_TOTAL.labels(reason="revoked_token").inc()
        log.info("Token 已撤销或用户不存在", user_id=claims.user_id)
        raise Unauthenticated()

    # 3. 挂载到请求上下文
    auth = AuthContext(user=user, token=x_auth)
    request.state.auth = auth
    bind_user(user.id)
    return auth
