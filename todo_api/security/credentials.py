"""
凭据模块：密码哈希 / 校验 + 会话 Token 签发 / 校验

Token 载荷：{_id, access: "auth", jti, iat[, exp]}。
jti 保证同一用户多次登录签发的 Token 互不相同，注销时可单独撤销。
签发只生成字符串，不落库；调用方负责把 {access, token} 追加到用户文档。
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from todo_api.config import Settings, get_settings
from todo_api.db.documents import is_object_id

AUTH_ACCESS = "auth"
BCRYPT_MAX_BYTES = 72


class InvalidToken(Exception):
    """Token 签名无效、已过期、载荷格式错误或 access 不是 auth"""


@dataclass(frozen=True)
class TokenClaims:
    """校验通过的 Token 载荷"""

    user_id: str
    access: str


def hash_password(password: str, rounds: int | None = None) -> str:
    """生成密码哈希（加盐，同一明文每次结果不同）"""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """校验密码；哈希格式损坏或明文超过 bcrypt 72 字节上限时视为不匹配"""
    try:
        password = plain_password.encode()
        if len(password) > BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(password, hashed_password.encode())
    except ValueError:
        return False


def issue_token(user_id: str, settings: Settings | None = None) -> str:
    """签发会话 Token"""
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "_id": str(user_id),
        "access": AUTH_ACCESS,
        "jti": str(uuid.uuid4()),
        "iat": now,
    }
    if settings.TOKEN_EXPIRE_MINUTES > 0:
        payload["exp"] = now + timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, settings: Settings | None = None) -> TokenClaims:
    """校验 Token 并返回载荷，任何不合法情况统一抛 InvalidToken"""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidToken("invalid token") from e

    user_id = payload.get("_id")
    access = payload.get("access")
    if not isinstance(user_id, str) or not is_object_id(user_id):
        raise InvalidToken("malformed payload")
    if access != AUTH_ACCESS:
        raise InvalidToken("unexpected access claim")

    return TokenClaims(user_id=user_id, access=access)
