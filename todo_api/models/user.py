"""
用户数据模型

passwordHash / tokens 只存在于文档中，对外响应统一使用 UserPublic。
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from todo_api.models.base import DocumentModel
from todo_api.security.credentials import BCRYPT_MAX_BYTES

MIN_PASSWORD_LENGTH = 6


class TokenEntry(BaseModel):
    """一个活跃会话：{access: "auth", token}"""

    access: Literal["auth"] = "auth"
    token: str


class User(DocumentModel):
    """用户文档（含凭据，仅服务端内部使用）"""

    name: str
    email: str
    password_hash: str
    tokens: list[TokenEntry] = Field(default_factory=list)


class UserPublic(DocumentModel):
    """对外暴露的用户信息（不含密码哈希与 tokens）"""

    name: str
    email: str


class RegisterRequest(BaseModel):
    """POST /users 请求体"""

    name: str
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt 只处理前 72 字节，超出直接拒绝，避免注册与登录结果不一致
        try:
            size = len(v.encode("utf-8"))
        except UnicodeEncodeError:
            raise ValueError("password must be valid UTF-8") from None
        if size > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """POST /users/login 请求体"""

    email: str
    password: str
