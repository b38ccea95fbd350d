"""
MongoDB 客户端：连接创建 + 集合名统一管理 + 索引初始化 + FastAPI 依赖注入
"""

import pymongo
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from todo_api.config import Settings


class Collections:
    """
    集合名统一管理，避免散弹式硬编码
    """

    TODOS = "todos"
    USERS = "users"


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """按配置创建 Motor 客户端（连接惰性建立，首次操作时才真正连库）"""
    return AsyncIOMotorClient(
        settings.MONGODB_URL,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        connectTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        tz_aware=True,
    )


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """幂等创建索引：邮箱唯一约束 + owner 查询索引"""
    await db[Collections.USERS].create_index(
        [("email", pymongo.ASCENDING)], unique=True, name="uniq_email"
    )
    await db[Collections.TODOS].create_index(
        [("ownerId", pymongo.ASCENDING)], name="idx_owner"
    )


async def get_db(request: Request) -> AsyncIOMotorDatabase:
    """FastAPI 依赖注入：获取应用启动时挂载的数据库句柄"""
    return request.app.state.db
