"""
User MongoDB 存储层

tokens 列表通过 $push / $pull 原子增删，并发登录 / 注销互不覆盖。
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from todo_api.db.mongo import Collections
from todo_api.models import TokenEntry, User
from todo_api.security.credentials import AUTH_ACCESS


class UserStore:
    """用户文档 CRUD + 会话 Token 管理"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[Collections.USERS]

    async def create(self, name: str, email: str, password_hash: str) -> User:
        """
        插入新用户。邮箱唯一由 uniq_email 索引保证，
        重复时抛 pymongo.errors.DuplicateKeyError，由调用方转换。
        """
        doc = {
            "name": name,
            "email": email,
            "passwordHash": password_hash,
            "tokens": [],
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return User.from_document(doc)

    async def find_by_email(self, email: str) -> User | None:
        doc = await self.collection.find_one({"email": email})
        return User.from_document(doc) if doc else None

    async def find_by_token(self, user_id: ObjectId, token: str) -> User | None:
        """按 _id + tokens 中精确匹配的 {access: auth, token} 查找用户"""
        doc = await self.collection.find_one(
            {
                "_id": user_id,
                "tokens": {"$elemMatch": {"access": AUTH_ACCESS, "token": token}},
            }
        )
        return User.from_document(doc) if doc else None

    async def add_token(self, user_id: ObjectId, token: str) -> None:
        entry = TokenEntry(token=token).model_dump()
        await self.collection.update_one({"_id": user_id}, {"$push": {"tokens": entry}})

    async def remove_token(self, user_id: ObjectId, token: str) -> None:
        """只撤销指定 Token，其他会话不受影响"""
        await self.collection.update_one(
            {"_id": user_id}, {"$pull": {"tokens": {"token": token}}}
        )
