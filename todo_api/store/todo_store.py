"""
Todo MongoDB 存储层

每个方法都以 owner_id 作为必选参数，查询条件恒为 {_id, ownerId}，
因此他人的 Todo 对当前用户表现为"不存在"。
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from todo_api.db.mongo import Collections
from todo_api.models import Todo


class TodoStore:
    """按归属隔离的 Todo CRUD"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[Collections.TODOS]

    async def create(self, owner_id: ObjectId, text: str) -> Todo:
        doc = {
            "text": text,
            "completed": False,
            "completedAt": None,
            "ownerId": owner_id,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return Todo.from_document(doc)

    async def list_for_owner(self, owner_id: ObjectId) -> list[Todo]:
        """列出某用户的全部 Todo（存储默认顺序）"""
        docs = await self.collection.find({"ownerId": owner_id}).to_list(length=None)
        return [Todo.from_document(d) for d in docs]

    async def get(self, owner_id: ObjectId, todo_id: ObjectId) -> Todo | None:
        doc = await self.collection.find_one({"_id": todo_id, "ownerId": owner_id})
        return Todo.from_document(doc) if doc else None

    async def delete(self, owner_id: ObjectId, todo_id: ObjectId) -> Todo | None:
        """删除并返回删除前的文档；不存在或不属于该用户时返回 None"""
        doc = await self.collection.find_one_and_delete({"_id": todo_id, "ownerId": owner_id})
        return Todo.from_document(doc) if doc else None

    async def update(self, owner_id: ObjectId, todo_id: ObjectId, changes: dict) -> Todo | None:
        """
        部分更新并返回更新后的文档。
        changes 使用文档字段名（text / completed / completedAt），ownerId 永不写入。
        """
        changes = {k: v for k, v in changes.items() if k in ("text", "completed", "completedAt")}
        if not changes:
            return await self.get(owner_id, todo_id)
        doc = await self.collection.find_one_and_update(
            {"_id": todo_id, "ownerId": owner_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return Todo.from_document(doc) if doc else None
