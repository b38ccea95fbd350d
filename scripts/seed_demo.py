"""
种子数据脚本：初始化演示用户与 Todo 到 MongoDB

运行方式：
    python scripts/seed_demo.py

幂等设计：按邮箱判断用户是否已存在，存在则跳过；Todo 按 text + ownerId 去重。
"""

import asyncio

import structlog

from todo_api.config import get_settings
from todo_api.db.mongo import Collections, create_client, ensure_indexes
from todo_api.observability.logging_config import setup_logging
from todo_api.security.credentials import hash_password

settings = get_settings()
log = structlog.get_logger()

DEMO_USER = {
    "name": "demo",
    "email": "demo@example.com",
    "password": "demo-password",
}

DEMO_TODOS = [
    {"text": "First task to do", "completed": False, "completedAt": None},
    {"text": "Second task to do", "completed": True, "completedAt": 333},
]


async def seed() -> None:
    client = create_client(settings)
    db = client[settings.MONGODB_DB]
    try:
        await ensure_indexes(db)

        users = db[Collections.USERS]
        user = await users.find_one({"email": DEMO_USER["email"]})
        if user is None:
            result = await users.insert_one(
                {
                    "name": DEMO_USER["name"],
                    "email": DEMO_USER["email"],
                    "passwordHash": hash_password(DEMO_USER["password"]),
                    "tokens": [],
                }
            )
            owner_id = result.inserted_id
            log.info("演示用户已创建", email=DEMO_USER["email"])
        else:
            owner_id = user["_id"]
            log.info("演示用户已存在，跳过", email=DEMO_USER["email"])

        todos = db[Collections.TODOS]
        inserted = 0
        for item in DEMO_TODOS:
            result = await todos.update_one(
                {"text": item["text"], "ownerId": owner_id},
                {"$setOnInsert": {**item, "ownerId": owner_id}},
                upsert=True,
            )
            if result.upserted_id is not None:
                inserted += 1
        log.info("演示 Todo 初始化完成", inserted=inserted, total=len(DEMO_TODOS))
    finally:
        client.close()


if __name__ == "__main__":
    setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
    asyncio.run(seed())
