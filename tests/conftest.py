"""Shared test fixtures: in-memory Mongo, seeded users/todos, HTTP client."""

import os

# bcrypt 最低轮数，加速测试；必须在导入 todo_api 之前设置
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

import httpx
import pytest
import pytest_asyncio
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from todo_api.db.mongo import Collections, ensure_indexes
from todo_api.main import create_app
from todo_api.security.credentials import hash_password, issue_token


@dataclass
class SeedUser:
    id: ObjectId
    name: str
    email: str
    password: str
    tokens: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict[str, str]:
        return {"x-auth": self.tokens[0]}


@dataclass
class Seed:
    users: list[SeedUser]
    todos: list[dict]


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db():
    """每个测试一个全新的内存库"""
    client = AsyncMongoMockClient()
    database = client[f"todo_api_test_{ObjectId()}"]
    await ensure_indexes(database)
    return database


@pytest_asyncio.fixture
async def seed(db) -> Seed:
    """两名用户（第一名持有一个有效 Token）+ 各自的 Todo"""
    user_one = SeedUser(
        id=ObjectId(), name="gaurav", email="gaurav@gmail.com", password="password1"
    )
    user_two = SeedUser(
        id=ObjectId(), name="namita", email="namita@gmail.com", password="password2"
    )
    user_one.tokens.append(issue_token(str(user_one.id)))
    user_two.tokens.append(issue_token(str(user_two.id)))

    for user in (user_one, user_two):
        await db[Collections.USERS].insert_one(
            {
                "_id": user.id,
                "name": user.name,
                "email": user.email,
                "passwordHash": hash_password(user.password),
                "tokens": [{"access": "auth", "token": t} for t in user.tokens],
            }
        )

    todos = [
        {
            "_id": ObjectId(),
            "text": "First task to do",
            "completed": False,
            "completedAt": None,
            "ownerId": user_one.id,
        },
        {
            "_id": ObjectId(),
            "text": "Second task to do",
            "completed": True,
            "completedAt": 333,
            "ownerId": user_two.id,
        },
    ]
    await db[Collections.TODOS].insert_many([dict(t) for t in todos])

    return Seed(users=[user_one, user_two], todos=todos)


# =============================================================================
# HTTP Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(db) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app(database=db)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def user_one(seed: Seed) -> SeedUser:
    return seed.users[0]


@pytest.fixture
def user_two(seed: Seed) -> SeedUser:
    return seed.users[1]
