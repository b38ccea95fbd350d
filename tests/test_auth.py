import jwt
import pytest
from bson import ObjectId

from todo_api.config import get_settings
from todo_api.db.mongo import Collections
from todo_api.security.credentials import issue_token


@pytest.mark.asyncio
async def test_missing_header_is_rejected(client, seed):
    resp = await client.get("/todos")

    assert resp.status_code == 401
    assert resp.json() == {}


@pytest.mark.asyncio
async def test_tampered_token_is_rejected(client, user_one):
    header, payload, signature = user_one.tokens[0].split(".")
    forged_first = "A" if signature[0] != "A" else "B"
    tampered = f"{header}.{payload}.{forged_first}{signature[1:]}"

    resp = await client.get("/todos", headers={"x-auth": tampered})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_with_wrong_access_is_rejected(client, db, user_one):
    settings = get_settings()
    token = jwt.encode(
        {"_id": str(user_one.id), "access": "admin"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    await db[Collections.USERS].update_one(
        {"_id": user_one.id}, {"$push": {"tokens": {"access": "auth", "token": token}}}
    )

    resp = await client.get("/users/me", headers={"x-auth": token})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_validly_signed_but_unstored_token_is_rejected(client, user_one):
    token = issue_token(str(user_one.id))

    resp = await client.get("/users/me", headers={"x-auth": token})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_stored_token_under_wrong_user_id_is_rejected(client, db, user_one, user_two):
    # 签名有效、载荷指向 user_two，但只存进了 user_one 的会话列表
    token = issue_token(str(user_two.id))
    await db[Collections.USERS].update_one(
        {"_id": user_one.id}, {"$push": {"tokens": {"access": "auth", "token": token}}}
    )
    resp = await client.get("/users/me", headers={"x-auth": token})
    assert resp.status_code == 401

    resp = await client.get("/users/me", headers={"x-auth": issue_token(str(ObjectId()))})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_unauthenticated_request_has_no_side_effects(client, db, seed, user_one):
    todo_id = str(seed.todos[0]["_id"])

    resp = await client.delete(f"/todos/{todo_id}", headers={"x-auth": "garbage"})

    assert resp.status_code == 401
    assert await db[Collections.TODOS].find_one({"_id": seed.todos[0]["_id"]}) is not None


@pytest.mark.asyncio
async def test_responses_carry_trace_id(client, user_one):
    resp = await client.get("/users/me", headers={**user_one.headers, "X-Trace-ID": "trace-123"})

    assert resp.status_code == 200
    assert resp.headers["X-Trace-ID"] == "trace-123"
    assert "X-Duration-Ms" in resp.headers
