from datetime import datetime, timedelta, timezone

import jwt
import pytest
from bson import ObjectId

from todo_api.config import Settings
from todo_api.security.credentials import (
    InvalidToken,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


def test_hash_password_is_salted_and_verifiable():
    first = hash_password("secret1", rounds=4)
    second = hash_password("secret1", rounds=4)

    assert first != second
    assert first != "secret1"
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_verify_password_rejects_wrong_password():
    hashed = hash_password("secret1", rounds=4)
    assert not verify_password("secret2", hashed)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("secret1", "not-a-bcrypt-hash")


def test_issue_and_verify_token_roundtrip():
    user_id = str(ObjectId())
    claims = verify_token(issue_token(user_id))

    assert claims.user_id == user_id
    assert claims.access == "auth"


def test_issued_tokens_are_unique_per_session():
    user_id = str(ObjectId())
    assert issue_token(user_id) != issue_token(user_id)


def test_verify_token_rejects_foreign_signature():
    token = jwt.encode({"_id": str(ObjectId()), "access": "auth"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_verify_token_rejects_garbage():
    with pytest.raises(InvalidToken):
        verify_token("definitely.not.a-token")


def test_verify_token_rejects_wrong_access_claim():
    settings = Settings()
    token = jwt.encode(
        {"_id": str(ObjectId()), "access": "refresh"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidToken, match="access"):
        verify_token(token, settings)


def test_verify_token_rejects_malformed_user_id():
    settings = Settings()
    token = jwt.encode(
        {"_id": "123", "access": "auth"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )
    with pytest.raises(InvalidToken, match="malformed"):
        verify_token(token, settings)


def test_verify_token_rejects_expired_token():
    settings = Settings()
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = jwt.encode(
        {"_id": str(ObjectId()), "access": "auth", "exp": past},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidToken, match="expired"):
        verify_token(token, settings)


def test_issue_token_sets_expiry_when_configured():
    settings = Settings(TOKEN_EXPIRE_MINUTES=10)
    token = issue_token(str(ObjectId()), settings)
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert "exp" in payload


def test_issue_token_without_expiry_by_default():
    settings = Settings(TOKEN_EXPIRE_MINUTES=0)
    token = issue_token(str(ObjectId()), settings)
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert "exp" not in payload


def test_verify_password_rejects_input_over_bcrypt_limit():
    hashed = hash_password("p" * 72, rounds=4)

    assert verify_password("p" * 72, hashed)
    assert not verify_password("p" * 80, hashed)
