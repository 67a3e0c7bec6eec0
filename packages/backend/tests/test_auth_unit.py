"""Unit tests for JWT and password helpers."""

import jwt
import pytest

from taskboard.auth.jwt import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    verify_token,
)
from taskboard.auth.password import hash_password, verify_password
from taskboard.config import settings


# ─── JWT ─────────────────────────────────────────────────


def test_token_round_trip():
    token = create_access_token("user-1")
    assert verify_token(token) == "user-1"


def test_token_carries_only_subject_and_times():
    token = create_access_token("user-1")
    payload = jwt.decode(token, options={"verify_signature": False})
    assert set(payload) == {"sub", "iat", "exp"}
    assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60


def test_expired_token():
    token = create_access_token("user-1", expires_minutes=-5)
    with pytest.raises(TokenExpiredError) as exc:
        verify_token(token)
    assert exc.value.message == "Token expired."
    assert exc.value.status_code == 401


def test_wrong_secret():
    token = jwt.encode({"sub": "user-1", "exp": 9999999999}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_tampered_token():
    token = create_access_token("user-1")
    head, body, sig = token.split(".")
    with pytest.raises(InvalidTokenError):
        verify_token(f"{head}.{body}.{sig[::-1]}")


def test_token_without_subject():
    token = jwt.encode({"exp": 9999999999}, settings.jwt_secret, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        verify_token(token)


# ─── Passwords ───────────────────────────────────────────


def test_hash_and_verify():
    hashed = hash_password("abc123", rounds=4)
    assert hashed != "abc123"
    assert hashed.startswith("$2")
    assert verify_password("abc123", hashed)
    assert not verify_password("abc124", hashed)


def test_hashes_are_salted():
    assert hash_password("abc123", rounds=4) != hash_password("abc123", rounds=4)


def test_verify_against_garbage_hash():
    assert verify_password("abc123", "not-a-bcrypt-hash") is False


def test_long_passwords_truncated_consistently():
    long_pw = "a1" * 60  # 120 bytes
    hashed = hash_password(long_pw, rounds=4)
    assert verify_password(long_pw, hashed)
