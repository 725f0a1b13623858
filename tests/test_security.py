from __future__ import annotations

import jwt
import pytest

from quickgpt.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from quickgpt.core.settings import Settings


def test_password_hash_verifies():
    stored = hash_password("correct horse", iterations=1000)

    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse", stored)
    assert not verify_password("battery staple", stored)


def test_password_hashes_are_salted():
    assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)


def test_malformed_hash_does_not_verify():
    assert not verify_password("anything", "plain-text")
    assert not verify_password("anything", "md5$1$00$00")


def test_token_carries_user_id():
    settings = Settings()

    token = create_access_token(42, settings)

    assert decode_access_token(token, settings) == 42


def test_expired_token_is_rejected():
    settings = Settings(JWT_EXPIRES_DAYS=-1)

    token = create_access_token(42, settings)

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token, settings)


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token(
        42, Settings(JWT_SECRET="another-secret-that-is-long-enough-for-hs256")
    )

    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token, Settings())


def test_corrupt_hash_does_not_verify():
    assert not verify_password("anything", "pbkdf2_sha256$many$00$00")
    assert not verify_password("anything", "pbkdf2_sha256$1000$not-hex$00")
    assert not verify_password("anything", "pbkdf2_sha256$0$00$00")
