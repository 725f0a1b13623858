from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from quickgpt.core.settings import Settings

_HASH_SCHEME = "pbkdf2_sha256"
_HASH_ITERATIONS = 260_000
_JWT_ALGORITHM = "HS256"


def hash_password(password: str, *, iterations: int = _HASH_ITERATIONS) -> str:
    """Return ``scheme$iterations$salt$digest`` for storage."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), bytes.fromhex(salt), iterations
    )
    return f"{_HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, expected = stored.split("$")
        if scheme != _HASH_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), bytes.fromhex(salt), int(iterations)
        )
    except (ValueError, OverflowError):
        return False

    return hmac.compare_digest(digest.hex(), expected)


def create_access_token(user_id: int, settings: Settings) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expires_days)
    payload = {"id": str(user_id), "exp": expires_at}
    return jwt.encode(payload, settings.jwt_secret, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> int:
    """Return the user id carried by ``token``.

    Raises ``jwt.InvalidTokenError`` (including ``ExpiredSignatureError``) when
    the token cannot be trusted.
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[_JWT_ALGORITHM])
    try:
        return int(payload["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise jwt.InvalidTokenError("Token has no user id") from e
