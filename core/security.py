"""
Password hashing and bearer-token authentication.

Passwords are hashed with Argon2. Login tokens are HS256 JWTs carrying the
user id and email, signed with the process-wide ``JWT_SECRET``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import argon2
import jwt
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends, Header

from core.dependencies import get_jwt_secret
from core.errors import Unauthenticated

ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=7)

_hasher = argon2.PasswordHasher()


@dataclass(frozen=True)
class AuthData:
    user_id: int
    email: str


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def issue_token(
    user_id: int, email: str, secret: str, ttl: timedelta = DEFAULT_TOKEN_TTL
) -> str:
    payload = {
        "userId": user_id,
        "email": email,
        "exp": datetime.now(UTC) + ttl,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str) -> AuthData:
    """Verify *token* and return its claims.

    Raises:
        Unauthenticated: If the signature, expiry or claims are invalid.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        return AuthData(user_id=int(payload["userId"]), email=payload["email"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
        raise Unauthenticated("invalid token") from exc


def get_current_user(
    authorization: str | None = Header(default=None),
    secret: str = Depends(get_jwt_secret),
) -> AuthData:
    """FastAPI dependency resolving the caller from ``Authorization: Bearer``."""
    token = (authorization or "").replace("Bearer ", "", 1).strip()
    if not token:
        raise Unauthenticated("missing token")
    return decode_token(token, secret)
