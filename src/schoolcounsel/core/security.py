"""
Password hashing and bearer tokens.

bcrypt for one-way secret hashing, PyJWT (HS256 by default) for tokens that
carry ``{id, role, schoolId, email?, exp}``.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import bcrypt
import jwt

from schoolcounsel.access.principal import Principal, Role
from schoolcounsel.config import settings
from schoolcounsel.core.errors import Unauthenticated

# bcrypt only looks at the first 72 bytes of a secret
MAX_SECRET_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8")[:MAX_SECRET_BYTES], salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:MAX_SECRET_BYTES], password_hash.encode("utf-8")
        )
    except ValueError:
        # Malformed stored hash
        return False


# Compared against when the identifier is unknown so both login failures cost one bcrypt check
_DUMMY_HASH = hash_password("schoolcounsel-dummy-secret")


def burn_password_check(password: str) -> None:
    verify_password(password, _DUMMY_HASH)


def create_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    """Issue a signed bearer token for ``principal``."""
    expires_at = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    )
    payload: dict[str, Any] = {
        "id": str(principal.id),
        "role": principal.role.value,
        "schoolId": str(principal.school_id),
        "exp": expires_at,
    }
    if principal.email:
        payload["email"] = principal.email
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """Verify ``token`` and rebuild the principal it was issued for.

    Raises:
        Unauthenticated: expired, badly signed or malformed token
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id", "role", "schoolId"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise Unauthenticated("Access denied. Token has expired.") from e
    except jwt.InvalidTokenError as e:
        raise Unauthenticated("Access denied. Invalid token.") from e

    try:
        return Principal(
            id=UUID(claims["id"]),
            role=Role(claims["role"]),
            school_id=UUID(claims["schoolId"]),
            email=claims.get("email"),
        )
    except (ValueError, TypeError) as e:
        raise Unauthenticated("Access denied. Invalid token.") from e
