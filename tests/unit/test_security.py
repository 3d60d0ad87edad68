"""
Unit Tests for Password Hashing and Bearer Tokens
"""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from schoolcounsel.access import Principal, Role
from schoolcounsel.config import settings
from schoolcounsel.core.errors import Unauthenticated
from schoolcounsel.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """bcrypt hashing of secrets."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert hashed.startswith("$2")

    def test_verify_roundtrip(self) -> None:
        hashed = hash_password("secret123")

        assert verify_password("secret123", hashed) is True
        assert verify_password("wrong-secret", hashed) is False

    def test_same_secret_hashes_differently(self) -> None:
        """Each hash gets its own salt."""
        assert hash_password("secret123") != hash_password("secret123")

    def test_malformed_hash_does_not_verify(self) -> None:
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    """JWT issue and verification."""

    def test_token_carries_principal_claims(self) -> None:
        principal = Principal(
            id=uuid4(), role=Role.STAFF, school_id=uuid4(), email="ada@hillcrest.edu"
        )
        token = create_access_token(principal)

        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        assert claims["id"] == str(principal.id)
        assert claims["role"] == "staff"
        assert claims["schoolId"] == str(principal.school_id)
        assert claims["email"] == "ada@hillcrest.edu"
        assert "exp" in claims

    def test_decode_rebuilds_principal(self) -> None:
        principal = Principal(id=uuid4(), role=Role.STUDENT, school_id=uuid4())

        assert decode_access_token(create_access_token(principal)) == principal

    def test_student_token_has_no_email(self) -> None:
        principal = Principal(id=uuid4(), role=Role.STUDENT, school_id=uuid4())
        claims = jwt.decode(
            create_access_token(principal),
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )

        assert "email" not in claims

    def test_expired_token_rejected(self) -> None:
        principal = Principal(id=uuid4(), role=Role.ADMIN, school_id=uuid4())
        token = create_access_token(principal, expires_delta=timedelta(seconds=-10))

        with pytest.raises(Unauthenticated, match="expired"):
            decode_access_token(token)

    def test_token_signed_with_other_key_rejected(self) -> None:
        token = jwt.encode(
            {"id": str(uuid4()), "role": "admin", "schoolId": str(uuid4()), "exp": 9999999999},
            "some-other-signing-key-that-is-long-enough",
            algorithm="HS256",
        )

        with pytest.raises(Unauthenticated, match="Invalid token"):
            decode_access_token(token)

    def test_token_with_unknown_role_rejected(self) -> None:
        token = jwt.encode(
            {"id": str(uuid4()), "role": "parent", "schoolId": str(uuid4()), "exp": 9999999999},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(Unauthenticated):
            decode_access_token(token)

    def test_token_missing_school_rejected(self) -> None:
        token = jwt.encode(
            {"id": str(uuid4()), "role": "admin", "exp": 9999999999},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(Unauthenticated):
            decode_access_token(token)

    def test_garbage_token_rejected(self) -> None:
        with pytest.raises(Unauthenticated):
            decode_access_token("not.a.jwt")
