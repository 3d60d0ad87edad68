"""
Authenticated principals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    ADMIN = "admin"  # a school account
    STAFF = "staff"  # a counselor
    STUDENT = "student"


@dataclass(frozen=True)
class Principal:
    """The caller, as decoded from a bearer token."""

    id: UUID
    role: Role
    school_id: UUID
    email: str | None = None
