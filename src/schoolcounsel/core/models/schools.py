"""
School Models

Schools are the tenants: every counselor, student, assessment and appointment
is scoped to exactly one school.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .students import Student
    from .users import Counselor

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class School(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A school account. Logs in with the ``admin`` role."""

    __tablename__ = "schools"

    school_name: Mapped[str] = mapped_column(String(300), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, comment="Login identifier"
    )
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    school_type: Mapped[str] = mapped_column(
        String(30), nullable=False, comment="primary, secondary, tertiary"
    )
    website: Mapped[str | None] = mapped_column(String(300), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    is_admin: Mapped[bool] = mapped_column(default=True)

    # Relationships
    counselors: Mapped[list[Counselor]] = relationship(back_populates="school")
    students: Mapped[list[Student]] = relationship(back_populates="school")
