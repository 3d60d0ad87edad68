"""
Staff Models

Counselors employed by a school. They author assessments and own appointments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .schools import School

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Counselor(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """School counselor. Logs in with the ``staff`` role."""

    __tablename__ = "counselors"
    __table_args__ = (Index("idx_counselors_school", "school_id"),)

    school_id: Mapped[UUID] = mapped_column(ForeignKey("schools.id"), nullable=False)

    # Identity
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, comment="Login identifier"
    )
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)

    specialization: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    school: Mapped[School] = relationship(back_populates="counselors")
