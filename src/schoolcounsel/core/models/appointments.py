"""
Appointment Models

Calendar events shared by one counselor and one student. No overlap detection
or recurrence; start/end ordering is not enforced.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .students import Student
    from .users import Counselor

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

DEFAULT_CALENDAR_COLOR = "#184C85"


class Appointment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Counselling session, workshop or group meeting."""

    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint(
            "type IN ('counseling', 'workshop', 'group')", name="check_appointment_type"
        ),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="check_appointment_status"
        ),
        Index("idx_appointments_student_start", "student_id", "start"),
        Index("idx_appointments_counselor_start", "counselor_id", "start"),
        Index("idx_appointments_school_start", "school_id", "start"),
        Index("idx_appointments_status", "status"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    student_id: Mapped[UUID] = mapped_column(ForeignKey("students.id"), nullable=False)
    counselor_id: Mapped[UUID] = mapped_column(ForeignKey("counselors.id"), nullable=False)
    school_id: Mapped[UUID] = mapped_column(ForeignKey("schools.id"), nullable=False)

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    background_color: Mapped[str] = mapped_column(String(20), default=DEFAULT_CALENDAR_COLOR)
    border_color: Mapped[str] = mapped_column(String(20), default=DEFAULT_CALENDAR_COLOR)

    # Relationships
    student: Mapped[Student] = relationship()
    counselor: Mapped[Counselor] = relationship()

    def participant_ids(self) -> frozenset[UUID]:
        return frozenset({self.student_id, self.counselor_id})
