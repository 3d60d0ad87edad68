"""
Appointment Pydantic Schemas

Request and response models for appointment API endpoints. Start and end are
accepted as full timestamps or bare ``YYYY-MM-DD`` days and are always
returned as calendar days.
"""

from datetime import UTC, date, datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import AfterValidator, BeforeValidator, Field, field_serializer

from schoolcounsel.core.validation import CamelModel

AppointmentType = Literal["counseling", "workshop", "group"]
AppointmentStatus = Literal["pending", "confirmed", "cancelled"]


def _day_to_midnight(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date.fromisoformat(value), datetime.min.time(), tzinfo=UTC)
    return value


def _assume_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


Instant = Annotated[datetime, BeforeValidator(_day_to_midnight), AfterValidator(_assume_utc)]


def calendar_day(value: datetime) -> str:
    """``YYYY-MM-DD`` of ``value`` in UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date().isoformat()


class AppointmentCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    start: Instant
    end: Instant
    student_id: UUID
    type: AppointmentType
    notes: str | None = Field(None, max_length=5000)


class AppointmentUpdate(CamelModel):
    """Every field optional; only the fields sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=200)
    start: Instant | None = None
    end: Instant | None = None
    type: AppointmentType | None = None
    status: AppointmentStatus | None = None
    notes: str | None = Field(None, max_length=5000)
    background_color: str | None = Field(None, max_length=20)
    border_color: str | None = Field(None, max_length=20)


class AppointmentSchema(CamelModel):
    """Appointment response schema."""

    id: UUID
    title: str
    start: datetime
    end: datetime
    student_id: UUID
    counselor_id: UUID
    school_id: UUID
    type: str
    status: str
    notes: str | None = None
    background_color: str
    border_color: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("start", "end")
    def serialize_day(self, value: datetime) -> str:
        return calendar_day(value)
