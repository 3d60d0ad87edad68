"""
Directory Pydantic Schemas

Response models for school counselor and student listings.
"""

from datetime import datetime
from uuid import UUID

from schoolcounsel.core.validation import CamelModel


class CounselorSchema(CamelModel):
    """Counselor response schema."""

    id: UUID
    school_id: UUID
    first_name: str
    last_name: str
    email: str
    specialization: str
    is_active: bool
    created_at: datetime


class StudentSchema(CamelModel):
    """Student account summary (profile sections excluded)."""

    id: UUID
    school_id: UUID
    first_name: str
    last_name: str
    admission_number: str
    is_active: bool
    profile_complete: bool
    profile_status: dict[str, bool]
    created_at: datetime
