"""
Assessment Pydantic Schemas

Request and response models for assessment API endpoints.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from schoolcounsel.core.validation import CamelModel


class AssessmentCreate(CamelModel):
    """Open an assessment for one student."""

    school_id: UUID
    counselor_id: UUID
    student_id: UUID


class SectionUpdate(CamelModel):
    """Partial update of one named section."""

    section: str = Field(..., min_length=1, description="One of the eight section names")
    data: dict[str, Any]


class CompleteRequest(CamelModel):
    overall_remark: str | None = Field(None, max_length=5000)


class AssessmentSchema(CamelModel):
    """Assessment response schema."""

    id: UUID
    school_id: UUID
    counselor_id: UUID
    student_id: UUID
    status: str

    physical_development: dict[str, Any]
    physical_disabilities: dict[str, Any]
    health_records: dict[str, Any]
    discipline_records: dict[str, Any]
    standardized_tests: dict[str, Any]
    academic_records: dict[str, Any]
    observations: dict[str, Any]
    vocational_interests: dict[str, Any]
    overall_remark: dict[str, Any]

    version_id: int
    created_at: datetime
    updated_at: datetime


class AssessmentStats(CamelModel):
    total: int = 0
    ongoing: int = 0
    completed: int = 0
    legacy_false: int = Field(0, alias="false")
