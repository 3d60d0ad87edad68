"""
Assessment Models

Counselor-authored psychosocial assessments. One assessment belongs to a
single (school, counselor, student) triple and holds eight JSON sections plus
an overall remark.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from .schools import School
    from .students import Student
    from .users import Counselor

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONDocument, TimestampMixin, UUIDPrimaryKeyMixin


class AssessmentStatus(StrEnum):
    ONGOING = "ongoing"
    COMPLETED = "completed"
    LEGACY_FALSE = "false"


class AssessmentSection(StrEnum):
    """The fixed set of section names accepted by section updates."""

    PHYSICAL_DEVELOPMENT = "physicalDevelopment"
    PHYSICAL_DISABILITIES = "physicalDisabilities"
    HEALTH_RECORDS = "healthRecords"
    DISCIPLINE_RECORDS = "disciplineRecords"
    STANDARDIZED_TESTS = "standardizedTests"
    ACADEMIC_RECORDS = "academicRecords"
    OBSERVATIONS = "observations"
    VOCATIONAL_INTERESTS = "vocationalInterests"


# Statuses that count as "the student already has an assessment"
ACTIVE_STATUSES = (AssessmentStatus.ONGOING.value, AssessmentStatus.COMPLETED.value)
_ACTIVE_PREDICATE = text("status IN ('ongoing', 'completed')")


class Assessment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Multi-section assessment moving ``ongoing -> completed``."""

    __tablename__ = "assessments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ongoing', 'completed', 'false')", name="check_assessment_status"
        ),
        Index("idx_assessments_school", "school_id"),
        Index("idx_assessments_counselor", "counselor_id"),
        Index("idx_assessments_student", "student_id"),
        Index("idx_assessments_status", "status"),
        # At most one ongoing/completed assessment per student
        Index(
            "uq_assessments_active_student",
            "student_id",
            unique=True,
            postgresql_where=_ACTIVE_PREDICATE,
            sqlite_where=_ACTIVE_PREDICATE,
        ),
    )

    school_id: Mapped[UUID] = mapped_column(ForeignKey("schools.id"), nullable=False)
    counselor_id: Mapped[UUID] = mapped_column(ForeignKey("counselors.id"), nullable=False)
    student_id: Mapped[UUID] = mapped_column(ForeignKey("students.id"), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AssessmentStatus.ONGOING.value
    )

    # Sections
    physical_development: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    physical_disabilities: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    health_records: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    discipline_records: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    standardized_tests: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    academic_records: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    observations: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    vocational_interests: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    overall_remark: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)

    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    school: Mapped[School] = relationship()
    counselor: Mapped[Counselor] = relationship()
    student: Mapped[Student] = relationship()

    SECTION_ATTRIBUTES = {
        AssessmentSection.PHYSICAL_DEVELOPMENT: "physical_development",
        AssessmentSection.PHYSICAL_DISABILITIES: "physical_disabilities",
        AssessmentSection.HEALTH_RECORDS: "health_records",
        AssessmentSection.DISCIPLINE_RECORDS: "discipline_records",
        AssessmentSection.STANDARDIZED_TESTS: "standardized_tests",
        AssessmentSection.ACADEMIC_RECORDS: "academic_records",
        AssessmentSection.OBSERVATIONS: "observations",
        AssessmentSection.VOCATIONAL_INTERESTS: "vocational_interests",
    }

    @property
    def is_completed(self) -> bool:
        return self.status == AssessmentStatus.COMPLETED

    def get_section(self, section: AssessmentSection) -> dict[str, Any]:
        return getattr(self, self.SECTION_ATTRIBUTES[section]) or {}

    def set_section(self, section: AssessmentSection, document: dict[str, Any]) -> None:
        setattr(self, self.SECTION_ATTRIBUTES[section], document)
