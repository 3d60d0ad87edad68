"""
Assessment Workflow Engine

Lifecycle: ``ongoing -> completed`` (terminal).

- A student may hold at most one ongoing/completed assessment. The rule is
  enforced by a unique partial index; the pre-check below only produces a
  friendlier error in the common case.
- Section updates shallow-merge into the stored section and are refused once
  the assessment is completed.
- Completion requires the standardized tests section to be marked done and to
  hold at least one test.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from schoolcounsel.core.errors import (
    AlreadyCompleted,
    Conflict,
    Immutable,
    IncompleteMandatorySection,
    InvalidSection,
    NotFound,
)
from schoolcounsel.core.models import (
    ACTIVE_STATUSES,
    Assessment,
    AssessmentSection,
    AssessmentStatus,
    Counselor,
    Student,
)
from schoolcounsel.core.validation import validate_payload

from .sections import SECTION_SCHEMAS, default_sections

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def parse_section(name: str) -> AssessmentSection:
    try:
        return AssessmentSection(name)
    except ValueError as e:
        raise InvalidSection(f"Invalid section specified: {name}") from e


def has_mandatory_section(assessment: Assessment) -> bool:
    """Standardized tests must be marked done and hold at least one test."""
    tests_section = assessment.get_section(AssessmentSection.STANDARDIZED_TESTS)
    return bool(tests_section.get("status")) and len(tests_section.get("tests") or []) >= 1


def empty_stats() -> dict[str, int]:
    return {"total": 0, **{status.value: 0 for status in AssessmentStatus}}


@dataclass
class Page:
    """One page of a listing plus the numbers a client needs to paginate."""

    items: list[Assessment]
    page: int
    limit: int
    total: int

    def pagination(self) -> dict[str, Any]:
        return {
            "currentPage": self.page,
            "totalPages": math.ceil(self.total / self.limit) if self.limit else 0,
            "totalCount": self.total,
            "hasNextPage": (self.page - 1) * self.limit + len(self.items) < self.total,
            "hasPrevPage": self.page > 1,
        }


class AssessmentWorkflow:
    """Creates, edits, completes and reports on assessments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, assessment_id: UUID) -> Assessment:
        assessment = await self.db.get(Assessment, assessment_id)
        if assessment is None:
            raise NotFound("Assessment not found")
        return assessment

    async def create(self, school_id: UUID, counselor_id: UUID, student_id: UUID) -> Assessment:
        """Open a new assessment with every section at its default.

        Raises:
            NotFound: the counselor or student is not in ``school_id``
            Conflict: the student already has an ongoing or completed assessment
        """
        counselor = await self.db.get(Counselor, counselor_id)
        if counselor is None or counselor.school_id != school_id:
            raise NotFound("Counselor not found")
        student = await self.db.get(Student, student_id)
        if student is None or student.school_id != school_id:
            raise NotFound("Student not found")

        existing = await self.db.execute(
            select(Assessment.id).where(
                Assessment.student_id == student_id,
                Assessment.status.in_(ACTIVE_STATUSES),
            )
        )
        if existing.first() is not None:
            raise Conflict("An active assessment already exists for this student")

        assessment = Assessment(
            school_id=school_id,
            counselor_id=counselor_id,
            student_id=student_id,
            status=AssessmentStatus.ONGOING.value,
            overall_remark={"remark": ""},
        )
        for section, document in default_sections().items():
            assessment.set_section(section, document)

        self.db.add(assessment)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost the race against a concurrent create for the same student
            await self.db.rollback()
            raise Conflict("An active assessment already exists for this student") from e

        logger.info(f"Assessment {assessment.id} opened for student {student_id}")
        return assessment

    async def update_section(
        self, assessment: Assessment, section: AssessmentSection | str, payload: Any
    ) -> Assessment:
        """Shallow-merge ``payload`` into one section.

        Keys absent from ``payload`` keep their stored values.

        Raises:
            InvalidSection: ``section`` is not one of the eight section names
            Immutable: the assessment is completed
            ValidationError: the payload does not fit the section
        """
        section = parse_section(section) if isinstance(section, str) else section
        if assessment.is_completed:
            raise Immutable()

        update = validate_payload(SECTION_SCHEMAS[section], payload)
        merged = {**assessment.get_section(section), **update.to_document(exclude_unset=True)}
        assessment.set_section(section, merged)

        await self._flush(assessment)
        logger.info(f"Assessment {assessment.id} section {section.value} updated")
        return assessment

    async def complete(
        self, assessment: Assessment, overall_remark: str | None = None
    ) -> Assessment:
        """Move the assessment to its terminal ``completed`` state.

        Raises:
            AlreadyCompleted: it is already completed
            IncompleteMandatorySection: standardized tests missing
        """
        if assessment.is_completed:
            raise AlreadyCompleted()
        if not has_mandatory_section(assessment):
            raise IncompleteMandatorySection()

        assessment.status = AssessmentStatus.COMPLETED.value
        if overall_remark:
            assessment.overall_remark = {
                **(assessment.overall_remark or {}),
                "remark": overall_remark,
            }

        await self._flush(assessment)
        logger.info(f"Assessment {assessment.id} completed")
        return assessment

    async def stats(
        self, school_id: UUID | None = None, counselor_id: UUID | None = None
    ) -> dict[str, int]:
        """Count assessments per status. Statuses with no rows report 0."""
        stmt = select(Assessment.status, func.count()).group_by(Assessment.status)
        if school_id is not None:
            stmt = stmt.where(Assessment.school_id == school_id)
        if counselor_id is not None:
            stmt = stmt.where(Assessment.counselor_id == counselor_id)

        tally = empty_stats()
        for status, count in (await self.db.execute(stmt)).all():
            tally[status] = count
            tally["total"] += count
        return tally

    async def list_assessments(
        self,
        *,
        school_id: UUID | None = None,
        counselor_id: UUID | None = None,
        student_id: UUID | None = None,
        status: AssessmentStatus | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page:
        """Newest-first listing filtered by any combination of owners."""
        filters = []
        if school_id is not None:
            filters.append(Assessment.school_id == school_id)
        if counselor_id is not None:
            filters.append(Assessment.counselor_id == counselor_id)
        if student_id is not None:
            filters.append(Assessment.student_id == student_id)
        if status is not None:
            filters.append(Assessment.status == status.value)

        total = (
            await self.db.execute(select(func.count()).select_from(Assessment).where(*filters))
        ).scalar_one()

        stmt = select(Assessment).where(*filters).order_by(desc(Assessment.created_at))
        if limit is not None:
            stmt = stmt.offset((page - 1) * limit).limit(limit)
        items = list((await self.db.execute(stmt)).scalars().all())

        return Page(items=items, page=page, limit=limit or max(total, 1), total=total)

    async def _flush(self, assessment: Assessment) -> None:
        # Attributes are unreadable once a failed flush has rolled the session back
        assessment_id = assessment.id
        try:
            await self.db.flush()
        except StaleDataError as e:
            logger.warning(f"Concurrent update of assessment {assessment_id}")
            raise Conflict("Assessment was modified concurrently, please retry") from e
