"""
Student Profile Workflow

Each of the five sections moves ``empty -> complete`` independently. Writing a
section replaces it entirely (the caller resupplies the whole payload) and
marks it complete again. ``profileComplete`` is recomputed on every write and
is true when every section except notes is complete.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from schoolcounsel.core.errors import Conflict, NotFound
from schoolcounsel.core.models import ProfileSection, Student
from schoolcounsel.core.validation import validate_payload

from .sections import SECTION_SCHEMAS

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Sections that gate profileComplete (notes is informational only)
GATING_SECTIONS = (
    ProfileSection.PERSONAL_DATA,
    ProfileSection.FAMILY_BACKGROUND,
    ProfileSection.FAMILY_STRUCTURE,
    ProfileSection.EDUCATIONAL_BACKGROUND,
)


def derive_profile_complete(profile_status: Mapping[str, bool]) -> bool:
    return all(profile_status.get(section.value, False) for section in GATING_SECTIONS)


class ProfileWorkflow:
    """Reads and writes one student's profile sections."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_student(self, student_id: UUID) -> Student:
        result = await self.db.execute(
            select(Student).where(Student.id == student_id).options(selectinload(Student.school))
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFound("Student not found")
        return student

    async def update_section(
        self, student: Student, section: ProfileSection, payload: Any
    ) -> Student:
        """Validate ``payload`` and overwrite ``section`` with it.

        Raises:
            ValidationError: every violated field of the section
            Conflict: the student record changed underneath us
        """
        model = validate_payload(SECTION_SCHEMAS[section], payload)

        student.set_section(section, {**model.to_document(), "completed": True})
        profile_status = {**student.profile_status, section.value: True}
        student.profile_status = profile_status
        student.profile_complete = derive_profile_complete(profile_status)

        student_id = student.id
        try:
            await self.db.flush()
        except StaleDataError as e:
            logger.warning(f"Concurrent profile update for student {student_id}")
            raise Conflict("Profile was modified concurrently, please retry") from e

        logger.info(
            f"Student {student.id} saved {section.value} "
            f"(profile_complete={student.profile_complete})"
        )
        return student

    @staticmethod
    def section_result(student: Student, section: ProfileSection) -> dict[str, Any]:
        """Response body for a section write."""
        return {
            section.value: student.get_section(section),
            "profileStatus": dict(student.profile_status),
            "profileComplete": student.profile_complete,
        }

    @staticmethod
    def build_view(student: Student) -> dict[str, Any]:
        """Full profile as shown to the student or their school's staff."""
        completed_sections = {
            section.value: bool((student.get_section(section) or {}).get("completed", False))
            for section in ProfileSection
        }
        school = student.school
        return {
            "basicInfo": {
                "id": str(student.id),
                "firstName": student.first_name,
                "lastName": student.last_name,
                "admissionNumber": student.admission_number,
                "role": "student",
                "active": student.is_active,
                "createdAt": student.created_at.isoformat(),
                "school": {"id": str(school.id), "schoolName": school.school_name}
                if school is not None
                else None,
            },
            "profileStatus": {
                "profileComplete": student.profile_complete,
                "completedSections": completed_sections,
            },
            **{section.value: student.get_section(section) for section in ProfileSection},
        }
