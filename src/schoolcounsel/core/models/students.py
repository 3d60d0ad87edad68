"""
Student Models

Student accounts and their multi-section counselling profile. Each profile
section is stored as a JSON sub-document carrying its own ``completed`` flag.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from .schools import School

from sqlalchemy import ForeignKey, Index, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONDocument, TimestampMixin, UUIDPrimaryKeyMixin


class ProfileSection(StrEnum):
    """Independently completable parts of a student profile."""

    PERSONAL_DATA = "personalData"
    FAMILY_BACKGROUND = "familyBackground"
    FAMILY_STRUCTURE = "familyStructure"
    EDUCATIONAL_BACKGROUND = "educationalBackground"
    NOTES = "notes"


def empty_profile_status() -> dict[str, bool]:
    return {section.value: False for section in ProfileSection}


class Student(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Student account plus profile sections.

    ``profile_complete`` is derived from ``profile_status`` and is recomputed
    by the profile workflow on every section write.
    """

    __tablename__ = "students"
    __table_args__ = (
        Index("idx_students_school", "school_id"),
        Index("idx_students_profile_complete", "school_id", "profile_complete"),
    )

    school_id: Mapped[UUID] = mapped_column(ForeignKey("schools.id"), nullable=False)

    # Account
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    admission_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, comment="Login identifier"
    )
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Profile workflow state
    profile_complete: Mapped[bool] = mapped_column(default=False)
    profile_status: Mapped[dict[str, bool]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=empty_profile_status,
        comment="Section name -> completed flag",
    )

    # Sections (NULL until first written)
    personal_data: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    family_background: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    family_structure: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    educational_background: Mapped[dict[str, Any] | None] = mapped_column(
        JSONDocument, nullable=True
    )
    notes: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    school: Mapped[School] = relationship(back_populates="students")

    SECTION_ATTRIBUTES = {
        ProfileSection.PERSONAL_DATA: "personal_data",
        ProfileSection.FAMILY_BACKGROUND: "family_background",
        ProfileSection.FAMILY_STRUCTURE: "family_structure",
        ProfileSection.EDUCATIONAL_BACKGROUND: "educational_background",
        ProfileSection.NOTES: "notes",
    }

    def get_section(self, section: ProfileSection) -> dict[str, Any] | None:
        return getattr(self, self.SECTION_ATTRIBUTES[section])

    def set_section(self, section: ProfileSection, document: dict[str, Any]) -> None:
        setattr(self, self.SECTION_ATTRIBUTES[section], document)


@event.listens_for(Student, "init", propagate=True)
def receive_init_student(target, _args, kwargs):  # type: ignore[no-untyped-def]
    """Give in-memory students an empty profile before the first flush."""
    if "profile_status" not in kwargs:
        target.profile_status = empty_profile_status()
    if "profile_complete" not in kwargs:
        target.profile_complete = False
