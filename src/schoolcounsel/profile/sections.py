"""
Student Profile Section Schemas

One schema per profile section. Field rules are declared on the models;
rules spanning several fields live in ``cross_field_violations``.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal

from pydantic import Field, StringConstraints, field_validator, model_validator

from schoolcounsel.core.errors import Violation
from schoolcounsel.core.models import ProfileSection
from schoolcounsel.core.validation import (
    MIN_YEAR,
    CamelModel,
    SectionSchema,
    current_year,
    year_in_range,
)

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

MotherPosition = Literal["First Wife", "Second Wife", "Third Wife", "Fourth Wife", "other"]
ParentsStatus = Literal["Living Together", "Living Apart", "Separated", "Divorced"]


# ============================================================================
# Personal Data
# ============================================================================


class PersonalDataSection(SectionSchema):
    cross_field_inputs = frozenset({"change_of_name", "change_of_name_date"})

    last_name: RequiredStr
    first_name: RequiredStr
    gender: Literal["Male", "Female"]
    admission_number: RequiredStr
    year_of_admission: int
    college_house: str | None = None
    date_of_birth: date
    place_of_birth: RequiredStr
    address: RequiredStr
    contact_address: RequiredStr
    state_of_origin: RequiredStr
    languages_spoken: str | None = None
    countries_visited: str | None = None
    religion: RequiredStr
    nationality: RequiredStr
    change_of_name: str | None = None
    change_of_name_date: date | None = None
    evidence: str | None = Field(default=None, description="File path or URL")

    @model_validator(mode="before")
    @classmethod
    def accept_surname(cls, data: Any) -> Any:
        """Forms label the field "surname"; store it as lastName."""
        if isinstance(data, dict) and "surname" in data and "lastName" not in data:
            data = {**data, "lastName": data["surname"]}
        return data

    @field_validator("year_of_admission")
    @classmethod
    def check_year_of_admission(cls, v: int) -> int:
        if not year_in_range(v):
            raise ValueError(f"Year of admission must be between {MIN_YEAR} and {current_year()}")
        return v

    def cross_field_violations(self) -> list[Violation]:
        if self.change_of_name and self.change_of_name_date is None:
            return [
                Violation(
                    field="changeOfNameDate",
                    message="changeOfNameDate is required when changeOfName is given",
                )
            ]
        return []


# ============================================================================
# Family Background
# ============================================================================


class ParentRecord(CamelModel):
    """Father, mother or guardian. Every field but dateOfBirth is required."""

    name: RequiredStr
    contact_address: RequiredStr
    residential_address: RequiredStr
    phone: RequiredStr
    state: RequiredStr
    nationality: RequiredStr
    religion: RequiredStr
    education_level: RequiredStr
    occupation: RequiredStr
    deceased: bool
    date_of_birth: date | None = None


class FamilyBackgroundSection(SectionSchema):
    cross_field_inputs = frozenset({"father", "mother", "guardian"})

    father: ParentRecord | None = None
    mother: ParentRecord | None = None
    guardian: ParentRecord | None = None

    def cross_field_violations(self) -> list[Violation]:
        if self.father is None and self.mother is None and self.guardian is None:
            return [
                Violation(
                    field="familyBackground",
                    message="At least one of father, mother or guardian is required",
                )
            ]
        return []


# ============================================================================
# Family Structure
# ============================================================================


class Sibling(CamelModel):
    name: RequiredStr
    age: int = Field(ge=0)
    relationship: RequiredStr
    occupation: str | None = None
    education: str | None = None


class FamilyStructureSection(SectionSchema):
    cross_field_inputs = frozenset(
        {"total_siblings", "male_siblings", "female_siblings", "position_among_siblings"}
    )

    father_wives: int = Field(ge=1)
    mother_position: MotherPosition
    total_siblings: int = Field(ge=0)
    male_siblings: int = Field(ge=0)
    female_siblings: int = Field(ge=0)
    position_among_siblings: int = Field(ge=1)
    parents_status: ParentsStatus
    siblings: list[Sibling] = Field(default_factory=list)
    family_challenges: str | None = None

    def cross_field_violations(self) -> list[Violation]:
        violations = []
        if self.total_siblings != self.male_siblings + self.female_siblings:
            violations.append(
                Violation(
                    field="totalSiblings",
                    message="Total siblings must equal the sum of male and female siblings",
                )
            )
        if self.position_among_siblings > self.total_siblings:
            violations.append(
                Violation(
                    field="positionAmongSiblings",
                    message="Position among siblings cannot be greater than total siblings",
                )
            )
        return violations


# ============================================================================
# Educational Background
# ============================================================================


class SchoolAttended(CamelModel):
    school_name: str | None = None
    admission_year: int | None = None
    graduation_year: int | None = None
    leaving_reason: str | None = None
    certificate_number: str | None = None


class SchoolLevels(CamelModel):
    primary: SchoolAttended = Field(default_factory=SchoolAttended)
    junior_secondary: SchoolAttended = Field(default_factory=SchoolAttended)
    senior_secondary: SchoolAttended = Field(default_factory=SchoolAttended)


SCHOOL_LEVEL_LABELS = (
    ("primary", "primary", "Primary School"),
    ("junior_secondary", "juniorSecondary", "Junior Secondary School"),
    ("senior_secondary", "seniorSecondary", "Senior Secondary School"),
)


def _school_level_violation(level: SchoolAttended, key: str, label: str) -> Violation | None:
    for attr, wire in (("admission_year", "admissionYear"), ("graduation_year", "graduationYear")):
        year = getattr(level, attr)
        if year is not None and not year_in_range(year):
            return Violation(
                field=f"schools.{key}.{wire}",
                message=f"{label}: year must be between {MIN_YEAR} and {current_year()}",
            )

    if level.admission_year is not None and level.graduation_year is not None:
        if level.admission_year > level.graduation_year:
            return Violation(
                field=f"schools.{key}.admissionYear",
                message=f"{label}: Admission year must be before graduation year",
            )
    return None


class EducationalBackgroundSection(SectionSchema):
    cross_field_inputs = frozenset({"schools"})

    schools: SchoolLevels = Field(default_factory=SchoolLevels)

    def cross_field_violations(self) -> list[Violation]:
        # Levels are checked in order and only the first offending one is reported
        for attr, key, label in SCHOOL_LEVEL_LABELS:
            violation = _school_level_violation(getattr(self.schools, attr), key, label)
            if violation is not None:
                return [violation]
        return []


# ============================================================================
# Notes
# ============================================================================


class NotesSection(SectionSchema):
    additional_notes: str | None = None
    counselor_notes: str | None = None


SECTION_SCHEMAS: dict[ProfileSection, type[SectionSchema]] = {
    ProfileSection.PERSONAL_DATA: PersonalDataSection,
    ProfileSection.FAMILY_BACKGROUND: FamilyBackgroundSection,
    ProfileSection.FAMILY_STRUCTURE: FamilyStructureSection,
    ProfileSection.EDUCATIONAL_BACKGROUND: EducationalBackgroundSection,
    ProfileSection.NOTES: NotesSection,
}
