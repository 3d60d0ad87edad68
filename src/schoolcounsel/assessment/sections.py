"""
Assessment Section Schemas

Section updates are merged into what is already stored, so every field here is
optional; only the keys the caller actually sent are applied. List entries
(discipline records, tests, classes, interests) are validated in full.
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Any

from pydantic import Field, StringConstraints

from schoolcounsel.core.models import AssessmentSection
from schoolcounsel.core.validation import CamelModel, SectionSchema

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Rating = Annotated[int, Field(ge=1, le=5)]


class PhysicalDevelopment(SectionSchema):
    height: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    other_features: str | None = None


class PhysicalDisabilities(SectionSchema):
    status: bool | None = None
    partial_deafness: bool | None = None
    partial_blindness: bool | None = None
    short_sightedness: bool | None = None
    long_sightedness: bool | None = None
    stammering: bool | None = None
    squinting: bool | None = None
    physical_impairment: bool | None = None
    other: str | None = None


class HealthRecords(SectionSchema):
    status: bool | None = None
    nature_of_problem: str | None = None
    causes: str | None = None
    referrals: str | None = None


class DisciplineRecord(CamelModel):
    date: dt.date
    offence: RequiredStr
    action_taken: RequiredStr


class DisciplineRecords(SectionSchema):
    status: bool | None = None
    records: list[DisciplineRecord] | None = None


class StandardizedTest(CamelModel):
    test_name: RequiredStr
    test_description: RequiredStr
    score: RequiredStr | float
    interpretation: RequiredStr
    discussion: str | None = None
    date: dt.date


class StandardizedTests(SectionSchema):
    status: bool | None = None
    tests: list[StandardizedTest] | None = None


class SubjectScore(CamelModel):
    name: RequiredStr
    score: float


class AcademicClass(CamelModel):
    name: RequiredStr
    subjects: list[SubjectScore] = Field(default_factory=list)


class AcademicRecords(SectionSchema):
    classes: list[AcademicClass] | None = None


class Observations(SectionSchema):
    """Behaviour and skill ratings on a 1 (poor) to 5 (excellent) scale."""

    status: bool | None = None
    punctuality: Rating | None = None
    attendance: Rating | None = None
    reliability: Rating | None = None
    politeness: Rating | None = None
    honesty: Rating | None = None
    relationship_with_staff: Rating | None = None
    relationship_with_peers: Rating | None = None
    self_control: Rating | None = None
    cooperation: Rating | None = None
    attentiveness: Rating | None = None
    initiative: Rating | None = None
    organization: Rating | None = None
    perseverance: Rating | None = None
    sense_of_leadership: Rating | None = None
    respect_for_authority: Rating | None = None
    sense_of_responsibility: Rating | None = None
    industry: Rating | None = None
    games: Rating | None = None
    sports: Rating | None = None
    gymnastics: Rating | None = None
    handling_of_tools: Rating | None = None
    drawing_painting: Rating | None = None
    craft: Rating | None = None
    musical_skills: Rating | None = None
    speech_fluency: Rating | None = None
    handling_of_laboratory_equipment: Rating | None = None


class VocationalInterest(CamelModel):
    name: RequiredStr
    description: RequiredStr
    counselor_comments: str | None = None


class VocationalInterests(SectionSchema):
    status: bool | None = None
    interests: list[VocationalInterest] | None = None


SECTION_SCHEMAS: dict[AssessmentSection, type[SectionSchema]] = {
    AssessmentSection.PHYSICAL_DEVELOPMENT: PhysicalDevelopment,
    AssessmentSection.PHYSICAL_DISABILITIES: PhysicalDisabilities,
    AssessmentSection.HEALTH_RECORDS: HealthRecords,
    AssessmentSection.DISCIPLINE_RECORDS: DisciplineRecords,
    AssessmentSection.STANDARDIZED_TESTS: StandardizedTests,
    AssessmentSection.ACADEMIC_RECORDS: AcademicRecords,
    AssessmentSection.OBSERVATIONS: Observations,
    AssessmentSection.VOCATIONAL_INTERESTS: VocationalInterests,
}


def default_sections() -> dict[AssessmentSection, dict[str, Any]]:
    """Section documents a new assessment starts with."""
    return {
        AssessmentSection.PHYSICAL_DEVELOPMENT: {},
        AssessmentSection.PHYSICAL_DISABILITIES: {"status": False},
        AssessmentSection.HEALTH_RECORDS: {"status": False},
        AssessmentSection.DISCIPLINE_RECORDS: {"status": False, "records": []},
        AssessmentSection.STANDARDIZED_TESTS: {"status": False, "tests": []},
        AssessmentSection.ACADEMIC_RECORDS: {"classes": []},
        AssessmentSection.OBSERVATIONS: {"status": False},
        AssessmentSection.VOCATIONAL_INTERESTS: {"status": False, "interests": []},
    }
