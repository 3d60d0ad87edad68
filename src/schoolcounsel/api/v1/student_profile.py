"""
Student Profile API

Students fill in their own profile one section at a time; staff and the school
admin read profiles of students in their school.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcounsel.access import (
    Action,
    Principal,
    Resource,
    ResourceRef,
    allowed_roles,
    authorize,
    role_gate,
)
from schoolcounsel.api.deps import get_current_principal
from schoolcounsel.core.database import get_db
from schoolcounsel.core.models import ProfileSection
from schoolcounsel.core.schemas.common import Envelope
from schoolcounsel.profile import ProfileWorkflow

router = APIRouter()

SECTION_LABELS = {
    ProfileSection.PERSONAL_DATA: "Personal data",
    ProfileSection.FAMILY_BACKGROUND: "Family background",
    ProfileSection.FAMILY_STRUCTURE: "Family structure",
    ProfileSection.EDUCATIONAL_BACKGROUND: "Educational background",
    ProfileSection.NOTES: "Notes",
}


async def _save_section(
    section: ProfileSection, payload: dict[str, Any], principal: Principal, db: AsyncSession
) -> Envelope[dict[str, Any]]:
    # Staff and admins are refused before any student lookup
    role_gate(principal, allowed_roles(Resource.PROFILE_SECTION, Action.UPDATE))

    workflow = ProfileWorkflow(db)
    student = await workflow.get_student(principal.id)
    authorize(
        principal,
        Resource.PROFILE_SECTION,
        Action.UPDATE,
        ResourceRef.owned_by(student.id, school_id=student.school_id),
    )
    await workflow.update_section(student, section, payload)

    return Envelope(
        message=f"{SECTION_LABELS[section]} updated successfully",
        data=ProfileWorkflow.section_result(student, section),
    )


async def _view(
    student_id: UUID, principal: Principal, db: AsyncSession
) -> Envelope[dict[str, Any]]:
    student = await ProfileWorkflow(db).get_student(student_id)
    authorize(
        principal,
        Resource.PROFILE,
        Action.READ,
        ResourceRef.owned_by(student.id, school_id=student.school_id),
    )
    return Envelope(data=ProfileWorkflow.build_view(student))


@router.get("", response_model=Envelope[dict[str, Any]])
async def get_own_profile(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    """The calling student's full profile."""
    return await _view(principal.id, principal, db)


@router.get("/{student_id}", response_model=Envelope[dict[str, Any]])
async def get_student_profile(
    student_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    """A student's full profile: the student themself, or staff/admin of their school."""
    return await _view(student_id, principal, db)


@router.put("/personal-data", response_model=Envelope[dict[str, Any]])
async def update_personal_data(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    return await _save_section(ProfileSection.PERSONAL_DATA, payload, principal, db)


@router.put("/family-background", response_model=Envelope[dict[str, Any]])
async def update_family_background(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    return await _save_section(ProfileSection.FAMILY_BACKGROUND, payload, principal, db)


@router.put("/family-structure", response_model=Envelope[dict[str, Any]])
async def update_family_structure(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    return await _save_section(ProfileSection.FAMILY_STRUCTURE, payload, principal, db)


@router.put("/educational-background", response_model=Envelope[dict[str, Any]])
async def update_educational_background(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    return await _save_section(ProfileSection.EDUCATIONAL_BACKGROUND, payload, principal, db)


@router.put("/notes", response_model=Envelope[dict[str, Any]])
async def update_notes(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[dict[str, Any]]:
    return await _save_section(ProfileSection.NOTES, payload, principal, db)
