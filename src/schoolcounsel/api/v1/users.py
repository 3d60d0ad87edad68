"""
School Directory API

Tenant-scoped listings of counselors and students. Admins see their whole
school; counselors see colleagues plus the active students whose profile is
complete.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcounsel.access import Action, Principal, Resource, ResourceRef, authorize
from schoolcounsel.api.deps import get_current_principal
from schoolcounsel.core.database import get_db
from schoolcounsel.core.errors import NotFound
from schoolcounsel.core.models import Counselor, Student
from schoolcounsel.core.schemas.common import Envelope
from schoolcounsel.core.schemas.users import CounselorSchema, StudentSchema

router = APIRouter()


# ============================================================================
# Admin / staff directory
# ============================================================================


@router.get("/schools/{school_id}/counselors", response_model=Envelope[list[CounselorSchema]])
async def list_school_counselors(
    school_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[CounselorSchema]]:
    authorize(
        principal, Resource.COUNSELOR_DIRECTORY, Action.LIST, ResourceRef.in_school(school_id)
    )

    result = await db.execute(
        select(Counselor)
        .where(Counselor.school_id == school_id)
        .order_by(Counselor.last_name, Counselor.first_name)
    )
    return Envelope(data=[CounselorSchema.model_validate(c) for c in result.scalars().all()])


@router.get(
    "/schools/{school_id}/counselors/{counselor_id}", response_model=Envelope[CounselorSchema]
)
async def get_school_counselor(
    school_id: UUID,
    counselor_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[CounselorSchema]:
    authorize(
        principal, Resource.COUNSELOR_DIRECTORY, Action.READ, ResourceRef.in_school(school_id)
    )

    counselor = await db.get(Counselor, counselor_id)
    if counselor is None or counselor.school_id != school_id:
        raise NotFound("Counselor not found in this school")
    return Envelope(data=CounselorSchema.model_validate(counselor))


@router.get("/schools/{school_id}/students", response_model=Envelope[list[StudentSchema]])
async def list_school_students(
    school_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[StudentSchema]]:
    authorize(principal, Resource.STUDENT_DIRECTORY, Action.LIST, ResourceRef.in_school(school_id))

    result = await db.execute(
        select(Student)
        .where(Student.school_id == school_id)
        .order_by(Student.last_name, Student.first_name)
    )
    return Envelope(data=[StudentSchema.model_validate(s) for s in result.scalars().all()])


@router.get("/schools/{school_id}/students/{student_id}", response_model=Envelope[StudentSchema])
async def get_school_student(
    school_id: UUID,
    student_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[StudentSchema]:
    authorize(principal, Resource.STUDENT_DIRECTORY, Action.READ, ResourceRef.in_school(school_id))

    student = await db.get(Student, student_id)
    if student is None or student.school_id != school_id:
        raise NotFound("Student not found in this school")
    return Envelope(data=StudentSchema.model_validate(student))


# ============================================================================
# Counselor roster (active students with a complete profile)
# ============================================================================


def _roster_query(school_id: UUID) -> Select[tuple[Student]]:
    return select(Student).where(
        Student.school_id == school_id,
        Student.is_active.is_(True),
        Student.profile_complete.is_(True),
    )


@router.get(
    "/counselor/{counselor_id}/schools/{school_id}/students",
    response_model=Envelope[list[StudentSchema]],
)
async def list_counselor_students(
    counselor_id: UUID,
    school_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[StudentSchema]]:
    """Students a counselor can work with: active, profile complete, same school."""
    authorize(
        principal,
        Resource.STUDENT_ROSTER,
        Action.LIST,
        ResourceRef.owned_by(counselor_id, school_id=school_id),
    )

    result = await db.execute(
        _roster_query(school_id).order_by(Student.last_name, Student.first_name)
    )
    return Envelope(data=[StudentSchema.model_validate(s) for s in result.scalars().all()])


@router.get(
    "/counselor/{counselor_id}/schools/{school_id}/students/{student_id}",
    response_model=Envelope[StudentSchema],
)
async def get_counselor_student(
    counselor_id: UUID,
    school_id: UUID,
    student_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[StudentSchema]:
    authorize(
        principal,
        Resource.STUDENT_ROSTER,
        Action.READ,
        ResourceRef.owned_by(counselor_id, school_id=school_id),
    )

    result = await db.execute(_roster_query(school_id).where(Student.id == student_id))
    student = result.scalar_one_or_none()
    if student is None:
        raise NotFound("Student not found or profile incomplete")
    return Envelope(data=StudentSchema.model_validate(student))
