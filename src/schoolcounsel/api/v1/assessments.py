"""
Assessment API Endpoints

Counselor-authored assessments: creation, section edits, completion,
statistics and school/counselor/student listings.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcounsel.access import Action, Principal, Resource, ResourceRef, authorize
from schoolcounsel.api.deps import get_current_principal
from schoolcounsel.assessment import AssessmentWorkflow, Page, parse_section
from schoolcounsel.config import settings
from schoolcounsel.core.database import get_db
from schoolcounsel.core.errors import NotFound
from schoolcounsel.core.models import AssessmentStatus, Counselor, Student
from schoolcounsel.core.schemas.assessments import (
    AssessmentCreate,
    AssessmentSchema,
    AssessmentStats,
    CompleteRequest,
    SectionUpdate,
)
from schoolcounsel.core.schemas.common import Envelope, PaginatedEnvelope

router = APIRouter()


def _paginated(page: Page, message: str) -> PaginatedEnvelope[list[AssessmentSchema]]:
    return PaginatedEnvelope(
        message=message,
        data=[AssessmentSchema.model_validate(a) for a in page.items],
        pagination=page.pagination(),
    )


@router.post(
    "", response_model=Envelope[AssessmentSchema], status_code=status.HTTP_201_CREATED
)
async def create_assessment(
    data: AssessmentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AssessmentSchema]:
    """Open an assessment for a student with every section at its default."""
    authorize(principal, Resource.ASSESSMENT, Action.CREATE, ResourceRef.in_school(data.school_id))

    assessment = await AssessmentWorkflow(db).create(
        school_id=data.school_id, counselor_id=data.counselor_id, student_id=data.student_id
    )
    return Envelope(
        message="Assessment created successfully!",
        data=AssessmentSchema.model_validate(assessment),
    )


@router.get("/stats", response_model=Envelope[AssessmentStats])
async def get_assessment_stats(
    school_id: UUID | None = Query(None, alias="schoolId"),
    counselor_id: UUID | None = Query(None, alias="counselorId"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AssessmentStats]:
    """Assessment counts per status.

    Scoped to the caller's school unless ``schoolId`` names one (which must
    then be the caller's school), optionally narrowed to one counselor.
    """
    scope = school_id or principal.school_id
    authorize(principal, Resource.ASSESSMENT_STATS, Action.READ, ResourceRef.in_school(scope))

    tally = await AssessmentWorkflow(db).stats(school_id=scope, counselor_id=counselor_id)
    return Envelope(data=AssessmentStats.model_validate(tally))


@router.get("/school/{school_id}", response_model=PaginatedEnvelope[list[AssessmentSchema]])
async def list_school_assessments(
    school_id: UUID,
    status_filter: AssessmentStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> PaginatedEnvelope[list[AssessmentSchema]]:
    """Every assessment in a school, newest first (school admin only)."""
    authorize(principal, Resource.ASSESSMENT, Action.LIST, ResourceRef.in_school(school_id))

    result = await AssessmentWorkflow(db).list_assessments(
        school_id=school_id, status=status_filter, page=page, limit=limit
    )
    return _paginated(result, "School assessments retrieved successfully")


@router.get(
    "/counselor/{counselor_id}", response_model=PaginatedEnvelope[list[AssessmentSchema]]
)
async def list_counselor_assessments(
    counselor_id: UUID,
    status_filter: AssessmentStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> PaginatedEnvelope[list[AssessmentSchema]]:
    """A counselor's assessments. Counselors see their own; admins any in their school."""
    counselor = await db.get(Counselor, counselor_id)
    if counselor is None:
        raise NotFound("Counselor not found")
    authorize(
        principal,
        Resource.COUNSELOR_ASSESSMENTS,
        Action.LIST,
        ResourceRef.owned_by(counselor.id, school_id=counselor.school_id),
    )

    result = await AssessmentWorkflow(db).list_assessments(
        counselor_id=counselor_id, status=status_filter, page=page, limit=limit
    )
    return _paginated(result, "Counselor assessments retrieved successfully")


@router.get("/student/{student_id}", response_model=Envelope[list[AssessmentSchema]])
async def list_student_assessments(
    student_id: UUID,
    status_filter: AssessmentStatus | None = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[AssessmentSchema]]:
    student = await db.get(Student, student_id)
    if student is None:
        raise NotFound("Student not found")
    authorize(principal, Resource.ASSESSMENT, Action.READ, ResourceRef.in_school(student.school_id))

    result = await AssessmentWorkflow(db).list_assessments(
        student_id=student_id, status=status_filter
    )
    return Envelope(
        message="Student assessments retrieved successfully",
        data=[AssessmentSchema.model_validate(a) for a in result.items],
    )


@router.get("/{assessment_id}", response_model=Envelope[AssessmentSchema])
async def get_assessment(
    assessment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AssessmentSchema]:
    assessment = await AssessmentWorkflow(db).get(assessment_id)
    authorize(
        principal, Resource.ASSESSMENT, Action.READ, ResourceRef.in_school(assessment.school_id)
    )
    return Envelope(data=AssessmentSchema.model_validate(assessment))


@router.put("/{assessment_id}/section", response_model=Envelope[AssessmentSchema])
async def update_assessment_section(
    assessment_id: UUID,
    data: SectionUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AssessmentSchema]:
    """Shallow-merge ``data`` into one section of an ongoing assessment."""
    section = parse_section(data.section)

    workflow = AssessmentWorkflow(db)
    assessment = await workflow.get(assessment_id)
    authorize(
        principal, Resource.ASSESSMENT, Action.UPDATE, ResourceRef.in_school(assessment.school_id)
    )

    await workflow.update_section(assessment, section, data.data)
    return Envelope(
        message=f"{section.value} updated successfully",
        data=AssessmentSchema.model_validate(assessment),
    )


@router.put("/{assessment_id}/complete", response_model=Envelope[AssessmentSchema])
async def complete_assessment(
    assessment_id: UUID,
    data: CompleteRequest | None = None,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AssessmentSchema]:
    """Finish an assessment. Requires at least one standardized test."""
    workflow = AssessmentWorkflow(db)
    assessment = await workflow.get(assessment_id)
    authorize(
        principal, Resource.ASSESSMENT, Action.UPDATE, ResourceRef.in_school(assessment.school_id)
    )

    await workflow.complete(assessment, overall_remark=data.overall_remark if data else None)
    return Envelope(
        message="Assessment completed successfully",
        data=AssessmentSchema.model_validate(assessment),
    )
