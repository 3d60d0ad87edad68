"""
Authentication API

Self-service registration and login for schools, counselors and students.
These are the only routes that do not require a bearer token.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcounsel.auth import CredentialService
from schoolcounsel.core.database import get_db
from schoolcounsel.core.schemas.auth import (
    CounselorRegister,
    EmailLogin,
    SchoolRegister,
    StudentLogin,
    StudentRegister,
    TokenResponse,
)
from schoolcounsel.core.schemas.common import Envelope

router = APIRouter()


@router.post(
    "/school/register",
    response_model=Envelope[TokenResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_school(
    data: SchoolRegister, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    """Register a school account (logs in as ``admin``)."""
    result = await CredentialService(db).register_school(data)
    return Envelope(message="School registered successfully", data=result)


@router.post("/school/login", response_model=Envelope[TokenResponse])
async def login_school(
    data: EmailLogin, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    result = await CredentialService(db).login_school(data.email, data.password)
    return Envelope(message="Login successful", data=result)


@router.post(
    "/counselor/register",
    response_model=Envelope[TokenResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_counselor(
    data: CounselorRegister, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    """Register a counselor under an existing school (logs in as ``staff``)."""
    result = await CredentialService(db).register_counselor(data)
    return Envelope(message="Counselor registered successfully", data=result)


@router.post("/counselor/login", response_model=Envelope[TokenResponse])
async def login_counselor(
    data: EmailLogin, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    result = await CredentialService(db).login_counselor(data.email, data.password)
    return Envelope(message="Login successful", data=result)


@router.post(
    "/student/register",
    response_model=Envelope[TokenResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_student(
    data: StudentRegister, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    """Register a student under an existing school."""
    result = await CredentialService(db).register_student(data)
    return Envelope(message="Student registered successfully", data=result)


@router.post("/student/login", response_model=Envelope[TokenResponse])
async def login_student(
    data: StudentLogin, db: AsyncSession = Depends(get_db)
) -> Envelope[TokenResponse]:
    result = await CredentialService(db).login_student(data.admission_number, data.password)
    return Envelope(message="Login successful", data=result)
