"""
Credential Service

Registration and login for the three principal kinds:

- schools log in by email with the ``admin`` role
- counselors log in by email with the ``staff`` role
- students log in by admission number with the ``student`` role

Secrets are stored as bcrypt hashes only. Both login failure modes (unknown
identifier, wrong secret) raise the same ``InvalidCredentials`` and cost one
bcrypt comparison each.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from schoolcounsel.access import Principal, Role
from schoolcounsel.core.errors import DuplicateIdentity, InvalidCredentials, NotFound
from schoolcounsel.core.models import Counselor, School, Student
from schoolcounsel.core.schemas.auth import PrincipalSummary, TokenResponse
from schoolcounsel.core.security import (
    burn_password_check,
    create_access_token,
    hash_password,
    verify_password,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from schoolcounsel.core.schemas.auth import (
        CounselorRegister,
        SchoolRegister,
        StudentRegister,
    )

logger = logging.getLogger(__name__)

AccountT = TypeVar("AccountT", School, Counselor, Student)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def school_summary(school: School) -> PrincipalSummary:
    return PrincipalSummary(
        id=school.id,
        role=Role.ADMIN,
        school_id=school.id,
        email=school.email,
        school_name=school.school_name,
    )


def counselor_summary(counselor: Counselor) -> PrincipalSummary:
    return PrincipalSummary(
        id=counselor.id,
        role=Role.STAFF,
        school_id=counselor.school_id,
        email=counselor.email,
        first_name=counselor.first_name,
        last_name=counselor.last_name,
    )


def student_summary(student: Student) -> PrincipalSummary:
    return PrincipalSummary(
        id=student.id,
        role=Role.STUDENT,
        school_id=student.school_id,
        admission_number=student.admission_number,
        first_name=student.first_name,
        last_name=student.last_name,
    )


def authenticate(account: AccountT | None, password: str) -> AccountT:
    """Return ``account`` if ``password`` matches its hash.

    Raises:
        InvalidCredentials: unknown account or wrong secret
    """
    if account is None:
        burn_password_check(password)
        logger.warning("Login failed: unknown account")
        raise InvalidCredentials()
    if not verify_password(password, account.password_hash):
        logger.warning(f"Login failed: wrong secret for {account.id}")
        raise InvalidCredentials()
    logger.info(f"Login: {account.id}")
    return account


def issue_token(summary: PrincipalSummary) -> TokenResponse:
    principal = Principal(
        id=summary.id, role=summary.role, school_id=summary.school_id, email=summary.email
    )
    return TokenResponse(token=create_access_token(principal), user=summary)


class CredentialService:
    """Creates identities and exchanges secrets for bearer tokens."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========================================================================
    # Registration
    # ========================================================================

    async def register_school(self, data: SchoolRegister) -> TokenResponse:
        """Raises ``DuplicateIdentity`` if the email is taken."""
        email = normalize_email(data.email)
        if await self._school_by_email(email) is not None:
            raise DuplicateIdentity("School already exists")

        school = School(
            school_name=data.school_name,
            email=email,
            address=data.address,
            phone=data.phone,
            school_type=data.type,
            website=data.website,
            password_hash=hash_password(data.password),
            is_admin=True,
        )
        await self._insert(school, "School already exists")

        logger.info(f"School registered: {school.id}")
        return issue_token(school_summary(school))

    async def register_counselor(self, data: CounselorRegister) -> TokenResponse:
        """Raises ``NotFound`` for an unknown school, ``DuplicateIdentity`` for a taken email."""
        await self._require_school(data.school_id)

        email = normalize_email(data.email)
        if await self._counselor_by_email(email) is not None:
            raise DuplicateIdentity("Counselor already exists")

        counselor = Counselor(
            school_id=data.school_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            password_hash=hash_password(data.password),
            specialization=data.specialization,
            is_active=True,
        )
        await self._insert(counselor, "Counselor already exists")

        logger.info(f"Counselor registered: {counselor.id} (school {data.school_id})")
        return issue_token(counselor_summary(counselor))

    async def register_student(self, data: StudentRegister) -> TokenResponse:
        """Raises ``NotFound`` for an unknown school, ``DuplicateIdentity`` for a taken number."""
        await self._require_school(data.school_id)

        message = "Student with this admission number already exists"
        if await self._student_by_admission_number(data.admission_number) is not None:
            raise DuplicateIdentity(message)

        student = Student(
            school_id=data.school_id,
            first_name=data.first_name,
            last_name=data.last_name,
            admission_number=data.admission_number,
            password_hash=hash_password(data.password),
            is_active=True,
        )
        await self._insert(student, message)

        logger.info(f"Student registered: {student.id} (school {data.school_id})")
        return issue_token(student_summary(student))

    # ========================================================================
    # Login
    # ========================================================================

    async def login_school(self, email: str, password: str) -> TokenResponse:
        school = authenticate(await self._school_by_email(normalize_email(email)), password)
        return issue_token(school_summary(school))

    async def login_counselor(self, email: str, password: str) -> TokenResponse:
        counselor = authenticate(
            await self._counselor_by_email(normalize_email(email)), password
        )
        return issue_token(counselor_summary(counselor))

    async def login_student(self, admission_number: str, password: str) -> TokenResponse:
        student = authenticate(await self._student_by_admission_number(admission_number), password)
        return issue_token(student_summary(student))

    # ========================================================================
    # Lookups
    # ========================================================================

    async def _school_by_email(self, email: str) -> School | None:
        result = await self.db.execute(select(School).where(School.email == email))
        return result.scalar_one_or_none()

    async def _counselor_by_email(self, email: str) -> Counselor | None:
        result = await self.db.execute(select(Counselor).where(Counselor.email == email))
        return result.scalar_one_or_none()

    async def _student_by_admission_number(self, admission_number: str) -> Student | None:
        result = await self.db.execute(
            select(Student).where(Student.admission_number == admission_number)
        )
        return result.scalar_one_or_none()

    async def _require_school(self, school_id: UUID) -> School:
        school = await self.db.get(School, school_id)
        if school is None:
            raise NotFound("School not found")
        return school

    async def _insert(self, record: School | Counselor | Student, duplicate_message: str) -> None:
        self.db.add(record)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateIdentity(duplicate_message) from e
