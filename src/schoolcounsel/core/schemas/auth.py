"""
Authentication Schemas

Registration and login payloads for schools, counselors and students.
"""

from typing import Annotated
from uuid import UUID

from pydantic import EmailStr, Field

from schoolcounsel.access import Role
from schoolcounsel.core.validation import CamelModel

Password = Annotated[str, Field(min_length=6, max_length=72)]


class SchoolRegister(CamelModel):
    school_name: str = Field(..., min_length=3, max_length=300)
    email: EmailStr
    password: Password
    address: str = Field(..., min_length=1, max_length=500)
    phone: str = Field(..., min_length=5, max_length=30)
    type: str = Field(..., min_length=1, max_length=30, description="primary, secondary, tertiary")
    website: str | None = Field(None, max_length=300)


class CounselorRegister(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: Password
    school_id: UUID
    specialization: str = Field(..., min_length=1, max_length=200)


class StudentRegister(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    admission_number: str = Field(..., min_length=1, max_length=50)
    password: Password
    school_id: UUID


class EmailLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class StudentLogin(CamelModel):
    admission_number: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)


class PrincipalSummary(CamelModel):
    id: UUID
    role: Role
    school_id: UUID
    email: str | None = None
    admission_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    school_name: str | None = None


class TokenResponse(CamelModel):
    token: str
    user: PrincipalSummary
