"""Pydantic schemas for API validation."""

from .appointments import AppointmentCreate, AppointmentSchema, AppointmentUpdate
from .assessments import (
    AssessmentCreate,
    AssessmentSchema,
    AssessmentStats,
    CompleteRequest,
    SectionUpdate,
)
from .auth import (
    CounselorRegister,
    EmailLogin,
    PrincipalSummary,
    SchoolRegister,
    StudentLogin,
    StudentRegister,
    TokenResponse,
)
from .common import Envelope, PaginatedEnvelope, error_body
from .users import CounselorSchema, StudentSchema

__all__ = [
    # Envelope
    "Envelope",
    "PaginatedEnvelope",
    "error_body",
    # Auth
    "SchoolRegister",
    "CounselorRegister",
    "StudentRegister",
    "EmailLogin",
    "StudentLogin",
    "PrincipalSummary",
    "TokenResponse",
    # Assessments
    "AssessmentCreate",
    "SectionUpdate",
    "CompleteRequest",
    "AssessmentSchema",
    "AssessmentStats",
    # Appointments
    "AppointmentCreate",
    "AppointmentUpdate",
    "AppointmentSchema",
    # Directory
    "CounselorSchema",
    "StudentSchema",
]
