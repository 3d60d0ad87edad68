"""
School Counselling SQLAlchemy Models
"""

from .appointments import Appointment
from .assessments import ACTIVE_STATUSES, Assessment, AssessmentSection, AssessmentStatus
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .schools import School
from .students import ProfileSection, Student
from .users import Counselor

__all__ = [
    # Base
    "Base",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    # Tenants and principals
    "School",
    "Counselor",
    "Student",
    "ProfileSection",
    # Assessments
    "Assessment",
    "AssessmentSection",
    "AssessmentStatus",
    "ACTIVE_STATUSES",
    # Appointments
    "Appointment",
]
