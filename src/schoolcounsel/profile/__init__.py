"""
Profile Module

Student profile section schemas and the profile-completion workflow.
"""

from .sections import SECTION_SCHEMAS
from .workflow import GATING_SECTIONS, ProfileWorkflow, derive_profile_complete

__all__ = [
    "GATING_SECTIONS",
    "SECTION_SCHEMAS",
    "ProfileWorkflow",
    "derive_profile_complete",
]
