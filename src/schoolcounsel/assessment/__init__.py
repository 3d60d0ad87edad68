"""
Assessment Module

Counselor-authored multi-section assessments and their completion workflow.
"""

from .sections import SECTION_SCHEMAS, default_sections
from .workflow import AssessmentWorkflow, Page, has_mandatory_section, parse_section

__all__ = [
    "SECTION_SCHEMAS",
    "AssessmentWorkflow",
    "Page",
    "default_sections",
    "has_mandatory_section",
    "parse_section",
]
