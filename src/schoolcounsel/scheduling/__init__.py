"""
Scheduling Module

Counselor/student appointment calendar.
"""

from .appointments import AppointmentScheduler

__all__ = ["AppointmentScheduler"]
