"""
Appointment Scheduler

Calendar events between one counselor and one student. Overlaps and
recurrence are not handled, and start/end ordering is not checked.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import select

from schoolcounsel.access import Principal, Role
from schoolcounsel.core.errors import NotFound
from schoolcounsel.core.models import Appointment, Student

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from schoolcounsel.core.schemas.appointments import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

# Fields a client may reset to null on update
CLEARABLE_FIELDS = frozenset({"notes"})


class AppointmentScheduler:
    """CRUD over appointments. Callers authorize before calling in."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, counselor: Principal, data: AppointmentCreate) -> Appointment:
        """Book an appointment owned by ``counselor`` in the counselor's school.

        Raises:
            NotFound: the student does not exist in the counselor's school
        """
        student = await self.db.get(Student, data.student_id)
        if student is None or student.school_id != counselor.school_id:
            raise NotFound("Student not found")

        appointment = Appointment(
            title=data.title,
            start=data.start,
            end=data.end,
            student_id=student.id,
            counselor_id=counselor.id,
            school_id=counselor.school_id,
            type=data.type,
            notes=data.notes,
        )
        self.db.add(appointment)
        await self.db.flush()

        logger.info(f"Appointment {appointment.id} booked by counselor {counselor.id}")
        return appointment

    async def get(self, appointment_id: UUID) -> Appointment:
        appointment = await self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFound("Appointment not found")
        return appointment

    async def list_for(
        self,
        principal: Principal,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Appointment]:
        """The caller's own appointments ordered by start.

        The date window applies only when both bounds are given.
        """
        if principal.role == Role.STUDENT:
            stmt = select(Appointment).where(Appointment.student_id == principal.id)
        else:
            stmt = select(Appointment).where(Appointment.counselor_id == principal.id)

        if start is not None and end is not None:
            stmt = stmt.where(Appointment.start >= start, Appointment.end <= end)

        result = await self.db.execute(stmt.order_by(Appointment.start))
        return list(result.scalars().all())

    async def update(self, appointment: Appointment, data: AppointmentUpdate) -> Appointment:
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in CLEARABLE_FIELDS:
                continue
            setattr(appointment, field, value)
        await self.db.flush()

        logger.info(f"Appointment {appointment.id} updated")
        return appointment

    async def delete(self, appointment: Appointment) -> None:
        await self.db.delete(appointment)
        await self.db.flush()
        logger.info(f"Appointment {appointment.id} deleted")
