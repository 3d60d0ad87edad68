"""
Appointment API Endpoints

Counselors book appointments with students in their school. Either party can
view, reschedule or cancel; nobody else can see them.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcounsel.access import Action, Principal, Resource, ResourceRef, authorize
from schoolcounsel.api.deps import get_current_principal
from schoolcounsel.core.database import get_db
from schoolcounsel.core.models import Appointment
from schoolcounsel.core.schemas.appointments import (
    AppointmentCreate,
    AppointmentSchema,
    AppointmentUpdate,
    Instant,
)
from schoolcounsel.core.schemas.common import Envelope
from schoolcounsel.scheduling import AppointmentScheduler

router = APIRouter()


def _participants(appointment: Appointment) -> ResourceRef:
    return ResourceRef.owned_by(*appointment.participant_ids(), school_id=appointment.school_id)


@router.post("", response_model=Envelope[AppointmentSchema], status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AppointmentSchema]:
    """Book an appointment with a student (counselors only)."""
    authorize(
        principal, Resource.APPOINTMENT, Action.CREATE, ResourceRef.in_school(principal.school_id)
    )

    appointment = await AppointmentScheduler(db).create(principal, data)
    return Envelope(
        message="Appointment created successfully",
        data=AppointmentSchema.model_validate(appointment),
    )


@router.get("", response_model=Envelope[list[AppointmentSchema]])
async def list_appointments(
    start: Instant | None = Query(None),
    end: Instant | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[AppointmentSchema]]:
    """The caller's appointments ordered by start, optionally within ``[start, end]``."""
    authorize(principal, Resource.APPOINTMENT, Action.LIST)

    appointments = await AppointmentScheduler(db).list_for(principal, start, end)
    return Envelope(data=[AppointmentSchema.model_validate(a) for a in appointments])


@router.get("/{appointment_id}", response_model=Envelope[AppointmentSchema])
async def get_appointment(
    appointment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AppointmentSchema]:
    appointment = await AppointmentScheduler(db).get(appointment_id)
    authorize(principal, Resource.APPOINTMENT, Action.READ, _participants(appointment))
    return Envelope(data=AppointmentSchema.model_validate(appointment))


@router.put("/{appointment_id}", response_model=Envelope[AppointmentSchema])
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AppointmentSchema]:
    scheduler = AppointmentScheduler(db)
    appointment = await scheduler.get(appointment_id)
    authorize(principal, Resource.APPOINTMENT, Action.UPDATE, _participants(appointment))

    await scheduler.update(appointment, data)
    return Envelope(
        message="Appointment updated successfully",
        data=AppointmentSchema.model_validate(appointment),
    )


@router.delete("/{appointment_id}", response_model=Envelope[None])
async def delete_appointment(
    appointment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Envelope[None]:
    scheduler = AppointmentScheduler(db)
    appointment = await scheduler.get(appointment_id)
    authorize(principal, Resource.APPOINTMENT, Action.DELETE, _participants(appointment))

    await scheduler.delete(appointment)
    return Envelope(message="Appointment deleted successfully")
