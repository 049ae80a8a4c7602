"""Appointment router - FastAPI endpoints for booking and status changes"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Actor, get_current_actor, require_roles
from ...config import BOOKING_RATE_LIMIT, BOOKING_RATE_WINDOW_SECONDS
from ...database import get_db
from ...enums import UserRole
from ...models import Appointment
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    MessageResponse,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

rate_limit_bookings = create_rate_limiter(
    limit=BOOKING_RATE_LIMIT, window_seconds=BOOKING_RATE_WINDOW_SECONDS, key_prefix="booking"
)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        patientId=appointment.patient_id,
        patientName=appointment.patient_name,
        doctorId=appointment.doctor_id,
        doctorName=appointment.doctor_name,
        doctorSpecialization=appointment.doctor_specialization,
        date=appointment.date,
        time=appointment.time,
        status=appointment.status,
        created_at=appointment.created_at,
        updated_at=appointment.updated_at,
    )


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments visible to the caller (patients and doctors see their own, admins see all)"""
    return [to_response(a) for a in service.list_appointments(actor)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.get_appointment(actor, appointment_id))


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=201,
    dependencies=[Depends(rate_limit_bookings)],
)
async def create_appointment(
    data: AppointmentCreate,
    actor: Actor = Depends(require_roles(UserRole.PATIENT)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment (patients only); the new appointment starts pending"""
    appointment = service.book_appointment(actor, data.doctorId, data.date, data.time)
    return to_response(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Doctors accept/reject/complete, patients cancel pending, admins override"""
    return to_response(service.change_status(actor, appointment_id, data.status))


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: int,
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Delete an appointment (admin only)"""
    return service.delete_appointment(actor, appointment_id)
