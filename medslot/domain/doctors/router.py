"""Doctor router - FastAPI endpoints for doctor profiles and available slots"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_roles
from ...database import get_db
from ...enums import Specialization, UserRole
from ...models import Doctor
from .schemas import (
    AvailableSlotsResponse,
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    SlotResponse,
)
from .service import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors", tags=["Doctors"])

admin_only = [Depends(require_roles(UserRole.ADMIN))]


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    """Dependency injection for DoctorService"""
    return DoctorService(db)


def to_response(doctor: Doctor) -> DoctorResponse:
    return DoctorResponse(
        id=doctor.id,
        userId=doctor.user_id,
        name=doctor.name,
        email=doctor.email,
        specialization=doctor.specialization,
        availableDays=doctor.available_days,
        availableTimeSlots=doctor.available_time_slots,
        maxAppointmentsPerDay=doctor.max_appointments_per_day,
        unavailableDates=doctor.unavailable_dates or [],
        avatar=doctor.avatar,
        created_at=doctor.created_at,
    )


# ============================================================================
# PUBLIC ROUTES
# ============================================================================


@router.get("", response_model=list[DoctorResponse])
async def get_doctors(
    specialization: Optional[Specialization] = Query(None),
    service: DoctorService = Depends(get_doctor_service),
):
    """Get all doctors sorted by name"""
    return [to_response(d) for d in service.get_doctors(specialization)]


@router.get("/specializations", response_model=list[str])
async def get_specializations():
    return [s.value for s in Specialization]


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    return to_response(service.get_doctor(doctor_id))


@router.get("/{doctor_id}/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    doctor_id: int,
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    service: DoctorService = Depends(get_doctor_service),
):
    """Every configured slot for the date with its open/closed state"""
    iso_date, slots = service.get_slots(doctor_id, date)
    return AvailableSlotsResponse(
        doctorId=doctor_id,
        date=iso_date,
        slots=[SlotResponse(time=s.time, available=s.available) for s in slots],
        availableSlots=[s.time for s in slots if s.available],
    )


# ============================================================================
# ADMIN ROUTES
# ============================================================================


@router.post("", response_model=DoctorResponse, status_code=201, dependencies=admin_only)
async def create_doctor(data: DoctorCreate, service: DoctorService = Depends(get_doctor_service)):
    """Create a doctor (admin only)"""
    return to_response(service.create_doctor(data))


@router.put("/{doctor_id}", response_model=DoctorResponse, dependencies=admin_only)
async def update_doctor(
    doctor_id: int, data: DoctorUpdate, service: DoctorService = Depends(get_doctor_service)
):
    """Update a doctor (admin only)"""
    return to_response(service.update_doctor(doctor_id, data))


@router.delete("/{doctor_id}", dependencies=admin_only)
async def delete_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    """Delete a doctor (admin only)"""
    return service.delete_doctor(doctor_id)
