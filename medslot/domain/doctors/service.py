"""Doctor service - Business logic for doctor profiles and slot listings"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...enums import Specialization
from ...exceptions import NotFoundError, ValidationError
from ...models import Doctor
from ...shared.validators import parse_iso_date
from ..appointments.repository import AppointmentRepository
from ..scheduling import SlotView, enumerate_slots
from .repository import DoctorRepository
from .schemas import DoctorCreate, DoctorUpdate

logger = logging.getLogger(__name__)


class DoctorService:
    """Service layer for doctor business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DoctorRepository()
        self.appointments = AppointmentRepository()

    def get_doctors(self, specialization: Optional[Specialization] = None) -> list[Doctor]:
        return self.repo.get_doctors(self.db, specialization)

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.repo.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    def get_slots(self, doctor_id: int, date: Optional[str]) -> tuple[str, list[SlotView]]:
        """
        Slot view for one doctor and date.

        This is a plain read; a slot shown open here can still be taken
        before the booking commits, and the booking path reports that.
        """
        if not date:
            raise ValidationError("Date parameter is required")
        iso_date = parse_iso_date(date).isoformat()
        doctor = self.get_doctor(doctor_id)

        committed = self.appointments.get_active_for_doctor_date(self.db, doctor.id, iso_date)
        return iso_date, enumerate_slots(doctor, iso_date, committed)

    def create_doctor(self, data: DoctorCreate) -> Doctor:
        """Create a doctor profile and its doctor-role user account"""
        logger.info(f"📥 Creating doctor {data.name} ({data.specialization.value})")

        if self.repo.email_in_use(self.db, data.email):
            logger.warning(f"⚠️ Doctor email already registered: {data.email}")
            raise ValidationError("Email already exists")

        doctor = self.repo.create_doctor(
            self.db,
            name=data.name,
            email=data.email,
            avatar=data.avatar,
            specialization=data.specialization,
            available_days=data.availableDays,
            available_time_slots=data.availableTimeSlots,
            max_appointments_per_day=data.maxAppointmentsPerDay,
            unavailable_dates=data.unavailableDates,
        )
        logger.info(f"✅ Doctor {doctor.id} created")
        return doctor

    def update_doctor(self, doctor_id: int, data: DoctorUpdate) -> Doctor:
        """
        Update a doctor. Changing the schedule or the unavailable dates only
        affects future admissions; existing bookings are left as they are.
        """
        doctor = self.get_doctor(doctor_id)

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.specialization is not None:
            updates["specialization"] = data.specialization
        if data.availableDays is not None:
            updates["available_days"] = data.availableDays
        if data.availableTimeSlots is not None:
            updates["available_time_slots"] = data.availableTimeSlots
        if data.maxAppointmentsPerDay is not None:
            updates["max_appointments_per_day"] = data.maxAppointmentsPerDay
        if data.avatar is not None:
            updates["avatar"] = data.avatar
        if data.unavailableDates is not None:
            updates["unavailable_dates"] = data.unavailableDates

        return self.repo.update_doctor(self.db, doctor, **updates)

    def delete_doctor(self, doctor_id: int) -> dict:
        doctor = self.get_doctor(doctor_id)
        self.repo.delete_doctor(self.db, doctor)
        logger.info(f"🗑️ Doctor {doctor_id} deleted")
        return {"message": "Doctor deleted successfully"}
