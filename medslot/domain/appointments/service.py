"""Appointment service - booking admission and lifecycle business logic"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Actor
from ...enums import AppointmentStatus, Specialization, UserRole
from ...exceptions import (
    AdmissionError,
    AuthorizationError,
    NotFoundError,
    SlotAlreadyBooked,
    ValidationError,
)
from ...models import Appointment, Doctor
from ...shared.validators import parse_iso_date
from ..doctors.repository import DoctorRepository
from ..scheduling import BookingLocks, authorize_transition, booking_locks, check_admission, parse_status
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session, locks: Optional[BookingLocks] = None):
        self.db = db
        self.repo = AppointmentRepository()
        self.doctors = DoctorRepository()
        self.locks = locks or booking_locks

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def book_appointment(
        self, actor: Actor, doctor_id: Optional[int], date: Optional[str], time: Optional[str]
    ) -> Appointment:
        """
        Admit a booking request and persist it as a pending appointment.

        The admission checks run twice: once against a plain read to turn
        obvious rejections away cheaply, and again inside the critical
        section (process lock on doctor + date, row lock on the doctor)
        immediately before the insert. Only the second run decides.
        """
        if actor.role != UserRole.PATIENT:
            raise AuthorizationError("Only patients can book appointments")
        if doctor_id is None or not date or not time:
            raise ValidationError("Doctor, date, and time are required")

        booking_date = parse_iso_date(date)
        iso_date = booking_date.isoformat()

        doctor = self.doctors.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        logger.info(
            f"📥 Booking request: patient {actor.user_id} -> doctor {doctor.id} on {iso_date} at {time}"
        )

        try:
            # Stale read is fine here, the commit path re-checks under lock
            check_admission(
                doctor, booking_date, time, self.repo.get_active_for_doctor_date(self.db, doctor.id, iso_date)
            )
            appointment = self._admit(actor, doctor.id, booking_date, time)
        except AdmissionError as e:
            logger.warning(
                f"⚠️ Booking rejected ({e.code}): doctor {doctor_id} on {iso_date} at {time}"
            )
            raise

        logger.info(f"✅ Appointment {appointment.id} created (pending)")
        return appointment

    def _admit(self, actor: Actor, doctor_id: int, booking_date, time: str) -> Appointment:
        iso_date = booking_date.isoformat()

        with self.locks.hold(doctor_id, iso_date):
            # Drop anything cached from the pre-check so every decision uses fresh rows
            self.db.expire_all()
            try:
                doctor = self.doctors.get_doctor_for_update(self.db, doctor_id)
                if not doctor:
                    raise NotFoundError("Doctor not found")

                committed = self.repo.get_active_for_doctor_date(self.db, doctor_id, iso_date)
                check_admission(doctor, booking_date, time, committed)

                appointment = self.repo.add_appointment(
                    self.db, **self._snapshot(actor, doctor, iso_date, time)
                )
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if not self.repo.is_active_slot_conflict(e):
                    logger.error(f"❌ Integrity error booking doctor {doctor_id} on {iso_date} at {time}: {e.orig}")
                    raise
                # Another process won the race for this slot
                logger.warning(f"⚠️ Unique slot constraint hit for doctor {doctor_id} on {iso_date} at {time}")
                raise SlotAlreadyBooked() from e
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(appointment)
        return appointment

    @staticmethod
    def _snapshot(actor: Actor, doctor: Doctor, iso_date: str, time: str) -> dict:
        """Column values for a new appointment; names are copied, not referenced"""
        return {
            "patient_id": actor.user.id,
            "patient_name": actor.user.name,
            "doctor_id": doctor.id,
            "doctor_name": doctor.name,
            "doctor_specialization": Specialization(doctor.specialization).value,
            "date": iso_date,
            "time": time,
            "status": AppointmentStatus.PENDING,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def change_status(self, actor: Actor, appointment_id: int, status) -> Appointment:
        """Apply a status transition on behalf of ``actor``"""
        requested = parse_status(status)

        try:
            appointment = self.repo.get_appointment_for_update(self.db, appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found")

            current = AppointmentStatus(appointment.status)
            authorize_transition(actor.role, self._owns(actor, appointment), current, requested)

            logger.info(
                f"🔄 Appointment {appointment_id}: {current.value} -> {requested.value} by {actor.role.value} {actor.user_id}"
            )
            return self.repo.update_status(self.db, appointment, requested)
        except IntegrityError as e:
            # Reactivating a slot that has since been rebooked
            self.db.rollback()
            if not self.repo.is_active_slot_conflict(e):
                raise
            logger.warning(f"⚠️ Appointment {appointment_id} cannot become {requested.value}, its slot is taken")
            raise SlotAlreadyBooked() from e
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_appointments(self, actor: Actor) -> list[Appointment]:
        """Appointments visible to ``actor``: own for patients and doctors, all for admins"""
        if actor.role == UserRole.ADMIN:
            return self.repo.get_appointments(self.db)
        if actor.role == UserRole.DOCTOR:
            if actor.doctor_id is None:
                logger.warning(f"⚠️ Doctor user {actor.user_id} has no doctor profile")
                return []
            return self.repo.get_appointments(self.db, doctor_id=actor.doctor_id)
        return self.repo.get_appointments(self.db, patient_id=actor.user_id)

    def get_appointment(self, actor: Actor, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        if not self._owns(actor, appointment):
            raise AuthorizationError()
        return appointment

    def delete_appointment(self, actor: Actor, appointment_id: int) -> dict:
        if actor.role != UserRole.ADMIN:
            raise AuthorizationError()
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted by admin {actor.user_id}")
        return {"message": "Appointment deleted successfully"}

    @staticmethod
    def _owns(actor: Actor, appointment: Appointment) -> bool:
        if actor.role == UserRole.ADMIN:
            return True
        if actor.role == UserRole.DOCTOR:
            return actor.doctor_id is not None and appointment.doctor_id == actor.doctor_id
        return appointment.patient_id == actor.user_id
