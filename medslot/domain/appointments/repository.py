"""Appointment repository - Database operations for appointments"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...enums import ACTIVE_STATUSES, AppointmentStatus
from ...models import ACTIVE_SLOT_INDEX, Appointment

# SQLite names the columns, not the index, when a unique index is violated
SQLITE_ACTIVE_SLOT_CONFLICT = (
    "UNIQUE constraint failed: appointments.doctor_id, appointments.date, appointments.time"
)


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_active_for_doctor_date(db: Session, doctor_id: int, date: str) -> list[Appointment]:
        """Pending and accepted appointments for one doctor and date (ix_appointments_doctor_date)"""
        return (
            db.query(Appointment)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == date,
                Appointment.status.in_(list(ACTIVE_STATUSES)),
            )
            .all()
        )

    @staticmethod
    def get_appointments(
        db: Session,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
    ) -> list[Appointment]:
        """Get appointments, newest date first, optionally scoped to a patient or doctor"""
        query = db.query(Appointment)

        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)

        return query.order_by(
            Appointment.date.desc(), Appointment.time.desc(), Appointment.id.desc()
        ).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_appointment_for_update(db: Session, appointment_id: int) -> Optional[Appointment]:
        """Get an appointment and hold a row lock on it until the transaction ends"""
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def add_appointment(db: Session, **appointment_data) -> Appointment:
        """Stage a new appointment; the caller owns the commit"""
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def update_status(db: Session, appointment: Appointment, status: AppointmentStatus) -> Appointment:
        appointment.status = status
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()

    @staticmethod
    def is_active_slot_conflict(error: IntegrityError) -> bool:
        """True when ``error`` violates the one-live-booking-per-slot index"""
        orig = error.orig
        # psycopg reports the violated constraint by name
        constraint = getattr(getattr(orig, "diag", None), "constraint_name", None)
        if constraint:
            return constraint == ACTIVE_SLOT_INDEX
        return SQLITE_ACTIVE_SLOT_CONFLICT in str(orig)
