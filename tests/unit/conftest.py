"""Unsaved model instances for the pure scheduling engine."""
import pytest

from medslot.enums import AppointmentStatus, Specialization
from medslot.models import Appointment, Doctor


@pytest.fixture
def doctor_factory():
    def _create(**overrides) -> Doctor:
        data = {
            "id": 1,
            "user_id": 10,
            "name": "Dr. Sarah Johnson",
            "email": "doctor@care.test",
            "specialization": Specialization.CARDIOLOGY,
            "available_days": [1, 3, 5],
            "available_time_slots": ["09:00 AM", "10:00 AM"],
            "max_appointments_per_day": 2,
            "unavailable_dates": [],
        }
        data.update(overrides)
        return Doctor(**data)

    return _create


@pytest.fixture
def appointment_factory():
    def _create(date: str, time: str, status=AppointmentStatus.PENDING, doctor_id: int = 1) -> Appointment:
        return Appointment(
            patient_id=100,
            patient_name="John Smith",
            doctor_id=doctor_id,
            doctor_name="Dr. Sarah Johnson",
            doctor_specialization="Cardiology",
            date=date,
            time=time,
            status=status,
        )

    return _create
