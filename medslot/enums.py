"""Closed vocabularies shared by the models, the scheduling engine and the API."""

from enum import Enum


class UserRole(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


# Statuses that hold a slot and count against the daily capacity
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.ACCEPTED})
TERMINAL_STATUSES = frozenset({AppointmentStatus.REJECTED, AppointmentStatus.COMPLETED})


class Specialization(str, Enum):
    CARDIOLOGY = "Cardiology"
    NEUROLOGY = "Neurology"
    PEDIATRICS = "Pediatrics"
    ORTHOPEDICS = "Orthopedics"
    DERMATOLOGY = "Dermatology"
    PSYCHIATRY = "Psychiatry"
    ONCOLOGY = "Oncology"
    OPHTHALMOLOGY = "Ophthalmology"
    ENT = "ENT"
    GENERAL_MEDICINE = "General Medicine"


# Weekday indices: 0 = Sunday ... 6 = Saturday
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

DEFAULT_TIME_SLOTS = [
    "09:00 AM",
    "09:30 AM",
    "10:00 AM",
    "10:30 AM",
    "11:00 AM",
    "11:30 AM",
    "12:00 PM",
    "02:00 PM",
    "02:30 PM",
    "03:00 PM",
    "03:30 PM",
    "04:00 PM",
    "04:30 PM",
    "05:00 PM",
]
