"""Doctor domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt, field_validator

from ...enums import Specialization
from ...shared.validators import validate_email, validate_iso_date, validate_time_slot_label


def _check_days(days: list[int]) -> list[int]:
    if not days:
        raise ValueError("At least one available day is required")
    if any(day < 0 or day > 6 for day in days):
        raise ValueError("Available days must be between 0-6 (Sunday-Saturday)")
    # Keep first occurrence order, drop repeats
    return list(dict.fromkeys(days))


def _check_slots(slots: list[str]) -> list[str]:
    if not slots:
        raise ValueError("At least one time slot is required")
    normalized = [validate_time_slot_label(slot) for slot in slots]
    if len(set(normalized)) != len(normalized):
        raise ValueError("Time slots must be unique")
    return normalized


def _check_dates(dates: list[str]) -> list[str]:
    return sorted({validate_iso_date(value) for value in dates})


class DoctorCreate(BaseModel):
    """Schema for creating a new doctor"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str
    specialization: Specialization
    availableDays: list[StrictInt]
    availableTimeSlots: list[str]
    maxAppointmentsPerDay: int = Field(..., ge=1)
    avatar: Optional[str] = None
    unavailableDates: list[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)

    @field_validator("availableDays")
    @classmethod
    def validate_days(cls, v):
        return _check_days(v)

    @field_validator("availableTimeSlots")
    @classmethod
    def validate_slots(cls, v):
        return _check_slots(v)

    @field_validator("unavailableDates")
    @classmethod
    def validate_dates(cls, v):
        return _check_dates(v)


class DoctorUpdate(BaseModel):
    """Schema for updating an existing doctor"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    specialization: Optional[Specialization] = None
    availableDays: Optional[list[StrictInt]] = None
    availableTimeSlots: Optional[list[str]] = None
    maxAppointmentsPerDay: Optional[int] = Field(None, ge=1)
    avatar: Optional[str] = None
    unavailableDates: Optional[list[str]] = None

    @field_validator("availableDays")
    @classmethod
    def validate_days(cls, v):
        if v is not None:
            return _check_days(v)
        return v

    @field_validator("availableTimeSlots")
    @classmethod
    def validate_slots(cls, v):
        if v is not None:
            return _check_slots(v)
        return v

    @field_validator("unavailableDates")
    @classmethod
    def validate_dates(cls, v):
        if v is not None:
            return _check_dates(v)
        return v


class DoctorResponse(BaseModel):
    """Schema for doctor response"""

    id: int
    userId: int
    name: str
    email: str
    specialization: Specialization
    availableDays: list[int]
    availableTimeSlots: list[str]
    maxAppointmentsPerDay: int
    unavailableDates: list[str]
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None


class SlotResponse(BaseModel):
    time: str
    available: bool


class AvailableSlotsResponse(BaseModel):
    """Slots for one doctor and date, in the doctor's configured order"""

    doctorId: int
    date: str
    slots: list[SlotResponse]
    availableSlots: list[str]
