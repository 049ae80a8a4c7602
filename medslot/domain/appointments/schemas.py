"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...enums import AppointmentStatus


class AppointmentCreate(BaseModel):
    """Schema for a booking request; the patient comes from the token"""

    doctorId: int
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., min_length=1, description="One of the doctor's slot labels")

    @field_validator("date", "time")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()


class AppointmentStatusUpdate(BaseModel):
    """Requested status; checked against the enumerated set by the service"""

    status: str


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    patientId: Optional[int] = None
    patientName: str
    doctorId: Optional[int] = None
    doctorName: str
    doctorSpecialization: str
    date: str
    time: str
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str
