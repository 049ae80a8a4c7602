from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .enums import AppointmentStatus, Specialization, UserRole

ACTIVE_SLOT_INDEX = "uq_appointments_active_slot"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(
        Enum(UserRole, native_enum=False, length=20, values_callable=_enum_values),
        default=UserRole.PATIENT,
        nullable=False,
    )
    avatar = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    doctor_profile = relationship("Doctor", back_populates="user", uselist=False)


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    specialization = Column(
        Enum(Specialization, native_enum=False, length=50, values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    available_days = Column(JSON, nullable=False)  # Weekday indices, 0 = Sunday
    available_time_slots = Column(JSON, nullable=False)  # Ordered labels, e.g. "09:00 AM"
    max_appointments_per_day = Column(Integer, nullable=False)
    unavailable_dates = Column(JSON, default=list, nullable=False)  # ISO dates
    avatar = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="doctor_profile")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    patient_name = Column(String(255), nullable=False)  # Snapshot at booking time
    doctor_id = Column(
        Integer, ForeignKey("doctors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    doctor_name = Column(String(255), nullable=False)  # Snapshot at booking time
    doctor_specialization = Column(String(50), nullable=False)  # Snapshot at booking time
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    time = Column(String(20), nullable=False)  # One of the doctor's slot labels
    status = Column(
        Enum(AppointmentStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_appointments_doctor_date", "doctor_id", "date"),
        # One live booking per doctor/date/slot; rejected and completed rows don't count
        Index(
            ACTIVE_SLOT_INDEX,
            "doctor_id",
            "date",
            "time",
            unique=True,
            postgresql_where=text("status IN ('pending', 'accepted')"),
            sqlite_where=text("status IN ('pending', 'accepted')"),
        ),
    )
