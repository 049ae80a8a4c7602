#!/usr/bin/env python3
"""
Seed the database with an admin, a patient and a few doctors.

Usage: python -m medslot.seed [--reset]

Login lives outside this service, so the script prints a bearer token for
each seeded user instead of a password.
"""

import argparse
import logging

from sqlalchemy.orm import Session

from . import models  # noqa: F401
from .database import Base, SessionLocal, engine
from .domain.scheduling import validate_doctor_schedule
from .enums import DEFAULT_TIME_SLOTS, Specialization, UserRole
from .models import Appointment, Doctor, User
from .security_utils import create_access_token

logger = logging.getLogger(__name__)

SEED_DOCTORS = [
    {
        "name": "Dr. Sarah Johnson",
        "email": "doctor@care.com",
        "specialization": Specialization.CARDIOLOGY,
        "available_days": [1, 2, 3, 4, 5],
        "available_time_slots": DEFAULT_TIME_SLOTS,
        "max_appointments_per_day": 12,
    },
    {
        "name": "Dr. Michael Chen",
        "email": "mchen@care.com",
        "specialization": Specialization.NEUROLOGY,
        "available_days": [1, 3, 5],
        "available_time_slots": ["09:00 AM", "10:00 AM", "11:00 AM", "02:00 PM", "03:00 PM", "04:00 PM"],
        "max_appointments_per_day": 8,
    },
    {
        "name": "Dr. Emily Rodriguez",
        "email": "erodriguez@care.com",
        "specialization": Specialization.PEDIATRICS,
        "available_days": [1, 2, 3, 4, 5],
        "available_time_slots": ["09:00 AM", "09:30 AM", "10:00 AM", "10:30 AM", "11:00 AM", "02:00 PM"],
        "max_appointments_per_day": 10,
    },
    {
        "name": "Dr. James Williams",
        "email": "jwilliams@care.com",
        "specialization": Specialization.ORTHOPEDICS,
        "available_days": [2, 4],
        "available_time_slots": ["10:00 AM", "11:00 AM", "02:00 PM", "03:00 PM"],
        "max_appointments_per_day": 4,
    },
]


def seed_database(db: Session, reset: bool = False) -> list[User]:
    """Insert the seed users and doctors; returns every user it created"""
    if reset:
        db.query(Appointment).delete()
        db.query(Doctor).delete()
        db.query(User).delete()
        db.commit()
        logger.info("✅ Cleared existing data")
    elif db.query(User.id).first() is not None:
        logger.info("Database already has users, skipping seed (use --reset to reseed)")
        return []

    users = [
        User(name="Admin User", email="admin@care.com", role=UserRole.ADMIN),
        User(name="John Smith", email="patient@care.com", role=UserRole.PATIENT),
    ]
    db.add_all(users)

    for profile in SEED_DOCTORS:
        user = User(name=profile["name"], email=profile["email"], role=UserRole.DOCTOR)
        db.add(user)
        db.flush()
        doctor = Doctor(user_id=user.id, unavailable_dates=[], **profile)
        validate_doctor_schedule(doctor)
        db.add(doctor)
        users.append(user)

    db.commit()
    logger.info(f"✅ Created {len(users)} users and {len(SEED_DOCTORS)} doctors")
    return users


def main():
    parser = argparse.ArgumentParser(description="Seed the MedSlot database")
    parser.add_argument("--reset", action="store_true", help="Delete existing rows first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("🌱 Starting database seeding...")

    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        users = seed_database(db, reset=args.reset)
        for user in users:
            token = create_access_token(user.id, UserRole(user.role).value)
            logger.info(f"{user.role.value:<8} {user.email:<24} {token}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
