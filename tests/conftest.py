"""Shared test fixtures."""
import os

# Must be set before medslot is imported: config is read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from medslot.auth import Actor
from medslot.database import Base, build_engine, get_db
from medslot.enums import AppointmentStatus, Specialization, UserRole
from medslot.main import app
from medslot.models import Appointment, Doctor, User
from medslot.security_utils import create_access_token

MON_WED_FRI = [1, 3, 5]
TWO_SLOTS = ["09:00 AM", "10:00 AM"]


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so several threads can hold their own connections."""
    engine = build_engine(f"sqlite:///{tmp_path / 'medslot-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the per-test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Persist a user."""
    counter = {"n": 0}

    def _create(role: UserRole = UserRole.PATIENT, name: str = None) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"{role.value.title()} {counter['n']}",
            email=f"{role.value}{counter['n']}@care.test",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _create


@pytest.fixture
def make_doctor(db, make_user):
    """Persist a doctor (and its user). Defaults: Mon/Wed/Fri, two slots, capacity 2."""

    def _create(**overrides) -> Doctor:
        user = make_user(UserRole.DOCTOR, name=overrides.pop("name", None))
        data = {
            "name": user.name,
            "email": user.email,
            "specialization": Specialization.CARDIOLOGY,
            "available_days": MON_WED_FRI,
            "available_time_slots": TWO_SLOTS,
            "max_appointments_per_day": 2,
            "unavailable_dates": [],
        }
        data.update(overrides)
        doctor = Doctor(user_id=user.id, **data)
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    return _create


@pytest.fixture
def make_appointment(db):
    """Persist an appointment directly, bypassing admission."""

    def _create(doctor: Doctor, patient: User, date: str, time: str,
                status: AppointmentStatus = AppointmentStatus.PENDING) -> Appointment:
        appointment = Appointment(
            patient_id=patient.id,
            patient_name=patient.name,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            doctor_specialization=doctor.specialization.value,
            date=date,
            time=time,
            status=status,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _create


@pytest.fixture
def actor_for(db):
    """Build the Actor the API would resolve for a user."""

    def _create(user: User) -> Actor:
        role = UserRole(user.role)
        doctor = None
        if role == UserRole.DOCTOR:
            doctor = db.query(Doctor).filter(Doctor.user_id == user.id).first()
        return Actor(user=user, role=role, doctor=doctor)

    return _create


@pytest.fixture
def auth_headers():
    """Authorization header for a user."""

    def _create(user: User) -> dict:
        token = create_access_token(user.id, UserRole(user.role).value)
        return {"Authorization": f"Bearer {token}"}

    return _create
