"""Booking admission through AppointmentService against a real database."""
import threading
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from medslot.auth import Actor
from medslot.domain.appointments import service as appointment_service_module
from medslot.domain.appointments.service import AppointmentService
from medslot.domain.doctors.service import DoctorService
from medslot.enums import AppointmentStatus, UserRole
from medslot.exceptions import (
    AuthorizationError,
    DailyCapacityReached,
    DoctorUnavailableOnDate,
    InvalidDate,
    InvalidTimeSlot,
    NotFoundError,
    SlotAlreadyBooked,
    ValidationError,
)
from medslot.domain.appointments.repository import AppointmentRepository
from medslot.models import Appointment, User

MONDAY = "2024-01-01"
TUESDAY = "2024-01-02"


@pytest.fixture
def patient(make_user):
    return make_user(UserRole.PATIENT, name="John Smith")


@pytest.fixture
def service(db):
    return AppointmentService(db)


class TestBooking:
    def test_walkthrough(self, db, service, make_doctor, patient, actor_for):
        """Book, collide, hit a non-working day, then fill the day."""
        doctor = make_doctor()
        actor = actor_for(patient)

        first = service.book_appointment(actor, doctor.id, MONDAY, "09:00 AM")
        assert first.status == AppointmentStatus.PENDING
        assert first.date == MONDAY
        assert first.time == "09:00 AM"

        with pytest.raises(SlotAlreadyBooked):
            service.book_appointment(actor, doctor.id, MONDAY, "09:00 AM")

        with pytest.raises(DoctorUnavailableOnDate):
            service.book_appointment(actor, doctor.id, TUESDAY, "09:00 AM")

        service.book_appointment(actor, doctor.id, MONDAY, "10:00 AM")

        _, slots = DoctorService(db).get_slots(doctor.id, MONDAY)
        assert [(s.time, s.available) for s in slots] == [("09:00 AM", False), ("10:00 AM", False)]

    def test_snapshot_fields(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor(name="Dr. Sarah Johnson")

        appointment = service.book_appointment(actor_for(patient), doctor.id, MONDAY, "09:00 AM")

        assert appointment.patient_id == patient.id
        assert appointment.patient_name == "John Smith"
        assert appointment.doctor_id == doctor.id
        assert appointment.doctor_name == "Dr. Sarah Johnson"
        assert appointment.doctor_specialization == "Cardiology"

    def test_snapshot_survives_doctor_rename(self, db, service, make_doctor, patient, actor_for):
        doctor = make_doctor(name="Dr. Sarah Johnson")
        appointment = service.book_appointment(actor_for(patient), doctor.id, MONDAY, "09:00 AM")

        doctor.name = "Dr. Sarah Connor"
        db.commit()
        db.refresh(appointment)

        assert appointment.doctor_name == "Dr. Sarah Johnson"

    def test_capacity_reached(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor(max_appointments_per_day=1)
        actor = actor_for(patient)
        service.book_appointment(actor, doctor.id, MONDAY, "09:00 AM")

        with pytest.raises(DailyCapacityReached):
            service.book_appointment(actor, doctor.id, MONDAY, "10:00 AM")

    def test_cancelled_slot_can_be_rebooked(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor()
        actor = actor_for(patient)
        first = service.book_appointment(actor, doctor.id, MONDAY, "09:00 AM")
        service.change_status(actor, first.id, "rejected")

        again = service.book_appointment(actor, doctor.id, MONDAY, "09:00 AM")

        assert again.id != first.id
        assert again.status == AppointmentStatus.PENDING

    def test_blocked_date(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor(unavailable_dates=[MONDAY])

        with pytest.raises(DoctorUnavailableOnDate):
            service.book_appointment(actor_for(patient), doctor.id, MONDAY, "09:00 AM")

    def test_invalid_time_slot(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor()

        with pytest.raises(InvalidTimeSlot):
            service.book_appointment(actor_for(patient), doctor.id, MONDAY, "11:00 AM")

    def test_invalid_date(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor()

        with pytest.raises(InvalidDate):
            service.book_appointment(actor_for(patient), doctor.id, "2024-02-30", "09:00 AM")

    def test_missing_fields(self, service, make_doctor, patient, actor_for):
        doctor = make_doctor()

        with pytest.raises(ValidationError):
            service.book_appointment(actor_for(patient), doctor.id, "", "09:00 AM")

    def test_unknown_doctor(self, service, patient, actor_for):
        with pytest.raises(NotFoundError):
            service.book_appointment(actor_for(patient), 999, MONDAY, "09:00 AM")

    def test_only_patients_book(self, service, make_doctor, make_user, actor_for):
        doctor = make_doctor()
        admin = make_user(UserRole.ADMIN)

        with pytest.raises(AuthorizationError):
            service.book_appointment(actor_for(admin), doctor.id, MONDAY, "09:00 AM")

    def test_rejection_leaves_no_row(self, db, service, make_doctor, patient, actor_for):
        doctor = make_doctor()

        with pytest.raises(InvalidTimeSlot):
            service.book_appointment(actor_for(patient), doctor.id, MONDAY, "11:00 AM")

        assert db.query(Appointment).count() == 0

    def test_unique_index_backs_up_admission(
        self, db, service, make_doctor, make_appointment, patient, actor_for, monkeypatch
    ):
        """If the in-memory checks are bypassed the storage conflict still maps to SlotAlreadyBooked."""
        doctor = make_doctor()
        make_appointment(doctor, patient, MONDAY, "09:00 AM")
        monkeypatch.setattr(appointment_service_module, "check_admission", lambda *args, **kwargs: None)

        with pytest.raises(SlotAlreadyBooked):
            service.book_appointment(actor_for(patient), doctor.id, MONDAY, "09:00 AM")

        assert db.query(Appointment).count() == 1


def _book_concurrently(session_factory, patient_ids, doctor_id, requests):
    """Run one booking per (date, time) in its own thread and session, all released at once."""
    barrier = threading.Barrier(len(requests))
    results = []
    results_lock = threading.Lock()

    def worker(patient_id, day, time):
        session = session_factory()
        try:
            user = session.get(User, patient_id)
            actor = Actor(user=user, role=UserRole.PATIENT)
            barrier.wait()
            try:
                appointment = AppointmentService(session).book_appointment(actor, doctor_id, day, time)
                outcome = ("ok", appointment.id)
            except Exception as e:
                outcome = ("error", e)
        finally:
            session.close()
        with results_lock:
            results.append(outcome)

    threads = [
        threading.Thread(target=worker, args=(patient_ids[i % len(patient_ids)], day, time))
        for i, (day, time) in enumerate(requests)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    successes = [value for kind, value in results if kind == "ok"]
    errors = [value for kind, value in results if kind == "error"]
    return successes, errors


class TestConcurrentBooking:
    def test_same_slot_only_one_wins(self, db, session_factory, make_doctor, make_user):
        doctor = make_doctor()
        patients = [make_user(UserRole.PATIENT).id, make_user(UserRole.PATIENT).id]

        successes, errors = _book_concurrently(
            session_factory, patients, doctor.id, [(MONDAY, "09:00 AM"), (MONDAY, "09:00 AM")]
        )

        assert len(successes) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], SlotAlreadyBooked)
        assert db.query(Appointment).count() == 1

    def test_last_capacity_only_one_wins(self, db, session_factory, make_doctor, make_user):
        doctor = make_doctor(max_appointments_per_day=1)
        patients = [make_user(UserRole.PATIENT).id, make_user(UserRole.PATIENT).id]

        successes, errors = _book_concurrently(
            session_factory, patients, doctor.id, [(MONDAY, "09:00 AM"), (MONDAY, "10:00 AM")]
        )

        assert len(successes) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], DailyCapacityReached)
        assert db.query(Appointment).count() == 1

    def test_many_requests_never_overbook(self, db, session_factory, make_doctor, make_user):
        slots = ["09:00 AM", "09:30 AM", "10:00 AM", "10:30 AM"]
        doctor = make_doctor(available_time_slots=slots, max_appointments_per_day=3)
        patients = [make_user(UserRole.PATIENT).id for _ in range(4)]
        requests = [(MONDAY, slots[i % len(slots)]) for i in range(12)]

        successes, errors = _book_concurrently(session_factory, patients, doctor.id, requests)

        assert len(successes) == 3
        assert len(errors) == 9
        assert all(isinstance(e, (SlotAlreadyBooked, DailyCapacityReached)) for e in errors)

        booked = db.query(Appointment).filter(Appointment.doctor_id == doctor.id).all()
        assert len(booked) == 3
        assert len({a.time for a in booked}) == 3


class TestStorageConflicts:
    """Only the active-slot index maps to SlotAlreadyBooked; other integrity errors propagate."""

    def test_postgres_constraint_name(self):
        orig = SimpleNamespace(diag=SimpleNamespace(constraint_name="uq_appointments_active_slot"))

        assert AppointmentRepository.is_active_slot_conflict(IntegrityError("INSERT", {}, orig)) is True

    def test_other_postgres_constraint(self):
        orig = SimpleNamespace(diag=SimpleNamespace(constraint_name="appointments_patient_id_fkey"))

        assert AppointmentRepository.is_active_slot_conflict(IntegrityError("INSERT", {}, orig)) is False

    def test_sqlite_message(self):
        orig = Exception(
            "UNIQUE constraint failed: appointments.doctor_id, appointments.date, appointments.time"
        )

        assert AppointmentRepository.is_active_slot_conflict(IntegrityError("INSERT", {}, orig)) is True

    def test_foreign_key_failure_is_not_a_slot_conflict(
        self, db, service, make_doctor, patient, actor_for, monkeypatch
    ):
        doctor = make_doctor()

        def failing_insert(session, **appointment_data):
            raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        monkeypatch.setattr(service.repo, "add_appointment", failing_insert)

        with pytest.raises(IntegrityError):
            service.book_appointment(actor_for(patient), doctor.id, MONDAY, "09:00 AM")

        assert db.query(Appointment).count() == 0
