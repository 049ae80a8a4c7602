"""Slot enumerator - which of a doctor's daily slots are still open on a date"""

from dataclasses import dataclass
from typing import Iterable

from ...enums import ACTIVE_STATUSES, AppointmentStatus
from ...shared.validators import parse_iso_date
from .availability import DateLike, is_available


@dataclass(frozen=True)
class SlotView:
    time: str
    available: bool


def committed_appointments(doctor, day: DateLike, appointments: Iterable) -> list:
    """Appointments holding a slot for this doctor and date (pending or accepted)"""
    iso_day = parse_iso_date(day).isoformat()
    return [
        apt
        for apt in appointments
        if apt.doctor_id == doctor.id
        and apt.date == iso_day
        and AppointmentStatus(apt.status) in ACTIVE_STATUSES
    ]


def is_capacity_reached(doctor, day: DateLike, appointments: Iterable) -> bool:
    return len(committed_appointments(doctor, day, appointments)) >= doctor.max_appointments_per_day


def enumerate_slots(doctor, day: DateLike, appointments: Iterable) -> list[SlotView]:
    """
    Report every configured slot for ``day`` with its open/closed state.

    Returns an empty list when the doctor does not work that day. When the
    daily capacity is used up every slot is closed, whatever its own
    occupancy. Slots keep the doctor's configured order.
    """
    if not is_available(doctor, day):
        return []

    committed = committed_appointments(doctor, day, appointments)

    if len(committed) >= doctor.max_appointments_per_day:
        return [SlotView(time=slot, available=False) for slot in doctor.available_time_slots]

    booked_times = {apt.time for apt in committed}
    return [
        SlotView(time=slot, available=slot not in booked_times)
        for slot in doctor.available_time_slots
    ]


def available_slots(doctor, day: DateLike, appointments: Iterable) -> list[str]:
    """Open slot labels only, in configured order"""
    return [slot.time for slot in enumerate_slots(doctor, day, appointments) if slot.available]
