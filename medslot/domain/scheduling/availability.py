"""Availability calculator - is a calendar date a working day for a doctor"""

from datetime import date
from typing import Union

from ...exceptions import ValidationError
from ...shared.validators import ISO_DATE_PATTERN, TIME_SLOT_PATTERN, parse_iso_date

DateLike = Union[date, str]


def weekday_index(day: date) -> int:
    """Weekday of ``day`` with 0 = Sunday ... 6 = Saturday"""
    return day.isoweekday() % 7


def is_available(doctor, day: DateLike) -> bool:
    """
    Check whether ``doctor`` works on ``day``.

    The weekly pattern decides first; ``unavailable_dates`` can only take a
    day away, never add one.

    Args:
        doctor: Anything exposing ``available_days`` and ``unavailable_dates``
        day: A ``date`` or an ISO ``YYYY-MM-DD`` string

    Raises:
        InvalidDate: If ``day`` is a malformed string
    """
    day = parse_iso_date(day)

    if weekday_index(day) not in set(doctor.available_days or ()):
        return False

    if day.isoformat() in set(doctor.unavailable_dates or ()):
        return False

    return True


def validate_doctor_schedule(doctor) -> None:
    """Raise ValidationError if a doctor's schedule breaks the data-model invariants"""
    days = doctor.available_days or []
    if not days:
        raise ValidationError("Doctor must be available on at least one weekday")
    if any(not isinstance(d, int) or isinstance(d, bool) or not 0 <= d <= 6 for d in days):
        raise ValidationError("Available days must be between 0-6 (Sunday-Saturday)")

    slots = doctor.available_time_slots or []
    if not slots:
        raise ValidationError("Doctor must have at least one time slot")
    if len(set(slots)) != len(slots):
        raise ValidationError("Time slots must be unique")
    for slot in slots:
        if not isinstance(slot, str) or not TIME_SLOT_PATTERN.match(slot):
            raise ValidationError(f"Invalid time slot '{slot}'")

    max_per_day = doctor.max_appointments_per_day
    if not isinstance(max_per_day, int) or isinstance(max_per_day, bool) or max_per_day < 1:
        raise ValidationError("Maximum appointments per day must be at least 1")

    for value in doctor.unavailable_dates or []:
        if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
            raise ValidationError(f"Invalid unavailable date '{value}'")
