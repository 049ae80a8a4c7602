"""Booking admission - the validation sequence a booking request must pass.

The checks run in a fixed order and stop at the first failure, so a request
always fails with the most fundamental reason:

1. date is a valid YYYY-MM-DD calendar date   -> InvalidDate
2. doctor works that day                      -> DoctorUnavailableOnDate
3. time is one of the doctor's slots          -> InvalidTimeSlot
4. nobody holds that slot                     -> SlotAlreadyBooked
5. the day still has capacity                 -> DailyCapacityReached

``check_admission`` is pure. Callers that commit the result must run it
inside the booking critical section against freshly read appointments.
"""

from datetime import date
from typing import Iterable

from ...exceptions import (
    DailyCapacityReached,
    DoctorUnavailableOnDate,
    InvalidTimeSlot,
    SlotAlreadyBooked,
)
from ...shared.validators import parse_iso_date
from .availability import DateLike, is_available
from .slots import committed_appointments


def check_admission(doctor, day: DateLike, time: str, appointments: Iterable) -> date:
    """
    Decide whether a booking for ``doctor`` at ``day``/``time`` may be admitted.

    Args:
        doctor: Doctor record (schedule attributes and ``id``)
        day: Requested date, ``date`` or ``YYYY-MM-DD``
        time: Requested slot label
        appointments: Existing appointments; only this doctor's active
            ones on ``day`` are considered

    Returns:
        The parsed booking date

    Raises:
        InvalidDate, DoctorUnavailableOnDate, InvalidTimeSlot,
        SlotAlreadyBooked, DailyCapacityReached
    """
    booking_date = parse_iso_date(day)

    if not is_available(doctor, booking_date):
        raise DoctorUnavailableOnDate()

    if time not in doctor.available_time_slots:
        raise InvalidTimeSlot()

    committed = committed_appointments(doctor, booking_date, appointments)

    if any(apt.time == time for apt in committed):
        raise SlotAlreadyBooked()

    if len(committed) >= doctor.max_appointments_per_day:
        raise DailyCapacityReached()

    return booking_date
