"""
Scheduling Domain - slot-allocation engine

Pure decision logic shared by the doctors and appointments domains:

- availability.py: is a calendar date a working day for a doctor
- slots.py:        which of the doctor's daily slots are still open
- admission.py:    may a booking request be admitted (validation sequence)
- lifecycle.py:    which status changes each actor role may make
- locks.py:        in-process critical sections keyed by doctor + date

Nothing here performs I/O. The service layer loads doctors and appointments,
calls into these modules and persists the outcome.

Weekday convention used everywhere: 0 = Sunday, 1 = Monday ... 6 = Saturday.
"""

from .admission import check_admission
from .availability import is_available, validate_doctor_schedule, weekday_index
from .lifecycle import authorize_transition, parse_status
from .locks import BookingLocks, booking_locks
from .slots import (
    SlotView,
    available_slots,
    committed_appointments,
    enumerate_slots,
    is_capacity_reached,
)

__all__ = [
    "BookingLocks",
    "SlotView",
    "authorize_transition",
    "available_slots",
    "booking_locks",
    "check_admission",
    "committed_appointments",
    "enumerate_slots",
    "is_available",
    "is_capacity_reached",
    "parse_status",
    "validate_doctor_schedule",
    "weekday_index",
]
