"""
In-process critical sections for the booking commit path.

Every booking for the same doctor and date goes through the same lock, so
the slot check, the capacity check and the insert happen as one unit inside
this process. Across processes the database row lock on the doctor and the
partial unique index on active slots take over.
"""

import logging
import os
from contextlib import contextmanager
from threading import Lock

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = float(os.getenv("BOOKING_LOCK_TIMEOUT", "10"))


class BookingLocks:
    """Registry of locks keyed by (doctor_id, date), dropped once nobody holds them"""

    def __init__(self, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout
        self._guard = Lock()
        # Format: {(doctor_id, date): [lock, waiters]}
        self._entries: dict[tuple, list] = {}

    @contextmanager
    def hold(self, doctor_id, day):
        key = (doctor_id, str(day))

        with self._guard:
            entry = self._entries.setdefault(key, [Lock(), 0])
            entry[1] += 1

        lock = entry[0]
        try:
            if not lock.acquire(timeout=self.timeout):
                logger.error(f"❌ Timed out waiting for booking lock {key}")
                raise TimeoutError(f"Timed out waiting for booking lock on doctor {doctor_id}, {day}")
            try:
                yield
            finally:
                lock.release()
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


booking_locks = BookingLocks()
