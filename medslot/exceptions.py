"""Domain errors raised by the scheduling engine and the service layer.

None of these know about HTTP; ``main.py`` maps each one to a status code.
Every rejection carries a stable ``code`` so callers can assert on the cause.
"""


class SchedulingError(Exception):
    """Base class for every expected, caller-visible failure."""

    default_message = "Request could not be processed"
    code = "scheduling_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SchedulingError):
    """Malformed input: bad date, missing field, unknown status."""

    default_message = "Invalid request"
    code = "validation_error"


class InvalidDate(ValidationError):
    default_message = "Date must be a valid calendar date in YYYY-MM-DD format"
    code = "invalid_date"


class AdmissionError(SchedulingError):
    """A well-formed booking request that the business rules refuse."""

    default_message = "Booking request was not admitted"
    code = "admission_error"


class DoctorUnavailableOnDate(AdmissionError):
    default_message = "Doctor is not available on this date"
    code = "doctor_unavailable_on_date"


class InvalidTimeSlot(AdmissionError):
    default_message = "This time slot is not in the doctor's schedule"
    code = "invalid_time_slot"


class SlotAlreadyBooked(AdmissionError):
    default_message = "This time slot is already booked"
    code = "slot_already_booked"


class DailyCapacityReached(AdmissionError):
    default_message = "Doctor has reached maximum appointments for this day"
    code = "daily_capacity_reached"


class AuthorizationError(SchedulingError):
    default_message = "Access denied"
    code = "access_denied"


class NotFoundError(SchedulingError):
    default_message = "Resource not found"
    code = "not_found"


__all__ = [
    "SchedulingError",
    "ValidationError",
    "InvalidDate",
    "AdmissionError",
    "DoctorUnavailableOnDate",
    "InvalidTimeSlot",
    "SlotAlreadyBooked",
    "DailyCapacityReached",
    "AuthorizationError",
    "NotFoundError",
]
