"""Appointment lifecycle - who may move an appointment to which status"""

from ...enums import AppointmentStatus, UserRole
from ...exceptions import AuthorizationError, ValidationError

DOCTOR_TARGETS = frozenset(
    {AppointmentStatus.ACCEPTED, AppointmentStatus.REJECTED, AppointmentStatus.COMPLETED}
)


def parse_status(value) -> AppointmentStatus:
    """Convert a raw status value, rejecting anything outside the enumerated set"""
    if isinstance(value, AppointmentStatus):
        return value
    try:
        return AppointmentStatus(value)
    except ValueError as e:
        raise ValidationError("Invalid status") from e


def _doctor_may(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    return not current.is_terminal and requested in DOCTOR_TARGETS


def _patient_may(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    # Cancellation only, and only before the doctor has accepted
    return current == AppointmentStatus.PENDING and requested == AppointmentStatus.REJECTED


def _admin_may(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    return True


TRANSITION_RULES = {
    UserRole.DOCTOR: _doctor_may,
    UserRole.PATIENT: _patient_may,
    UserRole.ADMIN: _admin_may,
}


def authorize_transition(
    role: UserRole,
    owns_appointment: bool,
    current: AppointmentStatus,
    requested: AppointmentStatus,
) -> None:
    """
    Raise AuthorizationError unless ``role`` may move ``current`` to ``requested``.

    Doctors and patients must own the appointment; admins need not.
    """
    role = UserRole(role)
    current = AppointmentStatus(current)

    if role != UserRole.ADMIN and not owns_appointment:
        raise AuthorizationError()

    if not TRANSITION_RULES[role](current, requested):
        if role == UserRole.PATIENT:
            raise AuthorizationError("Can only cancel pending appointments")
        raise AuthorizationError(
            f"Cannot change appointment status from {current.value} to {requested.value}"
        )
