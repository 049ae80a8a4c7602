"""Shared validation utilities"""

import re
from datetime import date
from typing import Optional

from ..exceptions import InvalidDate

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_SLOT_PATTERN = re.compile(r"^(0[1-9]|1[0-2]):[0-5]\d (AM|PM)$")


def parse_iso_date(value) -> date:
    """
    Parse a calendar date given as ``YYYY-MM-DD``.

    ``date.fromisoformat`` alone also accepts forms such as ``20240101``,
    so the shape is checked first.

    Raises:
        InvalidDate: If the value is missing, not in YYYY-MM-DD form,
            or not a real calendar day (e.g. 2024-02-30)
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise InvalidDate()
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate() from e


def validate_iso_date(value: str) -> str:
    """Pydantic-friendly variant of ``parse_iso_date`` that raises ValueError"""
    try:
        return parse_iso_date(value).isoformat()
    except InvalidDate as e:
        raise ValueError(e.message) from e


def validate_time_slot_label(label: str) -> str:
    """
    Validate and normalize a daily slot label such as ``09:00 AM``.

    Args:
        label: Slot label, 12-hour clock with a two-digit hour

    Returns:
        Label with surrounding whitespace removed and upper-case meridiem

    Raises:
        ValueError: If the label is not in ``HH:MM AM|PM`` form
    """
    normalized = " ".join(label.split()).upper()
    if not TIME_SLOT_PATTERN.match(normalized):
        raise ValueError(f"Invalid time slot '{label}', expected format like '09:00 AM'")
    return normalized


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email
