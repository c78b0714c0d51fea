"""Shared validation utilities"""

import re
from datetime import date, datetime, timezone
from typing import Optional, Union


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a 10-digit phone number.

    Formatting characters are ignored and a leading country code 1 is dropped,
    so "+1 (555) 123-4567" and "5551234567" are the same number.

    Returns:
        The 10 digits

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10:
        raise ValueError("Please enter a valid 10-digit phone number")

    return digits


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

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Please enter a valid email address")

    return email


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_time(value: Optional[str]) -> Optional[str]:
    """Validate a 24h "HH:MM" time string"""
    if value is None:
        return value
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_date(value: Union[str, date, datetime, None]) -> datetime:
    """
    Parse a requested appointment date.

    Accepts "YYYY-MM-DD" or an ISO 8601 datetime (a trailing "Z" is allowed).
    Timezone-aware values are converted to naive UTC.

    Raises:
        ValueError: If the value is missing or not a date
    """
    if value is None or value == "":
        raise ValueError("Date is required")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError("Invalid date format") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
