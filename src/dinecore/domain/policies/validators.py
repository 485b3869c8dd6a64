from __future__ import annotations

import re
from datetime import date, datetime, time

from dinecore.domain.common.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_ALLOWED_PATTERN = re.compile(r"^[0-9+()\- ]*$")
PHONE_DIGITS = 11
MAX_GUESTS = 10


def require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def validate_email(value: str | None, field: str = "email") -> str:
    email = require_text(value, field)
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address", field=field)
    return email


def phone_digits(value: str) -> str:
    return re.sub(r"\D", "", value)


def validate_phone(value: str | None, field: str = "phone") -> str:
    phone = require_text(value, field)
    if not PHONE_ALLOWED_PATTERN.match(phone):
        raise ValidationError("Phone number can only contain digits, +, - or ()", field=field)
    if len(phone_digits(phone)) != PHONE_DIGITS:
        raise ValidationError(f"Phone number must have exactly {PHONE_DIGITS} digits", field=field)
    return phone


def validate_guests(value: int | str | None, field: str = "guests") -> int:
    try:
        guests = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError("guest count must be a whole number", field=field) from exc
    if guests < 1:
        raise ValidationError("guest count must be at least 1", field=field)
    if guests > MAX_GUESTS:
        raise ValidationError(f"guest count cannot exceed {MAX_GUESTS}", field=field)
    return guests


def parse_date(value: date | str | None, field: str = "date") -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    raw = require_text(value if isinstance(value, str) else None, field)
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError("date must use YYYY-MM-DD", field=field) from exc


def parse_time(value: time | str | None, field: str = "time") -> time:
    if isinstance(value, time):
        return value
    raw = require_text(value if isinstance(value, str) else None, field)
    try:
        return time.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError("time must use HH:MM", field=field) from exc


def validate_booking_slot(booking_date: date, booking_time: time | None, now: datetime) -> None:
    """Reject past dates, and times that are not strictly later than now on today's date."""
    today = now.date()
    if booking_date < today:
        raise ValidationError("date cannot be in the past", field="date")
    if booking_time is None:
        return
    if booking_date == today and booking_time <= now.time().replace(tzinfo=None):
        raise ValidationError("time must be later than the current time", field="time")
