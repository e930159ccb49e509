from __future__ import annotations

import re
import time as _time
from datetime import date, datetime, time

from booking_service.application.exceptions import InvalidInput

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_booking_date(value: str) -> date:
    if not value or not DATE_RE.match(value):
        raise InvalidInput("Date must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInput("Date must be in YYYY-MM-DD format")


def parse_booking_time(value: str) -> time:
    if not value or not TIME_RE.match(value):
        raise InvalidInput("Time must be in HH:MM format")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def validate_contact(name: str, email: str, phone: str) -> None:
    if not name or len(name.strip()) < 2:
        raise InvalidInput("Name is required")
    if not email or not EMAIL_RE.match(email.strip()):
        raise InvalidInput("Valid email is required")
    if not phone or len(phone.strip()) < 5:
        raise InvalidInput("Phone number is required")


def generate_booking_id(client_name: str, now_ms: int | None = None) -> str:
    """
    BK-<NAME>-<digits>: up to six alphanumerics of the client name plus the
    last six digits of the epoch-millisecond timestamp.

    Not unique: two bookings for similar names within the same
    millisecond window collide.
    """
    if now_ms is None:
        now_ms = int(_time.time() * 1000)
    name_part = re.sub(r"[^a-zA-Z0-9]", "", client_name)[:6].upper()
    stamp = str(now_ms)
    return f"BK-{name_part}-{stamp[-6:]}"


def today_in(timezone) -> date:
    return datetime.now(timezone).date()
