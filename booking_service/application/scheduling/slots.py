from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from booking_service.domain.entities.interval import TimeInterval
from booking_service.domain.entities.slot import Slot

OPEN_HOUR = 9
CLOSE_HOUR = 17


def format_hour(value: float) -> str:
    """Render fractional hours (e.g. 9.5) as a zero-padded HH:MM label."""
    hour = math.floor(value)
    minute = round((value - hour) * 60)
    if minute == 60:
        hour += 1
        minute = 0
    return f"{hour:02d}:{minute:02d}"


def generate_slots(
    day: date,
    duration_minutes: int,
    timezone: ZoneInfo,
    open_hour: int = OPEN_HOUR,
    close_hour: int = CLOSE_HOUR,
) -> list[Slot]:
    """
    Candidate slots for a day, earliest first.

    Slots are back to back, each exactly duration_minutes long. A trailing
    slot that would end after close_hour is not offered.
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    day_start = datetime.combine(day, time(0, 0), tzinfo=timezone)
    duration_hours = duration_minutes / 60
    slots: list[Slot] = []

    # Offsets are whole minutes; labels come from fractional hours.
    offset = open_hour * 60
    while offset + duration_minutes <= close_hour * 60:
        start_hours = offset / 60
        start = day_start + timedelta(minutes=offset)
        end = start + timedelta(minutes=duration_minutes)
        slots.append(
            Slot(
                interval=TimeInterval(start, end),
                start_time=format_hour(start_hours),
                end_time=format_hour(start_hours + duration_hours),
            )
        )
        offset += duration_minutes

    return slots
