from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Callable
from zoneinfo import ZoneInfo

from booking_service.application.exceptions import InvalidInput, PastDate
from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.application.ports.calendar import CalendarPort
from booking_service.application.scheduling.slots import generate_slots
from booking_service.application.utils.booking_input import today_in
from booking_service.domain.entities.integration import NotificationEvent
from booking_service.domain.entities.interval import TimeInterval
from booking_service.domain.entities.slot import Slot


def days_covered(interval: TimeInterval) -> list[date]:
    """Local calendar days touched by the half-open interval."""
    first = interval.start.date()
    last = (interval.end - timedelta(microseconds=1)).date()
    return [first + timedelta(days=n) for n in range((last - first).days + 1)]


class AvailabilityResolver:
    def __init__(
        self,
        calendar: CalendarPort,
        timezone: ZoneInfo,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._today = today or (lambda: today_in(timezone))
        self._logger = logging.getLogger(__name__)

    def ensure_not_past(self, day: date) -> None:
        if day < self._today():
            raise PastDate("Cannot book or check availability for past dates")

    async def is_slot_free(self, day: date, start: time, duration_minutes: int) -> bool:
        """
        True iff no busy interval overlaps [start, start + duration), including
        events on the following day when the slot runs past midnight.

        Calendar failures propagate: a slot that cannot be verified is not free.
        """
        self.ensure_not_past(day)
        if duration_minutes <= 0:
            raise InvalidInput("Duration must be a positive number of minutes")

        slot_start = datetime.combine(day, start, tzinfo=self._timezone)
        candidate = TimeInterval(slot_start, slot_start + timedelta(minutes=duration_minutes))

        busy: list[TimeInterval] = []
        for covered_day in days_covered(candidate):
            busy.extend(await self._calendar.list_busy_intervals(covered_day))
        conflicts = [b for b in busy if b.overlaps(candidate)]
        if conflicts:
            self._logger.info(
                "Requested slot overlaps existing events",
                extra={
                    "date": day.isoformat(),
                    "time": start.strftime("%H:%M"),
                    "duration": duration_minutes,
                    "reason": f"{len(conflicts)} conflicting event(s)",
                },
            )
            return False
        return True

    async def list_free_slots(self, day: date, duration_minutes: int) -> list[Slot]:
        self.ensure_not_past(day)
        slots = generate_slots(day, duration_minutes, self._timezone)

        if not self._calendar.is_ready():
            self._logger.warning(
                "Calendar not configured, returning unfiltered slots",
                extra={"date": day.isoformat(), "duration": duration_minutes},
            )
            return slots

        busy = await self._calendar.list_busy_intervals(day)
        free = [slot for slot in slots if not any(slot.interval.overlaps(b) for b in busy)]
        self._logger.info(
            "Resolved free slots",
            extra={"date": day.isoformat(), "duration": duration_minutes, "status": f"{len(free)}/{len(slots)}"},
        )
        return free


class CheckAvailabilityUseCase:
    def __init__(self, resolver: AvailabilityResolver, events: BookingEventsPort) -> None:
        self._resolver = resolver
        self._events = events
        self._logger = logging.getLogger(__name__)

    async def execute(self, day: date, duration_minutes: int, client_ip: str = "unknown") -> list[Slot]:
        if duration_minutes <= 0:
            raise InvalidInput("Duration must be a positive number of minutes")
        self._resolver.ensure_not_past(day)

        _, slots = await asyncio.gather(
            self._notify_check(day, duration_minutes, client_ip),
            self._resolver.list_free_slots(day, duration_minutes),
            return_exceptions=True,
        )
        if isinstance(slots, BaseException):
            raise slots
        return slots

    async def _notify_check(self, day: date, duration_minutes: int, client_ip: str) -> None:
        if not self._events.is_ready():
            return
        try:
            await self._events.notify(
                NotificationEvent.availability_check,
                {
                    "date": day.isoformat(),
                    "duration": duration_minutes,
                    "timestamp": datetime.now(dt_timezone.utc).isoformat(),
                    "ip": client_ip,
                },
            )
        except Exception as e:
            self._logger.error(
                "Failed to notify availability check",
                extra={"event_type": NotificationEvent.availability_check.value, "error": str(e)},
            )
