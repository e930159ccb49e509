from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from booking_service.application.ports.calendar import CalendarPort
from booking_service.core.config import settings
from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import CalendarEvent
from booking_service.domain.entities.interval import TimeInterval


class MockCalendar(CalendarPort):
    def __init__(self, busy: list[TimeInterval] | None = None, timezone: ZoneInfo | None = None) -> None:
        self._timezone = timezone or ZoneInfo(settings.BUSINESS_TIMEZONE)
        self._events: dict[str, TimeInterval] = {}
        self._busy: list[TimeInterval] = list(busy or [])
        self._logger = logging.getLogger(__name__)

    def is_ready(self) -> bool:
        return True

    async def list_busy_intervals(self, day: date) -> list[TimeInterval]:
        intervals = self._busy + list(self._events.values())
        return [i for i in intervals if i.start.date() <= day <= (i.end - timedelta(microseconds=1)).date()]

    async def create_event(self, record: BookingRecord) -> CalendarEvent:
        event_id = f"mock_event_{len(self._events) + 1}"
        start = datetime.combine(record.day, record.start, tzinfo=self._timezone)
        end = start + timedelta(minutes=record.total_duration_minutes)
        self._events[event_id] = TimeInterval(start, end)
        self._logger.info(
            "Mock calendar event created",
            extra={"event_id": event_id, "date": record.date_iso, "time": record.time_24h},
        )
        return CalendarEvent(event_id=event_id, event_link=f"https://calendar.example/{event_id}")
