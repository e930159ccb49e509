from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import CalendarEvent
from booking_service.domain.entities.interval import TimeInterval


class CalendarPort(ABC):
    @abstractmethod
    def is_ready(self) -> bool:
        """True when the calendar is configured and may be called."""
        raise NotImplementedError

    @abstractmethod
    async def list_busy_intervals(self, day: date) -> list[TimeInterval]:
        """Busy intervals overlapping the given calendar day. Raises CalendarError."""
        raise NotImplementedError

    @abstractmethod
    async def create_event(self, record: BookingRecord) -> CalendarEvent:
        """Create calendar event for a booking. Raises CalendarError."""
        raise NotImplementedError
