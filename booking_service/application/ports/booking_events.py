from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import (
    NotificationEvent,
    NotificationResult,
    SubmissionResult,
)


class BookingEventsPort(ABC):
    @abstractmethod
    def is_ready(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def submit_booking(self, record: BookingRecord, calendar_id: str | None = None) -> SubmissionResult:
        """Hand the whole booking to the remote processing service."""
        raise NotImplementedError

    @abstractmethod
    async def notify(self, event_type: NotificationEvent, payload: dict[str, Any]) -> NotificationResult:
        raise NotImplementedError
