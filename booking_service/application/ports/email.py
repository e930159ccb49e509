from __future__ import annotations

from abc import ABC, abstractmethod

from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import EmailReceipt


class EmailPort(ABC):
    @abstractmethod
    def is_ready(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def send_confirmation(self, record: BookingRecord, calendar_link: str | None) -> EmailReceipt:
        """Send booking confirmation to the client. Raises EmailError."""
        raise NotImplementedError
