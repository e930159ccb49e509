from __future__ import annotations

import logging
import time
from datetime import datetime, timezone as dt_timezone

from booking_service.application.exceptions import EmailError
from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.application.ports.email import EmailPort
from booking_service.core.config import settings
from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import EmailReceipt, NotificationEvent


class McpEmailService(EmailPort):
    """
    Confirmation emails delivered by the booking event processor.

    The message envelope is handed over as an ``email_sent`` event; the
    processor owns templating and SMTP delivery.
    """

    def __init__(
        self,
        events: BookingEventsPort,
        email_from: str | None = None,
        business_name: str | None = None,
        business_email: str | None = None,
    ) -> None:
        self._events = events
        self._email_from = email_from or settings.EMAIL_FROM or ""
        self._business_name = business_name or settings.BUSINESS_NAME or ""
        self._business_email = business_email or settings.BUSINESS_EMAIL or ""
        self._logger = logging.getLogger(__name__)

    def is_ready(self) -> bool:
        return bool(self._email_from and self._business_name and self._business_email) and self._events.is_ready()

    def build_message(self, record: BookingRecord, calendar_link: str | None) -> dict:
        return {
            "to": record.email,
            "from": self._email_from,
            "replyTo": self._business_email,
            "subject": f"Booking Confirmation - {self._business_name}",
            "data": {
                "clientName": record.client_name,
                "businessName": self._business_name,
                "date": record.date_iso,
                "time": record.time_24h,
                "services": record.services_text(),
                "totalPrice": record.total_price,
                "calendarLink": calendar_link,
                "bookingReference": record.event_id or "N/A",
            },
        }

    async def send_confirmation(self, record: BookingRecord, calendar_link: str | None) -> EmailReceipt:
        if not self.is_ready():
            raise EmailError("Email service not properly configured")

        message = self.build_message(record, calendar_link)
        try:
            result = await self._events.notify(
                NotificationEvent.email_sent,
                {
                    "recipient": record.email,
                    "subject": message["subject"],
                    "from": message["from"],
                    "replyTo": message["replyTo"],
                    "timestamp": datetime.now(dt_timezone.utc).isoformat(),
                    "status": "pending",
                    "templateData": message["data"],
                },
            )
        except Exception as e:
            raise EmailError(f"Failed to dispatch confirmation email: {e}") from e

        if not result.accepted:
            raise EmailError(f"Confirmation email not accepted: {result.message}")

        message_id = f"email_{int(time.time() * 1000)}"
        self._logger.info(
            "Confirmation email handed to event processor",
            extra={"booking_id": record.booking_id, "status": message_id},
        )
        return EmailReceipt(message_id=message_id, recipient=record.email)
