from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable

from booking_service.application.exceptions import (
    InvalidInput,
    SlotConflict,
    UnexpectedError,
    UnknownService,
)
from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.application.ports.calendar import CalendarPort
from booking_service.application.ports.email import EmailPort
from booking_service.application.ports.service_catalog import ServiceCatalogPort
from booking_service.application.use_cases.availability import AvailabilityResolver
from booking_service.application.utils.booking_input import (
    generate_booking_id,
    parse_booking_date,
    parse_booking_time,
    validate_contact,
)
from booking_service.domain.entities.booking import BookingOutcome, BookingRecord, BookingRequest
from booking_service.domain.entities.integration import CalendarEvent, NotificationEvent

SLOT_CONFLICT_MESSAGE = "The selected time slot is not available. Please choose another time."


def _utc_now_iso() -> str:
    return datetime.now(dt_timezone.utc).isoformat()


class BookingUseCase:
    """
    Books one appointment.

    validate -> past-date check -> availability gate -> remote delegation,
    falling back to direct calendar event + notification + email.

    Calendar errors at the availability gate fail the booking as an
    unexpected error; in the direct fallback they are logged and swallowed.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        events: BookingEventsPort,
        email: EmailPort,
        catalog: ServiceCatalogPort,
        resolver: AvailabilityResolver,
        calendar_id: str | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._calendar = calendar
        self._events = events
        self._email = email
        self._catalog = catalog
        self._resolver = resolver
        self._calendar_id = calendar_id
        self._clock_ms = clock_ms
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: BookingRequest, client_ip: str = "unknown") -> BookingOutcome:
        try:
            record = self._validate(request)
            self._resolver.ensure_not_past(record.day)
            await self._check_availability(record)

            outcome = await self._delegate(record)
            if outcome is not None:
                return outcome

            return await self._book_directly(record, client_ip)
        except (InvalidInput, SlotConflict):
            raise
        except Exception as e:
            self._logger.exception("Error creating booking", extra={"error": str(e)})
            await self._notify_quietly(
                NotificationEvent.booking_error,
                {"error": str(e), "timestamp": _utc_now_iso()},
            )
            raise UnexpectedError("Failed to create booking. Please try again later.") from e

    def _validate(self, request: BookingRequest) -> BookingRecord:
        if request.agreed_to_terms is not True:
            raise InvalidInput("You must agree to the terms")
        if not request.service_names:
            raise InvalidInput("At least one service must be selected")
        validate_contact(request.client_name, request.email, request.phone)
        day = parse_booking_date(request.date)
        start = parse_booking_time(request.time)

        services = []
        for name in request.service_names:
            service = self._catalog.get_service(name)
            if service is None:
                raise UnknownService(f'Service "{name}" not found')
            services.append(service)

        return BookingRecord(
            client_name=request.client_name.strip(),
            email=request.email.strip(),
            phone=request.phone.strip(),
            day=day,
            start=start,
            services=services,
            notes=request.notes,
        )

    async def _check_availability(self, record: BookingRecord) -> None:
        if not self._calendar.is_ready():
            self._logger.warning("Calendar not configured, skipping availability check")
            return

        duration = record.total_duration_minutes
        self._logger.info(
            "Checking availability",
            extra={"date": record.date_iso, "time": record.time_24h, "duration": duration},
        )
        # Calendar errors propagate from here.
        is_free = await self._resolver.is_slot_free(record.day, record.start, duration)
        if is_free:
            return

        await self._notify_quietly(
            NotificationEvent.slot_conflict,
            {"error": "Time slot not available", "bookingData": record.to_payload(), "timestamp": _utc_now_iso()},
        )
        raise SlotConflict(SLOT_CONFLICT_MESSAGE)

    async def _delegate(self, record: BookingRecord) -> BookingOutcome | None:
        if not self._events.is_ready():
            return None

        try:
            self._logger.info("Processing booking through remote service")
            result = await self._events.submit_booking(record, calendar_id=self._calendar_id)
        except Exception as e:
            self._logger.error("Remote booking processing failed, falling back", extra={"error": str(e)})
            return None

        if not result.accepted:
            self._logger.warning(
                "Remote booking processing rejected, falling back",
                extra={"reason": result.message},
            )
            return None

        booking_id = self._new_booking_id(record)
        self._logger.info(
            "Booking processed by remote service",
            extra={"booking_id": booking_id, "event_id": result.event_id},
        )
        return BookingOutcome(booking_id=booking_id, event_id=result.event_id, delegated=True)

    async def _book_directly(self, record: BookingRecord, client_ip: str) -> BookingOutcome:
        self._logger.info("Processing booking directly")
        record.booking_id = self._new_booking_id(record)

        event = await self._create_calendar_event(record)

        results = await asyncio.gather(
            self._notify_quietly(
                NotificationEvent.booking_created,
                {**record.to_payload(), "timestamp": _utc_now_iso(), "ip": client_ip},
            ),
            self._send_confirmation(record, event.event_link if event else None),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                self._logger.error("Post-booking side effect failed", extra={"error": str(result)})

        self._logger.info(
            "Booking created",
            extra={"booking_id": record.booking_id, "event_id": record.event_id},
        )
        return BookingOutcome(booking_id=record.booking_id, event_id=record.event_id)

    async def _create_calendar_event(self, record: BookingRecord) -> CalendarEvent | None:
        if not self._calendar.is_ready():
            self._logger.warning("Calendar not configured, skipping event creation")
            return None

        try:
            event = await self._calendar.create_event(record)
        except Exception as e:
            # The booking still succeeds without a calendar artifact.
            self._logger.error("Error creating calendar event", extra={"error": str(e)})
            await self._notify_quietly(
                NotificationEvent.booking_error,
                {
                    "error": f"Calendar event creation failed: {e}",
                    "bookingId": record.booking_id,
                    "timestamp": _utc_now_iso(),
                },
            )
            return None

        record.event_id = event.event_id
        self._logger.info("Calendar event created", extra={"event_id": event.event_id})
        await self._notify_quietly(
            NotificationEvent.calendar_event_created,
            {
                "eventId": event.event_id,
                "date": record.date_iso,
                "time": record.time_24h,
                "clientName": record.client_name,
                "services": ", ".join(s.name for s in record.services),
            },
        )
        return event

    async def _send_confirmation(self, record: BookingRecord, calendar_link: str | None) -> None:
        if not self._email.is_ready():
            self._logger.warning("Email service not configured, skipping confirmation email")
            return

        try:
            receipt = await self._email.send_confirmation(record, calendar_link)
        except Exception as e:
            self._logger.error(
                "Failed to send confirmation email",
                extra={"booking_id": record.booking_id, "error": str(e)},
            )
            return

        self._logger.info(
            "Confirmation email dispatched",
            extra={"booking_id": record.booking_id, "status": receipt.message_id},
        )

    async def _notify_quietly(self, event_type: NotificationEvent, payload: dict[str, Any]) -> None:
        if not self._events.is_ready():
            self._logger.info(
                "Event gateway not configured, skipping notification",
                extra={"event_type": event_type.value},
            )
            return
        try:
            result = await self._events.notify(event_type, payload)
        except Exception as e:
            self._logger.error(
                "Failed to send notification",
                extra={"event_type": event_type.value, "error": str(e)},
            )
            return
        if not result.accepted:
            self._logger.warning(
                "Notification not accepted",
                extra={"event_type": event_type.value, "reason": result.message},
            )

    def _new_booking_id(self, record: BookingRecord) -> str:
        now_ms = self._clock_ms() if self._clock_ms else None
        return generate_booking_id(record.client_name, now_ms)
