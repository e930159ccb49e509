"""Shared fakes and builders for booking tests."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any
from zoneinfo import ZoneInfo

from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.application.ports.calendar import CalendarPort
from booking_service.application.ports.email import EmailPort
from booking_service.application.use_cases.availability import AvailabilityResolver
from booking_service.application.use_cases.booking import BookingUseCase
from booking_service.domain.entities.booking import BookingRecord, BookingRequest
from booking_service.domain.entities.integration import (
    CalendarEvent,
    EmailReceipt,
    NotificationEvent,
    NotificationResult,
    SubmissionResult,
)
from booking_service.domain.entities.interval import TimeInterval
from booking_service.infrastructure.catalog.service_catalog_store import ServiceCatalogStore

TZ = ZoneInfo("Europe/Berlin")
TODAY = date(2030, 1, 15)
FUTURE_DAY = date(2030, 1, 16)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


def busy(day: date, start: str, end: str) -> TimeInterval:
    sh, sm = (int(p) for p in start.split(":"))
    eh, em = (int(p) for p in end.split(":"))
    return TimeInterval(at(day, sh, sm), at(day, eh, em))


class FakeCalendar(CalendarPort):
    def __init__(
        self,
        ready: bool = True,
        busy: list[TimeInterval] | None = None,
        list_error: Exception | None = None,
        create_error: Exception | None = None,
    ) -> None:
        self.ready = ready
        self.busy = list(busy or [])
        self.list_error = list_error
        self.create_error = create_error
        self.list_calls: list[date] = []
        self.created: list[BookingRecord] = []

    def is_ready(self) -> bool:
        return self.ready

    async def list_busy_intervals(self, day: date) -> list[TimeInterval]:
        self.list_calls.append(day)
        if self.list_error:
            raise self.list_error
        return list(self.busy)

    async def create_event(self, record: BookingRecord) -> CalendarEvent:
        self.created.append(record)
        if self.create_error:
            raise self.create_error
        return CalendarEvent(event_id="evt_123", event_link="https://calendar.example/evt_123")

    @property
    def call_count(self) -> int:
        return len(self.list_calls) + len(self.created)


class FakeEvents(BookingEventsPort):
    def __init__(
        self,
        ready: bool = True,
        submit_result: SubmissionResult | None = None,
        submit_error: Exception | None = None,
        notify_error: Exception | None = None,
        notify_result: NotificationResult | None = None,
    ) -> None:
        self.ready = ready
        self.notify_result = notify_result or NotificationResult(accepted=True)
        self.submit_result = submit_result or SubmissionResult(accepted=False, message="not handled")
        self.submit_error = submit_error
        self.notify_error = notify_error
        self.submitted: list[tuple[BookingRecord, str | None]] = []
        self.notifications: list[tuple[NotificationEvent, dict[str, Any]]] = []

    def is_ready(self) -> bool:
        return self.ready

    async def submit_booking(self, record: BookingRecord, calendar_id: str | None = None) -> SubmissionResult:
        self.submitted.append((record, calendar_id))
        if self.submit_error:
            raise self.submit_error
        return self.submit_result

    async def notify(self, event_type: NotificationEvent, payload: dict[str, Any]) -> NotificationResult:
        self.notifications.append((event_type, payload))
        if self.notify_error:
            raise self.notify_error
        return self.notify_result

    def event_types(self) -> list[NotificationEvent]:
        return [event_type for event_type, _ in self.notifications]

    @property
    def call_count(self) -> int:
        return len(self.submitted) + len(self.notifications)


class FakeEmail(EmailPort):
    def __init__(self, ready: bool = True, error: Exception | None = None) -> None:
        self.ready = ready
        self.error = error
        self.sent: list[tuple[BookingRecord, str | None]] = []

    def is_ready(self) -> bool:
        return self.ready

    async def send_confirmation(self, record: BookingRecord, calendar_link: str | None) -> EmailReceipt:
        self.sent.append((record, calendar_link))
        if self.error:
            raise self.error
        return EmailReceipt(message_id="email_1", recipient=record.email)


def make_request(**overrides: Any) -> BookingRequest:
    fields: dict[str, Any] = {
        "client_name": "Maria Schmidt",
        "email": "maria@example.com",
        "phone": "+49 170 1234567",
        "date": FUTURE_DAY.isoformat(),
        "time": "10:00",
        "service_names": ["Massage"],
        "notes": "First visit",
        "agreed_to_terms": True,
    }
    fields.update(overrides)
    return BookingRequest(**fields)


def make_use_case(
    calendar: FakeCalendar | None = None,
    events: FakeEvents | None = None,
    email: FakeEmail | None = None,
) -> BookingUseCase:
    calendar = calendar or FakeCalendar()
    return BookingUseCase(
        calendar=calendar,
        events=events or FakeEvents(ready=False),
        email=email or FakeEmail(),
        catalog=ServiceCatalogStore(),
        resolver=AvailabilityResolver(calendar=calendar, timezone=TZ, today=lambda: TODAY),
        calendar_id="studio@example.com",
        clock_ms=lambda: 1736935200123,
    )

