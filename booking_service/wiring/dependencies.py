from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking_service.core.config import settings
from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.application.ports.calendar import CalendarPort
from booking_service.application.ports.email import EmailPort
from booking_service.application.ports.service_catalog import ServiceCatalogPort
from booking_service.application.use_cases.availability import AvailabilityResolver, CheckAvailabilityUseCase
from booking_service.application.use_cases.booking import BookingUseCase
from booking_service.infrastructure.calendar.google_calendar import GoogleCalendar
from booking_service.infrastructure.calendar.mock_calendar import MockCalendar
from booking_service.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_service.infrastructure.email.email_service import McpEmailService
from booking_service.infrastructure.events.mcp_client import McpBookingEvents

logger = logging.getLogger(__name__)

_mock_calendar: MockCalendar | None = None


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore.from_json(settings.DEFAULT_SERVICES)


def get_calendar() -> CalendarPort:
    calendar = GoogleCalendar(timezone=get_timezone())
    if calendar.is_ready():
        return calendar
    if settings.ENV.lower() in {"dev", "local"}:
        return get_mock_calendar()
    logger.warning("Google Calendar not configured, running in degraded mode")
    return calendar


def get_mock_calendar() -> MockCalendar:
    global _mock_calendar
    if _mock_calendar is None:
        logger.info("Using MockCalendar (Google Calendar not configured, ENV=dev/local)")
        _mock_calendar = MockCalendar(timezone=get_timezone())
    return _mock_calendar


def get_booking_events() -> BookingEventsPort:
    return McpBookingEvents()


def get_email_service(events: BookingEventsPort) -> EmailPort:
    return McpEmailService(events=events)


def get_check_availability_use_case() -> CheckAvailabilityUseCase:
    resolver = AvailabilityResolver(calendar=get_calendar(), timezone=get_timezone())
    return CheckAvailabilityUseCase(resolver=resolver, events=get_booking_events())


def get_booking_use_case() -> BookingUseCase:
    calendar = get_calendar()
    events = get_booking_events()
    return BookingUseCase(
        calendar=calendar,
        events=events,
        email=get_email_service(events),
        catalog=get_service_catalog(),
        resolver=AvailabilityResolver(calendar=calendar, timezone=get_timezone()),
        calendar_id=settings.GOOGLE_CALENDAR_ID,
    )


def get_integration_status() -> dict[str, bool]:
    events = get_booking_events()
    return {
        "googleCalendar": GoogleCalendar(timezone=get_timezone()).is_ready(),
        "mcp": events.is_ready(),
        "email": get_email_service(events).is_ready(),
    }
