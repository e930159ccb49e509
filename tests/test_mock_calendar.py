from __future__ import annotations

from datetime import date

import pytest

from booking_service.application.exceptions import SlotConflict
from booking_service.application.use_cases.availability import AvailabilityResolver
from booking_service.application.use_cases.booking import BookingUseCase
from booking_service.infrastructure.calendar.mock_calendar import MockCalendar
from booking_service.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from tests.helpers import FUTURE_DAY, TODAY, TZ, FakeEmail, FakeEvents, busy, make_request


def mock_use_case(calendar: MockCalendar) -> BookingUseCase:
    return BookingUseCase(
        calendar=calendar,
        events=FakeEvents(ready=False),
        email=FakeEmail(),
        catalog=ServiceCatalogStore(),
        resolver=AvailabilityResolver(calendar=calendar, timezone=TZ, today=lambda: TODAY),
    )


@pytest.mark.asyncio
async def test_busy_intervals_filtered_by_day():
    calendar = MockCalendar(
        busy=[busy(FUTURE_DAY, "10:00", "11:00"), busy(TODAY, "10:00", "11:00")],
        timezone=TZ,
    )

    result = await calendar.list_busy_intervals(FUTURE_DAY)

    assert result == [busy(FUTURE_DAY, "10:00", "11:00")]


@pytest.mark.asyncio
async def test_created_event_blocks_second_booking():
    calendar = MockCalendar(timezone=TZ)
    uc = mock_use_case(calendar)

    first = await uc.execute(make_request())
    assert first.event_id == "mock_event_1"

    with pytest.raises(SlotConflict):
        await uc.execute(make_request(time="10:30"))

    second = await uc.execute(make_request(time="11:00"))
    assert second.event_id == "mock_event_2"


@pytest.mark.asyncio
async def test_late_booking_conflicts_with_next_day_event():
    next_day = date(2030, 1, 17)
    calendar = MockCalendar(busy=[busy(next_day, "00:00", "01:00")], timezone=TZ)
    uc = mock_use_case(calendar)

    with pytest.raises(SlotConflict):
        await uc.execute(make_request(time="23:30"))
    assert await calendar.list_busy_intervals(FUTURE_DAY) == []
