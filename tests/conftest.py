from __future__ import annotations

import pytest

from tests.helpers import FakeCalendar, FakeEmail, FakeEvents


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def events() -> FakeEvents:
    return FakeEvents()


@pytest.fixture
def email() -> FakeEmail:
    return FakeEmail()
