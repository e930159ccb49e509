from __future__ import annotations

from fastapi.testclient import TestClient

from booking_service.core.config import settings
from booking_service.infrastructure.calendar.google_calendar import GoogleCalendar
from booking_service.infrastructure.calendar.mock_calendar import MockCalendar
from booking_service.main import app
from booking_service.wiring import dependencies


def unconfigure_google(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_EMAIL", None)
    monkeypatch.setattr(settings, "GOOGLE_PRIVATE_KEY", None)
    monkeypatch.setattr(settings, "GOOGLE_CALENDAR_ID", None)


def test_dev_falls_back_to_mock_calendar(monkeypatch):
    unconfigure_google(monkeypatch)
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(dependencies, "_mock_calendar", None)

    assert isinstance(dependencies.get_calendar(), MockCalendar)


def test_production_keeps_unready_google_calendar(monkeypatch):
    unconfigure_google(monkeypatch)
    monkeypatch.setattr(settings, "ENV", "production")

    calendar = dependencies.get_calendar()

    assert isinstance(calendar, GoogleCalendar)
    assert calendar.is_ready() is False


def test_integration_status_without_configuration(monkeypatch):
    unconfigure_google(monkeypatch)
    monkeypatch.setattr(settings, "MCP_ENABLED", False)

    assert dependencies.get_integration_status() == {"googleCalendar": False, "mcp": False, "email": False}


def test_dev_mock_calendar_is_shared_between_requests(monkeypatch):
    unconfigure_google(monkeypatch)
    monkeypatch.setattr(settings, "ENV", "local")
    monkeypatch.setattr(dependencies, "_mock_calendar", None)

    assert dependencies.get_calendar() is dependencies.get_calendar()


def test_dev_booking_blocks_the_next_request(monkeypatch):
    unconfigure_google(monkeypatch)
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(settings, "MCP_ENABLED", False)
    monkeypatch.setattr(dependencies, "_mock_calendar", None)
    body = {
        "name": "Maria Schmidt",
        "email": "maria@example.com",
        "phone": "+49 170 1234567",
        "date": "2099-03-10",
        "time": "10:00",
        "services": ["Massage"],
        "agreedToTerms": True,
    }

    with TestClient(app) as client:
        first = client.post("/api/book", json=body)
        second = client.post("/api/book", json={**body, "time": "10:30"})

    assert first.status_code == 200
    assert first.json()["eventId"] == "mock_event_1"
    assert second.status_code == 409
