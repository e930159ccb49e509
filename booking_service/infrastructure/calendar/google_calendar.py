from __future__ import annotations

import logging
import time
from datetime import date, datetime, timedelta
from typing import Any
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx
from google.auth import crypt
from google.auth import jwt as google_jwt

from booking_service.application.exceptions import CalendarError
from booking_service.application.ports.calendar import CalendarPort
from booking_service.core.config import settings
from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import CalendarEvent
from booking_service.domain.entities.interval import TimeInterval
from booking_service.infrastructure.calendar.token_cache import AccessTokenCache

CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
JWT_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class GoogleCalendar(CalendarPort):
    def __init__(
        self,
        client_email: str | None = None,
        private_key: str | None = None,
        calendar_id: str | None = None,
        timezone: ZoneInfo | None = None,
        token_url: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        token_cache: AccessTokenCache | None = None,
    ) -> None:
        self._client_email = client_email or settings.GOOGLE_CLIENT_EMAIL or ""
        self._private_key = private_key or settings.google_private_key
        self._calendar_id = calendar_id or settings.GOOGLE_CALENDAR_ID or ""
        self._timezone = timezone or ZoneInfo(settings.BUSINESS_TIMEZONE)
        self._token_url = token_url or settings.GOOGLE_TOKEN_URL
        self._api_url = (api_url or settings.GOOGLE_CALENDAR_API_URL).rstrip("/")
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._token_cache = token_cache or AccessTokenCache()
        self._logger = logging.getLogger(__name__)

    def is_ready(self) -> bool:
        return bool(self._client_email and self._private_key and self._calendar_id)

    @property
    def calendar_id(self) -> str:
        return self._calendar_id

    async def list_busy_intervals(self, day: date) -> list[TimeInterval]:
        self._ensure_ready()
        day_start = datetime.combine(day, datetime.min.time(), tzinfo=self._timezone)
        params: dict[str, Any] = {
            "timeMin": day_start.isoformat(),
            "timeMax": (day_start + timedelta(days=1)).isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }

        intervals: list[TimeInterval] = []
        while True:
            data = await self._request("GET", self._events_url(), params=params)
            for item in data.get("items", []) or []:
                interval = self._to_interval(item)
                if interval is not None:
                    intervals.append(interval)
            page_token = data.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        self._logger.info(
            "Fetched busy intervals",
            extra={"date": day.isoformat(), "status": f"{len(intervals)} busy"},
        )
        return intervals

    async def create_event(self, record: BookingRecord) -> CalendarEvent:
        self._ensure_ready()
        start = datetime.combine(record.day, record.start, tzinfo=self._timezone)
        end = start + timedelta(minutes=record.total_duration_minutes)
        tz_name = str(self._timezone)

        payload = {
            "summary": f"Booking: {record.client_name}",
            "description": (
                f"Services: {record.services_text()}\n\n"
                f"Client: {record.client_name}\n"
                f"Email: {record.email}\n"
                f"Phone: {record.phone}\n\n"
                f"Notes: {record.notes or 'None'}"
            ),
            "start": {"dateTime": start.isoformat(), "timeZone": tz_name},
            "end": {"dateTime": end.isoformat(), "timeZone": tz_name},
            "attendees": [{"email": record.email}],
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 60},
                ],
            },
        }

        data = await self._request("POST", self._events_url(), json=payload)
        event_id = data.get("id")
        if not event_id:
            raise CalendarError("No event ID returned from Google Calendar API")

        self._logger.info("Calendar event created", extra={"event_id": event_id})
        return CalendarEvent(event_id=str(event_id), event_link=data.get("htmlLink"))

    async def get_access_token(self) -> str:
        cached = self._token_cache.get()
        if cached:
            return cached

        self._ensure_ready()
        assertion = self._build_assertion()
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._token_url,
                    data={"grant_type": JWT_GRANT_TYPE, "assertion": assertion},
                )
        except httpx.HTTPError as e:
            raise CalendarError(f"Failed to get access token: {e}") from e

        data = _json_or_empty(resp)
        if resp.status_code >= 400 or "access_token" not in data:
            self._logger.error(
                "Error getting access token",
                extra={"status": resp.status_code, "error": data.get("error")},
            )
            raise CalendarError(f"Failed to get access token: {data.get('error', resp.status_code)}")

        self._token_cache.store(data["access_token"], data.get("expires_in", 3600))
        return data["access_token"]

    def _build_assertion(self) -> str:
        now = int(time.time())
        claims = {
            "iss": self._client_email,
            "scope": CALENDAR_SCOPE,
            "aud": self._token_url,
            "iat": now,
            "exp": now + 3600,
        }
        try:
            signer = crypt.RSASigner.from_string(self._private_key)
            token = google_jwt.encode(signer, claims)
        except (ValueError, TypeError) as e:
            raise CalendarError(f"Invalid service account private key: {e}") from e
        return token.decode("utf-8") if isinstance(token, bytes) else token

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        token = await self.get_access_token()
        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            self._logger.error("Google Calendar request failed", extra={"error": str(e)})
            raise CalendarError(f"Google Calendar request failed: {e}") from e

        data = _json_or_empty(resp)
        if resp.status_code >= 400:
            if resp.status_code == 401:
                self._token_cache.clear()
            error = data.get("error")
            message = error.get("message") if isinstance(error, dict) else error
            self._logger.error(
                "Google Calendar API error",
                extra={"status": resp.status_code, "error": message or resp.text},
            )
            raise CalendarError(f"Google Calendar API error ({resp.status_code}): {message or 'Unknown error'}")
        return data

    def _events_url(self) -> str:
        return f"{self._api_url}/calendars/{quote(self._calendar_id, safe='')}/events"

    def _to_interval(self, item: dict[str, Any]) -> TimeInterval | None:
        if item.get("status") == "cancelled" or item.get("transparency") == "transparent":
            return None
        start = self._parse_boundary(item.get("start") or {})
        end = self._parse_boundary(item.get("end") or {})
        if start is None or end is None or start >= end:
            return None
        return TimeInterval(start, end)

    def _parse_boundary(self, value: dict[str, Any]) -> datetime | None:
        try:
            if value.get("dateTime"):
                parsed = datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
                if parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=self._timezone)
                return parsed
            if value.get("date"):
                # All-day events block the whole local day.
                return datetime.combine(date.fromisoformat(value["date"]), datetime.min.time(), tzinfo=self._timezone)
        except (ValueError, AttributeError):
            self._logger.warning("Skipping event with unparsable time", extra={"reason": str(value)})
        return None

    def _ensure_ready(self) -> None:
        if not self.is_ready():
            raise CalendarError("Google Calendar integration not properly configured")


def _json_or_empty(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
