from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone as dt_timezone
from typing import Any

import httpx

from booking_service.application.exceptions import NotificationError
from booking_service.application.ports.booking_events import BookingEventsPort
from booking_service.core.config import settings
from booking_service.domain.entities.booking import BookingRecord
from booking_service.domain.entities.integration import (
    NotificationEvent,
    NotificationResult,
    SubmissionResult,
)

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_request_id() -> str:
    suffix = "".join(secrets.choice(_REQUEST_ID_ALPHABET) for _ in range(8))
    return f"req_{int(time.time() * 1000)}_{suffix}"


class McpBookingEvents(BookingEventsPort):
    """Client for the external booking event processor (MCP server)."""

    def __init__(
        self,
        enabled: bool | None = None,
        server_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._enabled = settings.MCP_ENABLED if enabled is None else enabled
        self._server_url = (server_url or settings.MCP_SERVER_URL or "").rstrip("/")
        self._api_key = api_key or settings.MCP_API_KEY or ""
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._logger = logging.getLogger(__name__)

        if not self.is_ready():
            self._logger.info(
                "MCP integration not initialized. Check MCP_ENABLED, MCP_SERVER_URL, MCP_API_KEY"
            )

    def is_ready(self) -> bool:
        return bool(self._enabled and self._server_url and self._api_key)

    async def notify(self, event_type: NotificationEvent, payload: dict[str, Any]) -> NotificationResult:
        if not self.is_ready():
            self._logger.info(
                "MCP integration disabled, skipping notification",
                extra={"event_type": event_type.value},
            )
            return NotificationResult(accepted=False, message="MCP integration not enabled")

        request_id = new_request_id()
        body = {
            "eventType": event_type.value,
            "timestamp": datetime.now(dt_timezone.utc).isoformat(),
            "requestId": request_id,
            "data": payload,
        }
        resp = await self._post("/api/booking-events", body, extra_headers={"X-Request-ID": request_id})

        if resp.status_code >= 400:
            self._logger.error(
                "MCP server rejected notification",
                extra={"event_type": event_type.value, "status": resp.status_code, "error": resp.text},
            )
            return NotificationResult(
                accepted=False,
                message=f"Server returned {resp.status_code}: {resp.text}",
            )

        self._logger.info("MCP notification sent", extra={"event_type": event_type.value})
        return NotificationResult(accepted=True)

    async def submit_booking(self, record: BookingRecord, calendar_id: str | None = None) -> SubmissionResult:
        if not self.is_ready():
            return SubmissionResult(accepted=False, message="MCP integration not enabled")

        booking_data = record.to_payload()
        booking_data["calendarId"] = calendar_id
        body = {
            "bookingData": booking_data,
            "timestamp": datetime.now(dt_timezone.utc).isoformat(),
            "calendarId": calendar_id,
        }
        resp = await self._post("/api/process-booking", body)

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400:
            self._logger.error(
                "MCP server failed to process booking",
                extra={"status": resp.status_code, "error": data.get("message") or resp.text},
            )
            return SubmissionResult(accepted=False, message=data.get("message") or "Failed to process booking")

        event_id = data.get("eventId")
        self._logger.info("MCP processed booking", extra={"event_id": event_id})
        return SubmissionResult(
            accepted=True,
            event_id=str(event_id) if event_id else None,
            message=data.get("message"),
            email_sent=bool(data.get("emailSent")),
        )

    async def _post(
        self,
        path: str,
        body: dict[str, Any],
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}
        headers.update(extra_headers or {})
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.post(f"{self._server_url}{path}", json=body, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("MCP request failed", extra={"error": str(e)})
            raise NotificationError(f"MCP request to {path} failed: {e}") from e
