from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NotificationEvent(str, Enum):
    slot_conflict = "slot_conflict"
    booking_created = "booking_created"
    booking_error = "booking_error"
    availability_check = "availability_check"
    calendar_event_created = "calendar_event_created"
    email_sent = "email_sent"


@dataclass(frozen=True)
class CalendarEvent:
    event_id: str
    event_link: str | None = None


@dataclass(frozen=True)
class SubmissionResult:
    accepted: bool
    event_id: str | None = None
    message: str | None = None
    email_sent: bool = False


@dataclass(frozen=True)
class NotificationResult:
    accepted: bool
    message: str | None = None


@dataclass(frozen=True)
class EmailReceipt:
    message_id: str
    recipient: str | None = None
