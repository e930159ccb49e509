from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any

from booking_service.domain.entities.service_catalog import Service


@dataclass(frozen=True)
class BookingRequest:
    client_name: str
    email: str
    phone: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM, business-local
    service_names: list[str] = field(default_factory=list)
    notes: str | None = None
    agreed_to_terms: bool = False


@dataclass
class BookingRecord:
    client_name: str
    email: str
    phone: str
    day: date
    start: time
    services: list[Service]
    notes: str | None = None
    booking_id: str | None = None
    event_id: str | None = None  # set once a calendar event exists

    @property
    def total_duration_minutes(self) -> int:
        return sum(s.duration_minutes for s in self.services)

    @property
    def total_price(self) -> float:
        return sum(s.price for s in self.services)

    @property
    def date_iso(self) -> str:
        return self.day.isoformat()

    @property
    def time_24h(self) -> str:
        return self.start.strftime("%H:%M")

    def services_text(self) -> str:
        return "\n".join(s.describe() for s in self.services)

    def to_payload(self) -> dict[str, Any]:
        """Wire shape shared by the event gateway and the processing service."""
        payload: dict[str, Any] = {
            "name": self.client_name,
            "email": self.email,
            "phone": self.phone,
            "date": self.date_iso,
            "time": self.time_24h,
            "services": [
                {"name": s.name, "duration": s.duration_minutes, "price": s.price}
                for s in self.services
            ],
            "notes": self.notes,
            "totalDuration": self.total_duration_minutes,
            "totalPrice": self.total_price,
        }
        if self.booking_id:
            payload["bookingId"] = self.booking_id
        if self.event_id:
            payload["eventId"] = self.event_id
        return payload


@dataclass(frozen=True)
class BookingOutcome:
    booking_id: str
    event_id: str | None
    message: str = "Booking created successfully"
    delegated: bool = False
