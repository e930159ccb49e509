from __future__ import annotations

from dataclasses import dataclass

from booking_service.domain.entities.interval import TimeInterval


@dataclass(frozen=True)
class Slot:
    interval: TimeInterval
    start_time: str  # HH:MM
    end_time: str  # HH:MM

    def to_dict(self) -> dict[str, str]:
        return {"startTime": self.start_time, "endTime": self.end_time}
