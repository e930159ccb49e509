from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeInterval:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Interval start must be before end: {self.start} >= {self.end}")

    def overlaps(self, other: TimeInterval) -> bool:
        return overlaps(self, other)

    def contains(self, point: datetime) -> bool:
        return contains(self, point)

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    return a.start < b.end and b.start < a.end


def contains(outer: TimeInterval, point: datetime) -> bool:
    return outer.start <= point < outer.end
