from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    name: str
    duration_minutes: int
    price: float

    def describe(self) -> str:
        return f"{self.name} ({self.duration_minutes} min, {self.price:g} €)"
