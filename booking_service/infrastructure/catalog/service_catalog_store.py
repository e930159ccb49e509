from __future__ import annotations

import json
import logging
from typing import Any

from booking_service.application.ports.service_catalog import ServiceCatalogPort
from booking_service.domain.entities.service_catalog import Service

DEFAULT_SERVICES: tuple[Service, ...] = (
    Service(name="Massage", duration_minutes=60, price=80),
    Service(name="Gesichtsbehandlung", duration_minutes=45, price=65),
    Service(name="Maniküre", duration_minutes=30, price=40),
)

logger = logging.getLogger(__name__)


def parse_services(raw: str | None) -> list[Service]:
    """Parse a DEFAULT_SERVICES JSON array. Invalid entries are skipped."""
    if not raw or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.error("Error parsing DEFAULT_SERVICES", extra={"error": str(e)})
        return []
    if not isinstance(data, list):
        logger.error("DEFAULT_SERVICES must be a JSON array", extra={"reason": type(data).__name__})
        return []

    services: list[Service] = []
    for item in data:
        service = _to_service(item)
        if service is None:
            logger.warning("Skipping invalid service entry", extra={"reason": str(item)})
            continue
        services.append(service)
    return services


def _to_service(item: Any) -> Service | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    try:
        duration = int(item.get("duration"))
        price = float(item.get("price", 0))
    except (TypeError, ValueError):
        return None
    if not name or duration <= 0 or price < 0:
        return None
    return Service(name=str(name), duration_minutes=duration, price=price)


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, services: list[Service] | None = None) -> None:
        entries = services or list(DEFAULT_SERVICES)
        self._catalog = {s.name: s for s in entries}

    @classmethod
    def from_json(cls, raw: str | None) -> ServiceCatalogStore:
        return cls(parse_services(raw))

    def get_service(self, name: str) -> Service | None:
        return self._catalog.get(name)

    def list_services(self) -> list[Service]:
        return list(self._catalog.values())
