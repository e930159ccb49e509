from __future__ import annotations

from abc import ABC, abstractmethod

from booking_service.domain.entities.service_catalog import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, name: str) -> Service | None:
        """Get catalog entry by exact service name."""
        raise NotImplementedError

    @abstractmethod
    def list_services(self) -> list[Service]:
        raise NotImplementedError
