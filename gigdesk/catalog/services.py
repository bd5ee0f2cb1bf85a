"""Service catalog: what freelancers sell, at what price and duration."""

import logging
from typing import Optional

from gigdesk.errors import ServiceNotFoundError
from gigdesk.schemas.booking_schema import Service

logger = logging.getLogger(__name__)


class ServiceCatalog:
    """In-memory registry of services keyed by id."""

    def __init__(self) -> None:
        self._services: dict[str, Service] = {}

    def add(self, service: Service) -> Service:
        service = service.model_copy()
        self._services[service.id] = service
        logger.debug("Service registered: %s (%s)", service.id, service.title)
        return service.model_copy()

    def get(self, service_id: str) -> Optional[Service]:
        service = self._services.get(service_id)
        return service.model_copy() if service else None

    def get_active(self, service_id: str) -> Service:
        """Return a bookable service.

        Raises:
            ServiceNotFoundError: If the service is absent or inactive.
        """
        service = self._services.get(service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        if not service.is_active:
            raise ServiceNotFoundError(service_id, reason="is not active")
        return service.model_copy()

    def list_for_freelancer(self, freelancer_id: str, active_only: bool = False) -> list[Service]:
        return [
            service.model_copy()
            for service in self._services.values()
            if service.freelancer_id == freelancer_id and (service.is_active or not active_only)
        ]

    def set_active(self, service_id: str, is_active: bool) -> Service:
        """Activate or deactivate a service. Deactivated services cannot be booked."""
        service = self._services.get(service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        service.is_active = is_active
        logger.info("Service %s %s", service_id, "activated" if is_active else "deactivated")
        return service.model_copy()
