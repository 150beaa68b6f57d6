"""Client for a single backend service: health-checked connect plus typed requests."""

import logging
from typing import Any, Optional, Type, TypeVar

from .data_models import HealthResponse
from .data_models.service_payloads import PayloadModel
from .service_client_helpers import (
    HTTPSessionManager,
    ServiceEndpoint,
    ServiceHealthMonitor,
    ServiceRequestOperations,
)
from .service_errors import ServiceConnectionFailed
from .service_types import Service

M = TypeVar("M", bound=PayloadModel)


class ServiceClient:
    """Talks HTTP/JSON to ``<host_url>:<service.port>``."""

    def __init__(
        self,
        service: Service,
        host_url: str,
        session_manager: HTTPSessionManager,
        health_check_endpoint: str = "/health",
    ):
        self.service = service
        self.base_url = service.base_url(host_url)
        self.session_manager = session_manager
        self.health_monitor = ServiceHealthMonitor(
            service.slug,
            self.base_url,
            health_check_endpoint,
            session_manager,
        )
        self.request_ops = ServiceRequestOperations(
            service,
            self.base_url,
            session_manager,
            self.health_monitor,
        )
        self.logger = logging.getLogger(f"{__name__}.{service.slug}")

    @property
    def consecutive_failures(self) -> int:
        return self.health_monitor.consecutive_failures

    async def connect(self) -> None:
        """
        Verify the service answers its health endpoint.

        Raises:
            ServiceConnectionFailed: The health check failed for any reason
        """
        result = await self.health_monitor.check_health()
        if not result.healthy:
            raise ServiceConnectionFailed(self.service, result.error or "health check failed")
        self.logger.info("Connected to %s at %s", self.service.display_name, self.base_url)

    async def request(self, endpoint: ServiceEndpoint, response_type: Optional[Type[M]] = None) -> Any:
        return await self.request_ops.request(endpoint, response_type)

    async def fetch_health(self) -> HealthResponse:
        return await self.request_ops.request(ServiceEndpoint.health(), HealthResponse)
