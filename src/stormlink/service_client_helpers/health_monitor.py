"""Service health monitoring over ``GET /health``."""

from __future__ import annotations

import asyncio

import aiohttp

from ..health.types import BaseHealthMonitor, HealthCheckResult
from ..network_errors import describe_network_error, is_timeout_error

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 300


class ServiceHealthMonitor(BaseHealthMonitor):
    """Checks a service's health endpoint and tracks consecutive failures."""

    def __init__(
        self,
        service_name: str,
        base_url: str,
        health_check_endpoint: str,
        session_manager,
    ):
        super().__init__(service_name)
        self.base_url = base_url
        self.health_check_endpoint = health_check_endpoint
        self.session_manager = session_manager

    async def check_health(self) -> HealthCheckResult:
        """Check service health; transport failures become unhealthy results."""
        session = self.session_manager.get_or_create_session()
        health_url = f"{self.base_url}{self.health_check_endpoint}"
        self.logger.debug("Performing health check: %s", health_url)

        try:
            async with session.get(health_url) as response:
                if HTTP_SUCCESS_MIN <= response.status < HTTP_SUCCESS_MAX:
                    self.logger.debug("Health check passed: %s", response.status)
                    self.record_success()
                    return HealthCheckResult(True, status_code=response.status)

                self.logger.warning("Health check failed: HTTP %s", response.status)
                return self.failure_result(f"HTTP {response.status}", response.status)

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            if is_timeout_error(exc):
                self.logger.warning("Health check timeout")
                return self.failure_result("timeout")
            self.logger.warning("Health check client error: %s", exc)
            return self.failure_result(describe_network_error(exc))
