"""Result type and failure bookkeeping shared by service health checks."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import NamedTuple


class HealthCheckResult(NamedTuple):
    """Outcome of one health check.

    ``status_code`` is set whenever the service answered at all; ``error`` is
    the short reason reported for an unhealthy result.
    """

    healthy: bool
    status_code: int | None = None
    error: str | None = None


class BaseHealthMonitor(ABC):
    """Tracks consecutive check failures and the last success for one service."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.last_success_time = 0.0
        self.last_error: str | None = None
        self.consecutive_failures = 0
        self.logger = logging.getLogger(f"{__name__}.{service_name}")

    @abstractmethod
    async def check_health(self) -> HealthCheckResult:
        """Check the service once."""

    def record_success(self, *, timestamp: float | None = None) -> None:
        if timestamp is None:
            timestamp = asyncio.get_running_loop().time()
        self.last_success_time = timestamp
        self.last_error = None
        self.consecutive_failures = 0

    def record_failure(self, error: str | None = None) -> None:
        self.consecutive_failures += 1
        if error is not None:
            self.last_error = error

    def failure_result(self, error: str, status_code: int | None = None) -> HealthCheckResult:
        """Record a failed check and build its result."""
        self.record_failure(error)
        return HealthCheckResult(False, status_code=status_code, error=error)
