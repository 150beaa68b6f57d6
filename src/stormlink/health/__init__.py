"""Health check types shared by the service clients and the registry."""

from .types import BaseHealthMonitor, HealthCheckResult
from .system_health import SystemHealth, summarize_health

__all__ = ["BaseHealthMonitor", "HealthCheckResult", "SystemHealth", "summarize_health"]
