"""Aggregate per-service health into one system-wide verdict."""

from enum import Enum
from typing import Mapping

from ..service_types import Service


class SystemHealth(Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


def summarize_health(results: Mapping[Service, bool]) -> SystemHealth:
    """
    Reduce a Service -> healthy mapping to a ``SystemHealth``.

    All healthy is HEALTHY, at least half (rounded down) is DEGRADED, at least one is
    CRITICAL and none is OFFLINE. An empty mapping is UNKNOWN.
    """
    total = len(results)
    if total == 0:
        return SystemHealth.UNKNOWN

    healthy = sum(1 for ok in results.values() if ok)
    if healthy == total:
        return SystemHealth.HEALTHY
    if healthy == 0:
        return SystemHealth.OFFLINE
    if healthy >= total // 2:
        return SystemHealth.DEGRADED
    return SystemHealth.CRITICAL


__all__ = ["SystemHealth", "summarize_health"]
