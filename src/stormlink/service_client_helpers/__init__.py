"""Helper modules for the per-service client."""

from .endpoints import ServiceEndpoint
from .health_monitor import ServiceHealthMonitor
from .request_operations import ServiceRequestOperations
from .session_manager import HTTPSessionManager

__all__ = [
    "HTTPSessionManager",
    "ServiceEndpoint",
    "ServiceHealthMonitor",
    "ServiceRequestOperations",
]
