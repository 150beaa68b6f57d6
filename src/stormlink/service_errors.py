"""
Typed failures raised by the service registry and service clients.

Every error carries the offending ``Service`` so that callers can render a
user-facing message without inspecting transport details.
"""

from typing import Any

from .exceptions import ApplicationError
from .service_types import Service


class ServiceError(ApplicationError):
    """Base class for failures talking to a backend service."""

    def __init__(self, service: Service, message: str = "", **kwargs: Any) -> None:
        super().__init__(message, service=service, **kwargs)
        self.service = service


class ServiceUnavailable(ServiceError):
    """No live connection exists for the service."""

    def __init__(self, service: Service) -> None:
        super().__init__(service, f"{service.display_name} is unavailable")


class ServiceConnectionFailed(ServiceError):
    """Connecting to the service failed."""

    def __init__(self, service: Service, reason: str = "") -> None:
        message = f"Failed to connect to {service.display_name}"
        if reason:
            message += f": {reason}"
        super().__init__(service, message, reason=reason)


class RequestFailed(ServiceError):
    """The service answered with an error or the transport failed."""

    def __init__(self, service: Service, reason: str) -> None:
        super().__init__(service, f"{service.display_name} request failed: {reason}", reason=reason)


class DecodingFailed(ServiceError):
    """The response body could not be decoded into the expected payload."""

    def __init__(self, service: Service, detail: str = "") -> None:
        super().__init__(
            service, f"Failed to decode response from {service.display_name}", detail=detail
        )


class ServiceTimeout(ServiceError):
    """The request exceeded its deadline."""

    def __init__(self, service: Service) -> None:
        super().__init__(service, f"{service.display_name} request timed out")


__all__ = [
    "DecodingFailed",
    "RequestFailed",
    "ServiceConnectionFailed",
    "ServiceError",
    "ServiceTimeout",
    "ServiceUnavailable",
]
