"""Registry-owned binding between a Service and its live client."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..service_client import ServiceClient
from ..service_types import Service


@dataclass
class ServiceConnection:
    service: Service
    client: ServiceClient
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
