"""Helper modules for the service registry."""

from .connection import ServiceConnection
from .fan_out import gather_per_service

__all__ = ["ServiceConnection", "gather_per_service"]
