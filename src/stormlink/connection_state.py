"""
Canonical connection state definitions for backend services.

``ConnectionState`` is the bare state; ``ConnectionStatus`` pairs it with the
failure reason carried by the error state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConnectionState(Enum):
    """Observed state of one backend service connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionStatus:
    """Connection state plus the human-readable reason for ``ERROR``."""

    state: ConnectionState
    reason: Optional[str] = None

    @classmethod
    def disconnected(cls) -> "ConnectionStatus":
        return cls(ConnectionState.DISCONNECTED)

    @classmethod
    def connecting(cls) -> "ConnectionStatus":
        return cls(ConnectionState.CONNECTING)

    @classmethod
    def connected(cls) -> "ConnectionStatus":
        return cls(ConnectionState.CONNECTED)

    @classmethod
    def error(cls, reason: str) -> "ConnectionStatus":
        return cls(ConnectionState.ERROR, reason)

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def is_error(self) -> bool:
        return self.state is ConnectionState.ERROR

    def __str__(self) -> str:
        if self.reason:
            return f"{self.state.value}: {self.reason}"
        return self.state.value


__all__ = ["ConnectionState", "ConnectionStatus"]
