"""
Abstract grid login protocol handler.

The wire protocol spoken to a grid (XML-RPC login followed by the simulator
circuit) lives in subclasses. This base class owns the observable connection
state and the contract the session manager relies on: ``connect`` either
returns with the state ``CONNECTED`` or raises a ``LoginError`` with the
state ``ERROR``; ``disconnect`` always ends in ``DISCONNECTED``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from .grid_types import GridInfo, LoginCredentials, RegionInfo
from .listeners import ListenerSet
from .login_errors import LoginError, ProtocolError


class ProtocolState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ProtocolStatus:
    state: ProtocolState
    message: Optional[str] = None


@dataclass
class LoginResult:
    """What a successful grid login hands back to the session layer."""

    capabilities: Dict[str, str] = field(default_factory=dict)
    region: Optional[RegionInfo] = None


class GridProtocolHandler(ABC):
    """Base class for grid protocol implementations."""

    def __init__(self, name: str = "grid-protocol"):
        self._status = ProtocolStatus(ProtocolState.DISCONNECTED)
        self._listeners: ListenerSet[ProtocolStatus] = ListenerSet(name)
        self.current_grid: Optional[GridInfo] = None
        self.last_login: Optional[LoginResult] = None
        self.logger = logging.getLogger(f"{__name__}.{name}")

    @property
    def status(self) -> ProtocolStatus:
        return self._status

    @property
    def state(self) -> ProtocolState:
        return self._status.state

    def add_state_listener(self, listener: Callable[[ProtocolStatus], None]) -> Callable[[], None]:
        return self._listeners.add(listener)

    def _transition(self, state: ProtocolState, message: Optional[str] = None) -> None:
        self._status = ProtocolStatus(state, message)
        self.logger.debug("Protocol state -> %s", state.value)
        self._listeners.notify(self._status)

    def set_authenticating(self) -> None:
        """Called by subclasses once the login request has been sent."""
        self._transition(ProtocolState.AUTHENTICATING)

    async def connect(self, grid: GridInfo, credentials: LoginCredentials) -> LoginResult:
        """
        Log in to ``grid`` and open the simulator connection.

        Raises:
            LoginError: The grid refused the login
            ProtocolError: The login or the connection failed for any other reason
        """
        self._transition(ProtocolState.CONNECTING)
        self.current_grid = grid
        try:
            result = await self._perform_login(grid, credentials)
        except LoginError as exc:
            self._transition(ProtocolState.ERROR, str(exc))
            raise
        except Exception as exc:
            self._transition(ProtocolState.ERROR, str(exc))
            raise ProtocolError(f"Login to {grid.name} failed: {exc}", grid=grid) from exc

        self.last_login = result
        self._transition(ProtocolState.CONNECTED)
        return result

    def disconnect(self) -> None:
        """Tear down the connection. Always ends in ``DISCONNECTED``."""
        try:
            self._teardown()
        finally:
            self.current_grid = None
            self.last_login = None
            self._transition(ProtocolState.DISCONNECTED)

    async def send_logout(self) -> None:
        """Tell the grid the avatar is leaving. Implementations may override."""
        self.logger.info("Sending logout message to grid")

    @abstractmethod
    async def _perform_login(self, grid: GridInfo, credentials: LoginCredentials) -> LoginResult:
        """Authenticate and establish the simulator connection."""

    def _teardown(self) -> None:
        """Release transport resources. Default: nothing to release."""


__all__ = [
    "GridProtocolHandler",
    "LoginResult",
    "ProtocolState",
    "ProtocolStatus",
]
