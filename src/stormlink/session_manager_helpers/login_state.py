"""Login state machine values and the mapping from grid protocol states."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..grid_protocol import ProtocolState, ProtocolStatus


class LoginPhase(Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    CONNECTING = "connecting"
    ESTABLISHING_SESSION = "establishing_session"
    LOGGED_IN = "logged_in"
    ERROR = "error"


@dataclass(frozen=True)
class LoginState:
    phase: LoginPhase
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "LoginState":
        return cls(LoginPhase.IDLE)

    @classmethod
    def authenticating(cls) -> "LoginState":
        return cls(LoginPhase.AUTHENTICATING)

    @classmethod
    def connecting(cls) -> "LoginState":
        return cls(LoginPhase.CONNECTING)

    @classmethod
    def establishing_session(cls) -> "LoginState":
        return cls(LoginPhase.ESTABLISHING_SESSION)

    @classmethod
    def logged_in(cls) -> "LoginState":
        return cls(LoginPhase.LOGGED_IN)

    @classmethod
    def error(cls, message: str) -> "LoginState":
        return cls(LoginPhase.ERROR, message)

    @property
    def is_busy(self) -> bool:
        """True while a login is somewhere between request and completion."""
        return self.phase in _IN_FLIGHT_PHASES

    def __str__(self) -> str:
        if self.message:
            return f"{self.phase.value}: {self.message}"
        return self.phase.value


_IN_FLIGHT_PHASES = frozenset(
    {LoginPhase.AUTHENTICATING, LoginPhase.CONNECTING, LoginPhase.ESTABLISHING_SESSION}
)


def map_protocol_status(status: ProtocolStatus, current: LoginState) -> Optional[LoginState]:
    """
    Translate a grid protocol state change into a login state.

    Returns:
        The new login state, or None when the change leaves the login state alone
    """
    state = status.state
    if state is ProtocolState.DISCONNECTED:
        if current.phase is LoginPhase.IDLE:
            return None
        return LoginState.idle()
    if state is ProtocolState.CONNECTING:
        return LoginState.connecting()
    if state is ProtocolState.AUTHENTICATING:
        return LoginState.authenticating()
    if state is ProtocolState.CONNECTED:
        return LoginState.establishing_session()
    return LoginState.error(status.message or "Grid protocol error")


__all__ = ["LoginPhase", "LoginState", "map_protocol_status"]
