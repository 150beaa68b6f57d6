"""Helper modules for the session manager."""

from .login_state import LoginPhase, LoginState, map_protocol_status
from .session import SESSION_INACTIVITY_TIMEOUT, SESSION_MAX_AGE, Session

__all__ = [
    "LoginPhase",
    "LoginState",
    "SESSION_INACTIVITY_TIMEOUT",
    "SESSION_MAX_AGE",
    "Session",
    "map_protocol_status",
]
