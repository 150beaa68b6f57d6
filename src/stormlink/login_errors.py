"""Typed failures raised by the login and session layer."""

from typing import Any

from .exceptions import ApplicationError


class LoginError(ApplicationError):
    """Base class for login and session failures."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Login failed"
        super().__init__(message, **kwargs)


class NoActiveSessionError(LoginError):
    """No active session"""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "No active session", **kwargs)


class SessionExpiredError(LoginError):
    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "Session has expired", **kwargs)


class LoginInProgressError(LoginError):
    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "A login attempt is already in progress", **kwargs)


class InvalidCredentialsError(LoginError):
    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "Invalid username or password", **kwargs)


class GridUnavailableError(LoginError):
    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "Grid is currently unavailable", **kwargs)


class ProtocolError(LoginError):
    """The grid protocol handler failed to log in or connect."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "Grid protocol error", **kwargs)


__all__ = [
    "GridUnavailableError",
    "InvalidCredentialsError",
    "LoginError",
    "LoginInProgressError",
    "NoActiveSessionError",
    "ProtocolError",
    "SessionExpiredError",
]
