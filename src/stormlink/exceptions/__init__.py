"""Common exception classes for the library.

All custom exceptions inherit from ``ApplicationError`` so callers can catch
every failure raised by this package with a single handler.

Exception classes support two patterns:
1. No-argument raise: raise StorageError()
2. Contextual attributes: err = StorageError(key="x"); raise err
"""

from typing import Any

from ..config.errors import ConfigurationError


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class StorageError(ApplicationError):
    """Secure storage rejected or failed an operation."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Secure storage operation failed"
        super().__init__(message, **kwargs)


class GridCatalogError(ApplicationError):
    """Persisted grid catalog could not be read or written."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Grid catalog could not be read or written"
        super().__init__(message, **kwargs)


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "GridCatalogError",
    "StorageError",
]
