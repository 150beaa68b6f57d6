"""
Network error detection and classification.

Separates network-level failures from application-level errors so the
service client can map them onto the typed service failures.
"""

import asyncio

import aiohttp

TIMEOUT_ERROR_TYPES = (
    asyncio.TimeoutError,
    aiohttp.ServerTimeoutError,
)


def is_timeout_error(exception: BaseException) -> bool:
    """Return True when ``exception`` is a request deadline expiry."""
    return isinstance(exception, TIMEOUT_ERROR_TYPES)


def describe_network_error(exception: BaseException) -> str:
    """Return a short human-readable reason for a transport failure."""
    if is_timeout_error(exception):
        return "timed out"
    text = str(exception).strip()
    if text:
        return text
    return exception.__class__.__name__


__all__ = [
    "TIMEOUT_ERROR_TYPES",
    "describe_network_error",
    "is_timeout_error",
]
