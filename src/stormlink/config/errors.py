"""Error raised for missing or malformed configuration."""

from __future__ import annotations

from typing import Any


class ConfigurationError(RuntimeError):
    """A configuration value is missing, malformed or out of range."""

    @classmethod
    def invalid_format(cls, setting: str, received: str, expected: str = "") -> "ConfigurationError":
        return cls(_with_detail(f"{setting} has invalid format (received {received!r})", expected, "Expected "))

    @classmethod
    def missing_value(cls, setting: str, context: str = "") -> "ConfigurationError":
        return cls(_with_detail(f"{setting} is not configured", context))

    @classmethod
    def invalid_value(cls, setting: str, value: Any, reason: str = "") -> "ConfigurationError":
        return cls(_with_detail(f"Invalid value for {setting}: {value!r}", reason))


def _with_detail(message: str, detail: str, prefix: str = "") -> str:
    if not detail:
        return message
    return f"{message}. {prefix}{detail}"


__all__ = ["ConfigurationError"]
