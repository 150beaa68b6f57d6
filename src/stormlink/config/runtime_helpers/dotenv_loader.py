"""Reader for ``.env``-style configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


class DotenvLoader:
    """Parses ``KEY=value`` files into a mapping."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Load key-value pairs from a .env file.

        Blank lines, ``#`` comments and lines without ``=`` are ignored. A
        missing file yields an empty mapping.

        Raises:
            ConfigurationError: The file exists but cannot be read
        """
        if not path.exists():
            return {}

        try:
            lines = path.read_text().splitlines()
        except OSError as exc:
            raise ConfigurationError(f"Failed to load configuration from {path}") from exc

        values: Dict[str, str] = {}
        for line in lines:
            parsed = DotenvLoader.parse_line(line)
            if parsed is not None:
                key, value = parsed
                values[key] = value
        return values

    @staticmethod
    def parse_line(line: str) -> Optional[Tuple[str, str]]:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            return None

        key, raw_value = stripped.split("=", 1)
        key = key.strip()
        if key.startswith(_EXPORT_PREFIX):
            key = key[len(_EXPORT_PREFIX) :].strip()
        if not key:
            return None
        return key, _unquote(raw_value.strip())


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    # Unquoted values may carry a trailing comment
    return value.split(" #", 1)[0].rstrip()
