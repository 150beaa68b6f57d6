"""
Centralized logging configuration.

Provides a single ``setup_logging`` function that configures the root logger
with:
- Console output to stdout
- File output to ``<log dir>/<service_name>.log`` (fresh file on each start
  unless ``LOG_APPEND`` is true)
- Quieter levels for chatty third-party libraries
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from .config import env_bool, env_path, env_str

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _close_handlers(logger: logging.Logger) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:  # Best-effort cleanup operation
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", logger.name, exc)
    logger.handlers = []


def _resolve_level(level: Optional[str]) -> int:
    name = (level or env_str("STORMLINK_LOG_LEVEL", or_value="INFO") or "INFO").upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        _MODULE_LOGGER.warning("Unknown log level %r, using INFO", name)
        return logging.INFO
    return resolved


def _build_console_handler(level: int) -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    console_handler.setLevel(level)
    return console_handler


def _configure_file_handler(service_name: Optional[str]) -> Optional[logging.Handler]:
    if not service_name:
        return None

    logs_dir = env_path("STORMLINK_LOG_DIR", or_value=Path("logs")) or Path("logs")
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"{service_name}.log"
    file_mode = "a" if env_bool("LOG_APPEND", or_value=False) else "w"

    file_handler = logging.handlers.WatchedFileHandler(log_path, mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def setup_logging(service_name: Optional[str] = None, level: Optional[str] = None) -> None:
    """Configure logging for the application.

    Args:
        service_name: When given, also log to ``<service_name>.log``
        level: Console level name; defaults to ``STORMLINK_LOG_LEVEL`` or INFO
    """
    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        console_level = _resolve_level(level)
        root_logger.addHandler(_build_console_handler(console_level))

        file_handler = _configure_file_handler(service_name)
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(min(console_level, logging.INFO))
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
