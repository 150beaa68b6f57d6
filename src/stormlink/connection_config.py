"""
Configuration for service and grid connections.

Timeouts follow the reference client behaviour: every request must see
activity within ``request_timeout_seconds`` and a whole resource fetch must
finish within ``resource_timeout_seconds``. Values come from the environment
(or a ``.env`` file) and fall back to the defaults below.
"""

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from .config import ConfigurationError, env_path, env_seconds, env_str
from .http_utils import ensure_http_url

DEFAULT_BASE_URL = "http://localhost"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15.0
DEFAULT_RESOURCE_TIMEOUT_SECONDS = 30.0
DEFAULT_DATA_DIR = Path("~/.stormlink")

_DEFAULT_FLOAT_VALUES = {
    "REQUEST_TIMEOUT_SECONDS": DEFAULT_REQUEST_TIMEOUT_SECONDS,
    "RESOURCE_TIMEOUT_SECONDS": DEFAULT_RESOURCE_TIMEOUT_SECONDS,
}


def require_env_seconds(name: str) -> float:
    """Get a positive duration from the environment, using the default if available."""
    value = env_seconds(name, or_value=None, required=False)
    if value is not None:
        return value
    if name in _DEFAULT_FLOAT_VALUES:
        return _DEFAULT_FLOAT_VALUES[name]
    raise ConfigurationError.missing_value(name, "no default duration is defined")


def _base_url_from_env() -> str:
    return env_str("STORMLINK_BASE_URL", or_value=DEFAULT_BASE_URL) or DEFAULT_BASE_URL


def _data_dir_from_env() -> Path:
    return env_path("STORMLINK_DATA_DIR", or_value=DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR.expanduser()


@dataclass
class ServiceClientConfig:
    """
    Connection settings shared by the service registry and the session manager.

    Attributes:
        base_url: Scheme and host of the service deployment, without a port
        request_timeout_seconds: Connect and read deadline applied to each request
        resource_timeout_seconds: Total deadline for a single request/response
        data_dir: Directory holding the grid catalog and the credential vault
    """

    base_url: str = field(default_factory=_base_url_from_env)
    request_timeout_seconds: float = field(
        default_factory=partial(require_env_seconds, "REQUEST_TIMEOUT_SECONDS")
    )
    resource_timeout_seconds: float = field(
        default_factory=partial(require_env_seconds, "RESOURCE_TIMEOUT_SECONDS")
    )
    data_dir: Path = field(default_factory=_data_dir_from_env)

    def __post_init__(self) -> None:
        try:
            self.base_url = ensure_http_url(self.base_url.rstrip("/"))
        except ValueError as exc:
            raise ConfigurationError.invalid_format("base_url", self.base_url, "http(s)://host") from exc
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value(
                "request_timeout_seconds", self.request_timeout_seconds, "Must be positive"
            )
        if self.resource_timeout_seconds < self.request_timeout_seconds:
            raise ConfigurationError.invalid_value(
                "resource_timeout_seconds",
                self.resource_timeout_seconds,
                "Must not be shorter than the request timeout",
            )
        self.data_dir = Path(self.data_dir).expanduser()

    @property
    def grid_catalog_path(self) -> Path:
        return self.data_dir / "grids.json"

    @property
    def credentials_dir(self) -> Path:
        return self.data_dir / "credentials"


def get_service_client_config(**overrides) -> ServiceClientConfig:
    """
    Factory returning a configuration with optional explicit overrides.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        ServiceClientConfig instance
    """
    return ServiceClientConfig(**overrides)
