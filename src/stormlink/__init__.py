"""Connection and session management for the virtual-world client."""

from .connection_config import ServiceClientConfig, get_service_client_config
from .connection_state import ConnectionState, ConnectionStatus
from .credential_store import CredentialStore
from .credential_store_helpers import EncryptedFileVault, InMemoryVault, SecretVault
from .exceptions import ApplicationError, ConfigurationError, GridCatalogError, StorageError
from .grid_directory import DEFAULT_GRIDS, GridDirectory
from .grid_protocol import GridProtocolHandler, LoginResult, ProtocolState, ProtocolStatus
from .grid_types import GridInfo, LoginCredentials, RegionInfo
from .health import SystemHealth
from .login_errors import (
    GridUnavailableError,
    InvalidCredentialsError,
    LoginError,
    LoginInProgressError,
    NoActiveSessionError,
    ProtocolError,
    SessionExpiredError,
)
from .service_errors import (
    DecodingFailed,
    RequestFailed,
    ServiceConnectionFailed,
    ServiceError,
    ServiceTimeout,
    ServiceUnavailable,
)
from .service_registry import ServiceRegistry
from .service_types import Service
from .session_manager import SessionManager
from .session_manager_helpers import LoginPhase, LoginState, Session

__version__ = "0.1.0"

__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "ConnectionState",
    "ConnectionStatus",
    "CredentialStore",
    "DEFAULT_GRIDS",
    "DecodingFailed",
    "EncryptedFileVault",
    "GridCatalogError",
    "GridDirectory",
    "GridInfo",
    "GridProtocolHandler",
    "GridUnavailableError",
    "InMemoryVault",
    "InvalidCredentialsError",
    "LoginCredentials",
    "LoginError",
    "LoginInProgressError",
    "LoginPhase",
    "LoginResult",
    "LoginState",
    "NoActiveSessionError",
    "ProtocolError",
    "ProtocolState",
    "ProtocolStatus",
    "RegionInfo",
    "RequestFailed",
    "SecretVault",
    "Service",
    "ServiceClientConfig",
    "ServiceConnectionFailed",
    "ServiceError",
    "ServiceRegistry",
    "ServiceTimeout",
    "ServiceUnavailable",
    "Session",
    "SessionExpiredError",
    "SessionManager",
    "StorageError",
    "SystemHealth",
    "get_service_client_config",
]
