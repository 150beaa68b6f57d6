"""
Login orchestration and session lifecycle.

``SessionManager`` drives the login state machine against a
``GridProtocolHandler``. It mirrors protocol state changes into its own
``LoginState``, keeps the single active ``Session`` and fronts the credential
store and the grid directory for UI code.

Login state flow::

    idle -> authenticating -> connecting -> establishing_session -> logged_in

Any step before ``logged_in`` may end in ``error``. Logging out, or the
protocol dropping the connection, returns to ``idle``.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import aiohttp

from .connection_config import ServiceClientConfig, get_service_client_config
from .credential_store import CredentialStore
from .exceptions import ApplicationError
from .grid_directory import GridDirectory
from .grid_protocol import GridProtocolHandler, LoginResult, ProtocolStatus
from .grid_types import GridInfo, LoginCredentials
from .listeners import ListenerSet
from .login_errors import (
    InvalidCredentialsError,
    LoginInProgressError,
    NoActiveSessionError,
    SessionExpiredError,
)
from .service_client_helpers import HTTPSessionManager
from .session_manager_helpers import LoginState, Session, map_protocol_status

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Owns the login state machine and the active session for one client."""

    def __init__(
        self,
        protocol: GridProtocolHandler,
        credential_store: CredentialStore,
        grid_directory: GridDirectory,
        *,
        config: Optional[ServiceClientConfig] = None,
        clock: Clock = utc_now,
    ):
        self.config = config or get_service_client_config()
        self.protocol = protocol
        self.credential_store = credential_store
        self.grid_directory = grid_directory
        self._clock = clock
        self._state = LoginState.idle()
        self._session: Optional[Session] = None
        self._login_in_flight = False
        self._state_listeners: ListenerSet[LoginState] = ListenerSet("session manager")
        self._http = HTTPSessionManager(
            "stormlink-login",
            self.config.request_timeout_seconds,
            self.config.resource_timeout_seconds,
        )
        self._unsubscribe_protocol = protocol.add_state_listener(self._on_protocol_status)

    @classmethod
    def from_config(
        cls,
        protocol: GridProtocolHandler,
        config: Optional[ServiceClientConfig] = None,
    ) -> "SessionManager":
        """Build a manager with the encrypted credential store and the on-disk grid catalog."""
        config = config or get_service_client_config()
        return cls(
            protocol,
            CredentialStore.from_config(config),
            GridDirectory(config.grid_catalog_path),
            config=config,
        )

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # State

    @property
    def login_state(self) -> LoginState:
        return self._state

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session is not None

    def add_state_listener(self, listener: Callable[[LoginState], None]) -> Callable[[], None]:
        """Subscribe to login state changes; returns an unsubscribe callable."""
        return self._state_listeners.add(listener)

    def _set_state(self, state: LoginState) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug("Login state -> %s", state)
        self._state_listeners.notify(state)

    def _on_protocol_status(self, status: ProtocolStatus) -> None:
        mapped = map_protocol_status(status, self._state)
        if mapped is not None:
            self._set_state(mapped)

    def require_session(self) -> Session:
        """
        Return the active session.

        Raises:
            NoActiveSessionError: Nobody is logged in
            SessionExpiredError: The session saw no activity for too long
        """
        session = self._session
        if session is None:
            raise NoActiveSessionError()
        if session.is_expired(self._clock()):
            raise SessionExpiredError(grid=session.grid)
        return session

    # Login lifecycle

    async def login(
        self,
        grid: GridInfo,
        credentials: LoginCredentials,
        remember: bool = False,
    ) -> Session:
        """
        Log in to ``grid`` and open a new session.

        Args:
            grid: Grid to log in to
            credentials: Avatar name and password
            remember: Store the credentials before contacting the grid

        Returns:
            The new active session

        Raises:
            LoginInProgressError: Another login has not finished yet
            InvalidCredentialsError: Name or password is blank
            StorageError: ``remember`` was set and the credentials could not be stored
            LoginError: The grid protocol failed
        """
        if self._login_in_flight:
            raise LoginInProgressError(grid=grid)

        self._login_in_flight = True
        try:
            return await self._run_login(grid, credentials, remember)
        finally:
            self._login_in_flight = False

    async def _run_login(self, grid: GridInfo, credentials: LoginCredentials, remember: bool) -> Session:
        self._set_state(LoginState.authenticating())
        logger.info("Logging in %s to %s", credentials.identifier, grid.name)

        try:
            _check_credentials(credentials, grid)
            if remember:
                self.credential_store.store(credentials, grid)
            result = await self.protocol.connect(grid, credentials)
        except ApplicationError as exc:
            self._set_state(LoginState.error(str(exc)))
            logger.warning("Login to %s failed: %s", grid.name, exc)
            raise

        session = self._open_session(grid, credentials, result)
        self._set_state(LoginState.logged_in())
        logger.info("Logged in %s to %s", credentials.identifier, grid.name)
        return session

    def _open_session(self, grid: GridInfo, credentials: LoginCredentials, result: LoginResult) -> Session:
        now = self._clock()
        self._session = Session(
            grid=grid,
            credentials=credentials,
            login_time=now,
            last_activity=now,
            capabilities=dict(result.capabilities),
            region=result.region,
        )
        return self._session

    async def logout(self) -> None:
        """
        End the session.

        The farewell message is best effort; the protocol is disconnected and
        the session cleared whatever happens to it.
        """
        try:
            if self._session is not None:
                await self._send_farewell()
        finally:
            self._session = None
            self.protocol.disconnect()
            self._set_state(LoginState.idle())
            logger.info("Logged out")

    async def _send_farewell(self) -> None:
        try:
            await self.protocol.send_logout()
        except Exception as exc:  # policy_guard: allow-silent-handler
            logger.warning("Error during logout: %s", exc)

    def touch(self) -> None:
        """Record activity on the active session."""
        if self._session is not None:
            self._session.last_activity = self._clock()

    async def refresh_session(self) -> Session:
        """
        Record activity and re-authenticate once the session has outlived its maximum age.

        Raises:
            NoActiveSessionError: Nobody is logged in
            LoginError: Re-authentication failed; the stale session is already cleared
        """
        session = self._session
        if session is None:
            raise NoActiveSessionError()

        now = self._clock()
        session.last_activity = now
        if session.needs_reauthentication(now):
            logger.info("Session on %s is older than 24h, logging in again", session.grid.name)
            # The stale session and its connection go away whether or not the new login succeeds
            self._session = None
            self.protocol.disconnect()
            return await self.login(session.grid, session.credentials)
        return session

    async def close(self) -> None:
        """Release the reachability HTTP session and stop following the protocol."""
        self._unsubscribe_protocol()
        await self._http.close_session()

    # Grid probing

    async def test_grid_connection(self, grid: GridInfo) -> bool:
        """Return True when the grid's login endpoint answers ``200``. Never raises."""
        url = f"{grid.login_uri}/"
        try:
            session = self._http.get_or_create_session()
            async with session.get(url) as response:
                reachable = response.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as exc:
            logger.info("Grid %s unreachable: %s", grid.name, exc)
            return False

        logger.debug("Grid %s check returned %s", grid.name, reachable)
        return reachable

    # Stored credentials and grid catalog

    def get_stored_credentials(self, grid: GridInfo) -> Optional[LoginCredentials]:
        return self.credential_store.retrieve(grid)

    def remove_stored_credentials(self, grid: GridInfo) -> None:
        self.credential_store.remove(grid)

    @property
    def available_grids(self) -> List[GridInfo]:
        return self.grid_directory.list_grids()

    def add_custom_grid(self, grid: GridInfo) -> bool:
        return self.grid_directory.add_grid(grid)

    def remove_grid(self, grid: GridInfo) -> bool:
        return self.grid_directory.remove_grid(grid)


def _check_credentials(credentials: LoginCredentials, grid: GridInfo) -> None:
    if not credentials.first_name.strip() or not credentials.last_name.strip():
        raise InvalidCredentialsError("Avatar first and last name are required", grid=grid)
    if not credentials.password:
        raise InvalidCredentialsError("Password is required", grid=grid)


__all__ = ["SessionManager", "utc_now"]
