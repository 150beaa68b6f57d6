"""
Registry of backend service connections.

The registry owns at most one live connection per ``Service``, tracks the
observed ``ConnectionStatus`` of every service and routes typed requests to
the right connection. Per-service work in the fan-out operations runs
concurrently; every mutation of the connection and status maps happens in
the coroutine that awaited the I/O, on the event loop that owns the registry.

The registry never retries. Callers layer retry policy on top of the typed
``ServiceError`` failures.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple, Type, TypeVar, Union

import aiohttp

from .connection_config import ServiceClientConfig, get_service_client_config
from .connection_state import ConnectionStatus
from .data_models import (
    GridCoordinate,
    HarmonyResponse,
    Song,
    SongsResponse,
    SongweavingResponse,
    Vector3,
    WorldDataResponse,
)
from .data_models.service_payloads import PayloadModel
from .health import SystemHealth, summarize_health
from .listeners import ListenerSet
from .network_errors import describe_network_error
from .service_client import ServiceClient
from .service_client_helpers import HTTPSessionManager, ServiceEndpoint
from .service_errors import ServiceConnectionFailed, ServiceError, ServiceUnavailable
from .service_registry_helpers import ServiceConnection, gather_per_service
from .service_types import Service

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PayloadModel)

ClientFactory = Callable[[Service, str, HTTPSessionManager], ServiceClient]
StatusListener = Callable[[Tuple[Service, ConnectionStatus]], None]


class ServiceRegistry:
    """Opens, tracks and multiplexes connections to the backend services."""

    def __init__(
        self,
        config: Optional[ServiceClientConfig] = None,
        *,
        services: Optional[Iterable[Service]] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.config = config or get_service_client_config()
        self.services: Tuple[Service, ...] = tuple(services) if services is not None else tuple(Service)
        self.session_manager = HTTPSessionManager(
            "stormlink-registry",
            self.config.request_timeout_seconds,
            self.config.resource_timeout_seconds,
        )
        self._client_factory: ClientFactory = client_factory or ServiceClient
        self._connections: Dict[Service, ServiceConnection] = {}
        self._status: Dict[Service, ConnectionStatus] = {
            service: ConnectionStatus.disconnected() for service in self.services
        }
        self._status_listeners: ListenerSet[Tuple[Service, ConnectionStatus]] = ListenerSet("service registry")
        self.last_error: Optional[ServiceError] = None

    async def __aenter__(self) -> "ServiceRegistry":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # State queries

    def status(self, service: Service) -> ConnectionStatus:
        return self._status.get(service, ConnectionStatus.disconnected())

    @property
    def connection_status(self) -> Dict[Service, ConnectionStatus]:
        return dict(self._status)

    @property
    def connected_services(self) -> FrozenSet[Service]:
        return frozenset(self._connections)

    def is_connected(self, service: Service) -> bool:
        return service in self._connections

    def add_status_listener(self, listener: StatusListener) -> Callable[[], None]:
        """Subscribe to ``(service, status)`` changes; returns an unsubscribe callable."""
        return self._status_listeners.add(listener)

    def _set_status(self, service: Service, status: ConnectionStatus) -> None:
        self._status[service] = status
        self._status_listeners.notify((service, status))

    # Connection management

    async def connect_to_service(self, service: Service) -> None:
        """
        Health-check ``service`` and register its connection.

        The connection becomes visible only after the health check succeeds;
        a failed attempt also drops any earlier connection for the service.

        Raises:
            ServiceConnectionFailed: The service did not answer its health check
        """
        self._set_status(service, ConnectionStatus.connecting())
        client = self._client_factory(service, self.config.base_url, self.session_manager)

        try:
            await client.connect()
        except ServiceError as exc:
            raise self._connection_failed(service, getattr(exc, "reason", "") or str(exc)) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise self._connection_failed(service, describe_network_error(exc)) from exc

        self._connections[service] = ServiceConnection(service, client)
        self._set_status(service, ConnectionStatus.connected())
        logger.info("Connected to %s", service.display_name)

    def _connection_failed(self, service: Service, reason: str) -> ServiceConnectionFailed:
        self._connections.pop(service, None)
        self._set_status(service, ConnectionStatus.error(reason))
        failure = ServiceConnectionFailed(service, reason)
        self.last_error = failure
        logger.warning("Failed to connect to %s: %s", service.display_name, reason)
        return failure

    def disconnect_from_service(self, service: Service) -> None:
        """Drop the connection for ``service``; safe to call when not connected."""
        self._connections.pop(service, None)
        self._set_status(service, ConnectionStatus.disconnected())
        logger.info("Disconnected from %s", service.display_name)

    async def connect_to_all_services(self) -> Dict[Service, ConnectionStatus]:
        """
        Connect to every known service concurrently.

        A failure on one service is logged and reflected only in that
        service's status.

        Returns:
            Snapshot of the status of every service after all attempts finish
        """
        outcomes = await gather_per_service(self.services, self.connect_to_service)
        for service, outcome in outcomes.items():
            if isinstance(outcome, Exception):
                logger.error("Failed to connect to %s: %s", service.display_name, outcome)
        return {service: self.status(service) for service in self.services}

    def disconnect_from_all_services(self) -> None:
        for service in self.services:
            self.disconnect_from_service(service)

    async def close(self) -> None:
        """Disconnect every service and close the shared HTTP session."""
        self.disconnect_from_all_services()
        await self.session_manager.close_session()

    # Requests

    async def request(
        self,
        endpoint: ServiceEndpoint,
        service: Service,
        response_type: Optional[Type[M]] = None,
    ) -> Union[M, Any]:
        """
        Send ``endpoint`` to ``service`` and decode the reply.

        Raises:
            ServiceUnavailable: No live connection for ``service`` (no I/O is attempted)
            RequestFailed: Transport failure or non-2xx response
            DecodingFailed: Body did not match ``response_type``
            ServiceTimeout: Deadline exceeded
        """
        connection = self._connections.get(service)
        if connection is None:
            error = ServiceUnavailable(service)
            self.last_error = error
            raise error

        try:
            return await connection.client.request(endpoint, response_type)
        except ServiceError as exc:
            self.last_error = exc
            raise

    async def get_songs(self) -> SongsResponse:
        return await self.request(ServiceEndpoint.get_songs(), Service.SONG_ENGINE, SongsResponse)

    async def get_world_data(self, coordinate: GridCoordinate) -> WorldDataResponse:
        return await self.request(
            ServiceEndpoint.get_world_data(coordinate), Service.WORLD_ENGINE, WorldDataResponse
        )

    async def perform_songweaving(self, song: Union[Song, str], position: Vector3) -> SongweavingResponse:
        return await self.request(
            ServiceEndpoint.perform_songweaving(song, position),
            Service.HARMONY_SERVICE,
            SongweavingResponse,
        )

    async def get_harmony_level(self, position: Vector3) -> HarmonyResponse:
        return await self.request(
            ServiceEndpoint.get_harmony(position), Service.HARMONY_SERVICE, HarmonyResponse
        )

    # Health

    async def check_service_health(self, service: Service) -> bool:
        """Check a connected service's health endpoint without changing any state."""
        connection = self._connections.get(service)
        if connection is None:
            return False

        try:
            await asyncio.wait_for(
                connection.client.fetch_health(),
                timeout=self.config.resource_timeout_seconds,
            )
        except (ServiceError, asyncio.TimeoutError) as exc:
            logger.debug("%s health check failed: %s", service.display_name, exc)
            return False
        return True

    async def check_all_services_health(self) -> Dict[Service, bool]:
        """Check every known service concurrently."""
        outcomes = await gather_per_service(self.services, self.check_service_health)
        return {service: outcome is True for service, outcome in outcomes.items()}

    async def overall_health(self) -> SystemHealth:
        return summarize_health(await self.check_all_services_health())


__all__ = ["ServiceRegistry"]
