"""Tests for the service registry connection lifecycle and request routing."""

import asyncio
from unittest.mock import MagicMock

import pytest

from stormlink.connection_state import ConnectionState, ConnectionStatus
from stormlink.data_models import GridCoordinate, HealthResponse, SongsResponse
from stormlink.health import SystemHealth
from stormlink.service_client_helpers import ServiceEndpoint
from stormlink.service_errors import (
    RequestFailed,
    ServiceConnectionFailed,
    ServiceUnavailable,
)
from stormlink.service_registry import ServiceRegistry
from stormlink.service_types import Service


class FakeClient:
    """Stands in for ``ServiceClient``; behaviour is set per service."""

    def __init__(self, service, base_url, *, delay=0.0, fail=None, responses=None):
        self.service = service
        self.base_url = base_url
        self.delay = delay
        self.fail = fail
        self.responses = responses or {}
        self.requests = []

    async def connect(self):
        await asyncio.sleep(self.delay)
        if self.fail is not None:
            raise self.fail

    async def request(self, endpoint, response_type=None):
        self.requests.append(endpoint)
        outcome = self.responses[endpoint.path]
        if isinstance(outcome, Exception):
            raise outcome
        return response_type.from_payload(outcome) if response_type else outcome

    async def fetch_health(self):
        return await self.request(ServiceEndpoint.health(), HealthResponse)


class FakeClientFactory:
    def __init__(self, **per_service):
        self.per_service = per_service
        self.created = []

    def __call__(self, service, base_url, session_manager):
        client = FakeClient(service, service.base_url(base_url), **self.per_service.get(service.name, {}))
        self.created.append(client)
        return client


HEALTHY = {"/health": {"status": "ok", "uptime": 1, "version": "1.0"}}


@pytest.mark.asyncio
async def test_connect_success_registers_connection_and_notifies(service_config):
    registry = ServiceRegistry(service_config, client_factory=FakeClientFactory())
    events = []
    registry.add_status_listener(events.append)

    await registry.connect_to_service(Service.SONG_ENGINE)

    assert registry.is_connected(Service.SONG_ENGINE)
    assert registry.status(Service.SONG_ENGINE).is_connected
    assert events == [
        (Service.SONG_ENGINE, ConnectionStatus.connecting()),
        (Service.SONG_ENGINE, ConnectionStatus.connected()),
    ]


@pytest.mark.asyncio
async def test_connect_failure_sets_error_and_requests_are_unavailable(service_config):
    factory = FakeClientFactory(
        SONG_ENGINE={"fail": ServiceConnectionFailed(Service.SONG_ENGINE, "HTTP 503")}
    )
    registry = ServiceRegistry(service_config, client_factory=factory)

    with pytest.raises(ServiceConnectionFailed) as excinfo:
        await registry.connect_to_service(Service.SONG_ENGINE)

    assert excinfo.value.service is Service.SONG_ENGINE
    status = registry.status(Service.SONG_ENGINE)
    assert status.state is ConnectionState.ERROR
    assert status.reason == "HTTP 503"
    assert registry.last_error is excinfo.value

    with pytest.raises(ServiceUnavailable):
        await registry.get_songs()


@pytest.mark.asyncio
async def test_connect_failure_drops_stale_connection(service_config):
    factory = FakeClientFactory()
    registry = ServiceRegistry(service_config, client_factory=factory)
    await registry.connect_to_service(Service.ECHO_ENGINE)

    factory.per_service["ECHO_ENGINE"] = {"fail": OSError("connection refused")}
    with pytest.raises(ServiceConnectionFailed):
        await registry.connect_to_service(Service.ECHO_ENGINE)

    assert not registry.is_connected(Service.ECHO_ENGINE)
    assert registry.status(Service.ECHO_ENGINE) == ConnectionStatus.error("connection refused")


@pytest.mark.asyncio
async def test_connect_to_all_runs_concurrently(service_config):
    unreachable = {"fail": ServiceConnectionFailed(Service.SONG_ENGINE, "timeout"), "delay": 0.2}
    factory = FakeClientFactory(
        SONG_ENGINE=unreachable,
        STORY_ENGINE=unreachable,
        ECHO_ENGINE=unreachable,
    )
    registry = ServiceRegistry(service_config, client_factory=factory)
    loop = asyncio.get_running_loop()

    started = loop.time()
    snapshot = await registry.connect_to_all_services()
    elapsed = loop.time() - started

    assert elapsed < 0.5
    assert set(snapshot) == set(Service)
    assert snapshot[Service.SONG_ENGINE].is_error
    assert snapshot[Service.STORY_ENGINE].is_error
    assert snapshot[Service.WORLD_ENGINE].is_connected
    assert registry.connected_services == frozenset(Service) - {
        Service.SONG_ENGINE,
        Service.STORY_ENGINE,
        Service.ECHO_ENGINE,
    }


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(service_config):
    registry = ServiceRegistry(service_config, client_factory=FakeClientFactory())
    await registry.connect_to_service(Service.HARMONY_SERVICE)

    registry.disconnect_from_service(Service.HARMONY_SERVICE)
    registry.disconnect_from_service(Service.HARMONY_SERVICE)

    assert not registry.is_connected(Service.HARMONY_SERVICE)
    assert registry.status(Service.HARMONY_SERVICE) == ConnectionStatus.disconnected()


@pytest.mark.asyncio
async def test_request_to_disconnected_service_does_no_io(service_config):
    factory = MagicMock()
    registry = ServiceRegistry(service_config, client_factory=factory)

    with pytest.raises(ServiceUnavailable) as excinfo:
        await registry.get_world_data(GridCoordinate(0, 0))

    assert excinfo.value.service is Service.WORLD_ENGINE
    assert registry.last_error is excinfo.value
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_typed_request_routes_to_service(service_config):
    songs = {"songs": [], "totalCount": 0}
    factory = FakeClientFactory(SONG_ENGINE={"responses": {"/songs": songs}})
    registry = ServiceRegistry(service_config, client_factory=factory)
    await registry.connect_to_service(Service.SONG_ENGINE)

    result = await registry.get_songs()

    assert result == SongsResponse(songs=[], total_count=0)
    assert factory.created[0].base_url == "http://services.test:3001"


@pytest.mark.asyncio
async def test_request_failure_is_recorded(service_config):
    failure = RequestFailed(Service.SONG_ENGINE, "internal server error")
    factory = FakeClientFactory(SONG_ENGINE={"responses": {"/songs": failure}})
    registry = ServiceRegistry(service_config, client_factory=factory)
    await registry.connect_to_service(Service.SONG_ENGINE)

    with pytest.raises(RequestFailed):
        await registry.get_songs()

    assert registry.last_error is failure


@pytest.mark.asyncio
async def test_health_checks_do_not_change_status(service_config):
    factory = FakeClientFactory(
        SONG_ENGINE={"responses": HEALTHY},
        WORLD_ENGINE={"responses": {"/health": RequestFailed(Service.WORLD_ENGINE, "bad gateway")}},
    )
    registry = ServiceRegistry(
        service_config,
        services=[Service.SONG_ENGINE, Service.WORLD_ENGINE, Service.ECHO_ENGINE],
        client_factory=factory,
    )
    await registry.connect_to_service(Service.SONG_ENGINE)
    await registry.connect_to_service(Service.WORLD_ENGINE)
    before = registry.connection_status

    results = await registry.check_all_services_health()

    assert results == {
        Service.SONG_ENGINE: True,
        Service.WORLD_ENGINE: False,
        Service.ECHO_ENGINE: False,
    }
    assert registry.connection_status == before
    assert await registry.overall_health() is SystemHealth.DEGRADED


@pytest.mark.asyncio
async def test_close_disconnects_everything(service_config):
    async with ServiceRegistry(service_config, client_factory=FakeClientFactory()) as registry:
        await registry.connect_to_all_services()
        assert registry.connected_services == frozenset(Service)

    assert registry.connected_services == frozenset()
    assert all(status == ConnectionStatus.disconnected() for status in registry.connection_status.values())
