import aiohttp
import pytest

from stormlink.service_client_helpers.session_manager import HTTPSessionManager


def test_build_timeout_uses_request_and_resource_deadlines():
    manager = HTTPSessionManager("tests", request_timeout=15.0, resource_timeout=30.0)

    timeout = manager.build_timeout()

    assert timeout.total == 30.0
    assert timeout.sock_connect == 15.0
    assert timeout.sock_read == 15.0


@pytest.mark.asyncio
async def test_get_or_create_session_reuses_open_session():
    manager = HTTPSessionManager("tests", request_timeout=1.0, resource_timeout=2.0)

    session = manager.get_or_create_session()
    try:
        assert isinstance(session, aiohttp.ClientSession)
        assert manager.get_or_create_session() is session
        assert manager.get_session() is session
    finally:
        await manager.close_session()

    assert manager.session is None
    assert manager.get_session() is None


@pytest.mark.asyncio
async def test_close_session_without_session_is_noop():
    manager = HTTPSessionManager("tests", request_timeout=1.0, resource_timeout=2.0)

    await manager.close_session()

    assert manager.session is None
