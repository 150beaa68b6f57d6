import pytest

from stormlink.connection_state import ConnectionStatus
from stormlink.service_types import Service


def test_service_table():
    assert [(service.slug, service.port) for service in Service] == [
        ("song-engine", 3001),
        ("story-engine", 3002),
        ("world-engine", 3002),
        ("echo-engine", 3003),
        ("ai-orchestra", 3004),
        ("symphony-engine", 3005),
        ("harmony-service", 3006),
        ("silence-service", 3009),
    ]


def test_display_name_and_lookup():
    assert Service.AI_ORCHESTRA.display_name == "Ai Orchestra"
    assert Service.from_slug("world-engine") is Service.WORLD_ENGINE
    with pytest.raises(ValueError):
        Service.from_slug("unknown")


def test_connection_status_rendering():
    assert str(ConnectionStatus.error("refused")) == "error: refused"
    assert str(ConnectionStatus.connected()) == "connected"
    assert ConnectionStatus.error("x").is_error
