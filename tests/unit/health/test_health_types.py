import asyncio
from unittest.mock import Mock

from stormlink.health.types import BaseHealthMonitor, HealthCheckResult


class DummyHealthMonitor(BaseHealthMonitor):
    async def check_health(self) -> HealthCheckResult:
        return HealthCheckResult(healthy=True)


def test_record_success_with_timestamp(monkeypatch):
    monitor = DummyHealthMonitor("dummy")
    monitor.consecutive_failures = 3
    fake_loop = Mock()
    fake_loop.time.return_value = 1.0
    monkeypatch.setattr(asyncio, "get_running_loop", Mock(return_value=fake_loop))

    monitor.record_success(timestamp=1.23)

    assert monitor.last_success_time == 1.23
    assert monitor.consecutive_failures == 0


def test_record_success_uses_loop_time(monkeypatch):
    monitor = DummyHealthMonitor("dummy")
    fake_loop = Mock()
    fake_loop.time.return_value = 3.14
    monkeypatch.setattr(asyncio, "get_running_loop", Mock(return_value=fake_loop))

    monitor.record_success()

    assert monitor.last_success_time == 3.14


def test_record_failure_increments():
    monitor = DummyHealthMonitor("dummy")
    monitor.record_failure()
    monitor.record_failure()
    assert monitor.consecutive_failures == 2


def test_failure_result_records_reason():
    monitor = DummyHealthMonitor("dummy")

    result = monitor.failure_result("HTTP 502", 502)

    assert result == HealthCheckResult(False, status_code=502, error="HTTP 502")
    assert monitor.last_error == "HTTP 502"
    assert monitor.consecutive_failures == 1


def test_success_clears_last_error():
    monitor = DummyHealthMonitor("dummy")
    monitor.record_failure("timeout")

    monitor.record_success(timestamp=5.0)

    assert monitor.last_error is None
    assert monitor.consecutive_failures == 0
