"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from stormlink.config import runtime
from stormlink.connection_config import ServiceClientConfig

# Keep tests away from any developer configuration
os.environ.setdefault("STORMLINK_BASE_URL", "http://localhost")
os.environ.setdefault("REQUEST_TIMEOUT_SECONDS", "15")
os.environ.setdefault("RESOURCE_TIMEOUT_SECONDS", "30")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Point the data directory at a temp dir and ignore .env files."""
    monkeypatch.setenv("STORMLINK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("STORMLINK_VAULT_KEY", raising=False)
    monkeypatch.delenv("STORMLINK_VAULT_PASSPHRASE", raising=False)
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", ())
    runtime.reset_default_values()
    yield
    runtime.reset_default_values()


@pytest.fixture
def service_config(tmp_path):
    return ServiceClientConfig(
        base_url="http://services.test",
        request_timeout_seconds=15.0,
        resource_timeout_seconds=30.0,
        data_dir=tmp_path / "data",
    )
