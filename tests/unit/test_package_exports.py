import importlib

import stormlink


def test_public_names_resolve():
    missing = [name for name in stormlink.__all__ if not hasattr(stormlink, name)]

    assert missing == []


def test_helper_subpackages_import():
    for module in (
        "stormlink.credential_store_helpers.key_provider",
        "stormlink.credential_store_helpers.vault",
        "stormlink.service_client_helpers.request_operations",
        "stormlink.service_registry_helpers.fan_out",
        "stormlink.session_manager_helpers.login_state",
        "stormlink.config.runtime_helpers.dotenv_loader",
    ):
        assert importlib.import_module(module).__name__ == module
