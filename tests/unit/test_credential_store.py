"""Tests for per-grid credential storage."""

from unittest.mock import MagicMock

import pytest
from cryptography.fernet import Fernet

from stormlink.credential_store import CredentialStore, credential_key
from stormlink.credential_store_helpers import EncryptedFileVault, InMemoryVault
from stormlink.exceptions import StorageError
from stormlink.grid_types import GridInfo, LoginCredentials

GRID = GridInfo(name="OSGrid", login_uri="http://login.osgrid.org", grid_nick="OSGrid")
CREDS = LoginCredentials(first_name="Ada", last_name="Lovelace", password="s3cret-pass")


def test_store_and_retrieve_roundtrip():
    vault = InMemoryVault()
    store = CredentialStore(vault)

    store.store(CREDS, GRID)

    assert "opensim_credentials_OSGrid" in vault
    assert store.retrieve(GRID) == CREDS


def test_store_overwrites_previous_credentials():
    store = CredentialStore(InMemoryVault())
    store.store(CREDS, GRID)
    updated = LoginCredentials("Ada", "Lovelace", "new-pass", start_location="home")

    store.store(updated, GRID)

    assert store.retrieve(GRID) == updated


def test_remove_is_idempotent():
    store = CredentialStore(InMemoryVault())
    store.store(CREDS, GRID)

    store.remove(GRID)
    store.remove(GRID)

    assert store.retrieve(GRID) is None


def test_vault_failure_raises_storage_error():
    vault = MagicMock()
    vault.store.side_effect = StorageError("disk full")
    store = CredentialStore(vault)

    with pytest.raises(StorageError):
        store.store(CREDS, GRID)


def test_malformed_blob_reads_as_absent():
    vault = InMemoryVault()
    vault.store(credential_key(GRID), b"not json")

    assert CredentialStore(vault).retrieve(GRID) is None


def test_password_not_in_repr():
    assert "s3cret-pass" not in repr(CREDS)
    assert CREDS.identifier == "Ada Lovelace"


def test_encrypted_vault_keeps_plaintext_off_disk(tmp_path):
    vault = EncryptedFileVault(tmp_path / "credentials", Fernet.generate_key())
    store = CredentialStore(vault)

    store.store(CREDS, GRID)

    files = list((tmp_path / "credentials").iterdir())
    assert len(files) == 1
    assert b"s3cret-pass" not in files[0].read_bytes()
    assert files[0].stat().st_mode & 0o777 == 0o600
    assert store.retrieve(GRID) == CREDS


def test_blob_from_other_key_reads_as_absent(tmp_path):
    directory = tmp_path / "credentials"
    CredentialStore(EncryptedFileVault(directory, Fernet.generate_key())).store(CREDS, GRID)

    other = CredentialStore(EncryptedFileVault(directory, Fernet.generate_key()))

    assert other.retrieve(GRID) is None


def test_from_config_persists_across_instances(service_config):
    CredentialStore.from_config(service_config).store(CREDS, GRID)

    assert CredentialStore.from_config(service_config).retrieve(GRID) == CREDS
    assert (service_config.data_dir / "vault.key").exists()
