import pytest
from cryptography.fernet import Fernet

from stormlink.credential_store_helpers import EncryptedFileVault, InMemoryVault
from stormlink.exceptions import StorageError


def test_in_memory_vault_basic_operations():
    vault = InMemoryVault()

    vault.store("k", b"v")
    assert vault.retrieve("k") == b"v"

    vault.remove("k")
    vault.remove("k")
    assert vault.retrieve("k") is None


def test_file_vault_uses_hashed_file_names(tmp_path):
    vault = EncryptedFileVault(tmp_path, Fernet.generate_key())

    vault.store("opensim_credentials_OSGrid", b"payload")

    names = [path.name for path in tmp_path.iterdir()]
    assert len(names) == 1
    assert "OSGrid" not in names[0]
    assert names[0].endswith(".bin")


def test_file_vault_remove_missing_key_is_noop(tmp_path):
    vault = EncryptedFileVault(tmp_path, Fernet.generate_key())

    vault.remove("never-stored")

    assert vault.retrieve("never-stored") is None


def test_file_vault_store_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")
    vault = EncryptedFileVault(blocker / "credentials", Fernet.generate_key())

    with pytest.raises(StorageError):
        vault.store("k", b"v")
