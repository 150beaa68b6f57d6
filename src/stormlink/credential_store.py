"""
Secure per-grid credential persistence.

Credentials are serialized to JSON and handed to a ``SecretVault``; the
durable vault encrypts them before they touch the disk. Keys are derived from
the grid nick, so storing again for the same grid overwrites.
"""

import logging
from typing import Optional

import orjson

from .connection_config import ServiceClientConfig
from .credential_store_helpers import EncryptedFileVault, SecretVault, load_vault_key
from .exceptions import StorageError
from .grid_types import GridInfo, LoginCredentials

logger = logging.getLogger(__name__)

KEY_PREFIX = "opensim_credentials_"


def credential_key(grid: GridInfo) -> str:
    return f"{KEY_PREFIX}{grid.grid_nick}"


class CredentialStore:
    """Stores, retrieves and removes login credentials keyed by grid."""

    def __init__(self, vault: SecretVault):
        self.vault = vault

    @classmethod
    def from_config(cls, config: ServiceClientConfig) -> "CredentialStore":
        """Build a store backed by an encrypted vault in the configured data directory."""
        key = load_vault_key(config.data_dir)
        return cls(EncryptedFileVault(config.credentials_dir, key))

    def store(self, credentials: LoginCredentials, grid: GridInfo) -> None:
        """
        Persist ``credentials`` for ``grid``.

        Raises:
            StorageError: The vault rejected the write
        """
        payload = orjson.dumps(credentials.to_dict())
        try:
            self.vault.store(credential_key(grid), payload)
        except StorageError:
            logger.error("Vault rejected credentials for grid %s", grid.grid_nick)
            raise
        logger.info("Stored credentials for %s on grid %s", credentials.identifier, grid.grid_nick)

    def retrieve(self, grid: GridInfo) -> Optional[LoginCredentials]:
        """Return stored credentials for ``grid``; unreadable entries read as absent."""
        try:
            data = self.vault.retrieve(credential_key(grid))
        except StorageError as exc:
            logger.warning("Cannot read credentials for grid %s: %s", grid.grid_nick, exc)
            return None
        if data is None:
            return None
        try:
            return LoginCredentials.from_dict(orjson.loads(data))
        except (orjson.JSONDecodeError, KeyError, TypeError) as exc:
            logger.warning("Discarding malformed credentials for grid %s: %s", grid.grid_nick, type(exc).__name__)
            return None

    def remove(self, grid: GridInfo) -> None:
        self.vault.remove(credential_key(grid))
        logger.info("Removed stored credentials for grid %s", grid.grid_nick)


__all__ = ["CredentialStore", "credential_key"]
