"""
Secret vault backends.

A vault maps string keys to opaque byte blobs. ``EncryptedFileVault`` is the
durable backend: every blob is a Fernet token, so the filesystem never sees
plaintext secrets.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from ..exceptions import StorageError

logger = logging.getLogger(__name__)


class SecretVault(ABC):
    """Key/value storage for secret blobs."""

    @abstractmethod
    def store(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any existing value.

        Raises:
            StorageError: The backend rejected the write
        """

    @abstractmethod
    def retrieve(self, key: str) -> Optional[bytes]:
        """Return the blob stored under ``key`` or None."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""


class InMemoryVault(SecretVault):
    """Process-local vault. Nothing is persisted."""

    def __init__(self):
        self._items: Dict[str, bytes] = {}

    def store(self, key: str, data: bytes) -> None:
        self._items[key] = bytes(data)

    def retrieve(self, key: str) -> Optional[bytes]:
        return self._items.get(key)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class EncryptedFileVault(SecretVault):
    """Fernet-encrypted blobs, one owner-readable file per key."""

    def __init__(self, directory: Path, key: bytes):
        self.directory = Path(directory)
        self._fernet = Fernet(key)

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.bin"

    def store(self, key: str, data: bytes) -> None:
        token = self._fernet.encrypt(data)
        target = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(token)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, target)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to store secret {key!r}", key=key) from exc

    def retrieve(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            token = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Failed to read secret {key!r}", key=key) from exc

        try:
            return self._fernet.decrypt(token)
        except InvalidToken:
            logger.warning("Secret %r could not be decrypted with the current vault key", key)
            return None

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove secret {key!r}", key=key) from exc
