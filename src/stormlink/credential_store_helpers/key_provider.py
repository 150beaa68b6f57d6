"""Resolve the Fernet key protecting the credential vault."""

from __future__ import annotations

import base64
import binascii
import logging
import os
from pathlib import Path

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import ConfigurationError, env_str
from ..exceptions import StorageError

logger = logging.getLogger(__name__)

KEY_FILE_NAME = "vault.key"
SALT_FILE_NAME = "vault.salt"
PBKDF2_ITERATIONS = 480_000
_SALT_BYTES = 16


def load_vault_key(key_dir: Path) -> bytes:
    """
    Return the Fernet key for the vault stored under ``key_dir``.

    Resolution order:
        1. ``STORMLINK_VAULT_KEY``: a urlsafe base64 Fernet key
        2. ``STORMLINK_VAULT_PASSPHRASE``: PBKDF2-HMAC-SHA256 with a salt kept in ``key_dir``
        3. A random key generated once and kept in ``key_dir`` with owner-only permissions

    Raises:
        ConfigurationError: ``STORMLINK_VAULT_KEY`` is not a valid Fernet key
        StorageError: The salt or key file cannot be read or written
    """
    explicit_key = env_str("STORMLINK_VAULT_KEY")
    if explicit_key:
        return _validate_key(explicit_key)

    passphrase = env_str("STORMLINK_VAULT_PASSPHRASE", strip=False)
    if passphrase:
        salt = _read_or_create(key_dir / SALT_FILE_NAME, lambda: os.urandom(_SALT_BYTES))
        return derive_key(passphrase, salt)

    return _read_or_create(key_dir / KEY_FILE_NAME, Fernet.generate_key).strip()


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """Derive a Fernet key from ``passphrase`` and ``salt``."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8")))


def _validate_key(value: str) -> bytes:
    key = value.encode("ascii")
    try:
        Fernet(key)
    except (ValueError, binascii.Error) as exc:
        raise ConfigurationError.invalid_format(
            "STORMLINK_VAULT_KEY", "<redacted>", "32 url-safe base64-encoded bytes"
        ) from exc
    return key


def _read_or_create(path: Path, factory) -> bytes:
    try:
        if path.exists():
            return path.read_bytes()
        path.parent.mkdir(parents=True, exist_ok=True)
        material = factory()
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(material)
    except FileExistsError:
        return path.read_bytes()
    except OSError as exc:
        raise StorageError(f"Cannot access vault key material at {path}", path=str(path)) from exc
    logger.info("Created vault key material at %s", path)
    return material
