"""Vault backends and key management for the credential store."""

from .key_provider import load_vault_key
from .vault import EncryptedFileVault, InMemoryVault, SecretVault

__all__ = ["EncryptedFileVault", "InMemoryVault", "SecretVault", "load_vault_key"]
