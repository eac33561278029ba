"""Secure storage for the native host.

Security Note (Threat Model):
    The file backend keeps its root secret in plaintext next to the
    encrypted records, protected only by owner-only file permissions. It
    protects records copied away without the secret file, and detects
    tampering; it does not protect against a process running as the same
    user. The keyring backend delegates protection to the OS vault.
"""

from .storage import SecureStorage
from .config import StorageConfig
from .backends import (
    StorageBackend,
    EncryptedFileBackend,
    KeyringBackend,
    select_backend,
    supports_keyring,
)
from .passphrase import get_or_create_root_secret
from .exceptions import (
    StorageError,
    NotFoundError,
    InvalidDataError,
    AuthenticationError,
    BackendUnavailableError,
    StorageIOError,
)

__all__ = [
    "SecureStorage",
    "StorageConfig",
    "StorageBackend",
    "EncryptedFileBackend",
    "KeyringBackend",
    "select_backend",
    "supports_keyring",
    "get_or_create_root_secret",
    "StorageError",
    "NotFoundError",
    "InvalidDataError",
    "AuthenticationError",
    "BackendUnavailableError",
    "StorageIOError",
]
