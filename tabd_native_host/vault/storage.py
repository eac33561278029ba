"""
SecureStorage — The storage object held by the native host.

Wraps exactly one backend, chosen once at construction:
- ``store(key, data)`` — persist an opaque byte blob
- ``retrieve(key)`` — return the blob stored under ``key``
- ``delete(key)`` — remove the blob stored under ``key``

Security Note:
    Never log plaintext values. Only log key names and backend names.
"""
import logging
from typing import Any, Optional

from .backends import StorageBackend, select_backend
from .config import StorageConfig

logger = logging.getLogger("tabd.vault")


class SecureStorage:
    """Secure key-value storage for the native host.

    Build it with :meth:`from_config` to run backend selection, or pass an
    already constructed backend directly.
    """

    def __init__(self, backend: StorageBackend):
        self._backend = backend

    @classmethod
    def from_config(
        cls,
        config: StorageConfig,
        keyring_client: Optional[Any] = None,
    ) -> "SecureStorage":
        """Select the backend for ``config`` and wrap it.

        Args:
            config: Storage configuration.
            keyring_client: Optional replacement for the ``keyring`` module.

        Returns:
            SecureStorage bound to the selected backend.
        """
        return cls(select_backend(config, keyring_client))

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def backend_name(self) -> str:
        return self._backend.name

    def store(self, key: str, data: bytes) -> None:
        """Persist ``data`` under ``key``, replacing any prior value."""
        self._backend.store(key, data)

    def retrieve(self, key: str) -> bytes:
        """Return the bytes stored under ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``.
            AuthenticationError: If the record fails integrity checks.
            InvalidDataError: If the record is malformed.
        """
        return self._backend.retrieve(key)

    def delete(self, key: str) -> None:
        """Remove the bytes stored under ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``.
        """
        self._backend.delete(key)
