"""
Storage Backends — Store/Retrieve/Delete over one of two variants.

- ``EncryptedFileBackend``: one ``<key>.enc`` file per key, sealed with
  AES-GCM under a key derived from the installation root secret.
- ``KeyringBackend``: base64 value in the OS credential vault under a fixed
  service name. The vault provides confidentiality and integrity itself,
  so records bypass the encryption codec.

``select_backend`` picks the variant once, at startup, from the configured
backend mode.

Security Note:
    Never log plaintext or ciphertext values. Only log key names and sizes.
"""
import base64
import binascii
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .config import StorageConfig
from .crypto import decrypt_record, encrypt_record
from .exceptions import (
    BackendUnavailableError,
    InvalidDataError,
    NotFoundError,
    StorageIOError,
)
from .fileutils import atomic_write_bytes, directory_lock
from .passphrase import get_or_create_root_secret

logger = logging.getLogger("tabd.vault")

RECORD_SUFFIX = ".enc"
_MAX_KEY_LENGTH = 200
_PROBE_KEY = "tabd-test-key"
_PROBE_VALUE = "test"


def validate_key(key: str) -> None:
    """Validate a storage key name.

    Keys name files on disk, so anything that could escape the
    installation directory or collide with its hidden files is refused.

    Raises:
        ValueError: If key is empty, too long, hidden, or contains a path
            separator or NUL.
    """
    if not key:
        raise ValueError("Storage key cannot be empty")
    if len(key) > _MAX_KEY_LENGTH:
        raise ValueError(f"Storage key cannot exceed {_MAX_KEY_LENGTH} characters")
    if key.startswith("."):
        raise ValueError("Storage key cannot start with '.'")
    if any(ch in key for ch in ("/", "\\", "\x00")):
        raise ValueError("Storage key cannot contain path separators or NUL")


class StorageBackend(ABC):
    """Capability interface shared by every storage variant."""

    name: str = "abstract"

    @abstractmethod
    def store(self, key: str, data: bytes) -> None:
        """Persist ``data`` under ``key``, replacing any previous value."""

    @abstractmethod
    def retrieve(self, key: str) -> bytes:
        """Return the data stored under ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the data stored under ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``.
        """


# ---------------------------------------------------------------------------
# Encrypted file storage
# ---------------------------------------------------------------------------

class EncryptedFileBackend(StorageBackend):
    """Encrypted ``<key>.enc`` files inside the installation directory.

    Each operation holds the directory lock, and writes go through
    temp-file + rename, so concurrent host processes never see torn records.
    """

    name = "file"

    def __init__(self, install_dir: Path, root_secret: bytes):
        self._dir = Path(install_dir)
        self._root_secret = root_secret

    @property
    def install_dir(self) -> Path:
        return self._dir

    def record_path(self, key: str) -> Path:
        """Return the file path holding the record for ``key``."""
        validate_key(key)
        return self._dir / f"{key}{RECORD_SUFFIX}"

    def store(self, key: str, data: bytes) -> None:
        path = self.record_path(key)
        record = encrypt_record(data, self._root_secret)
        try:
            with directory_lock(self._dir):
                atomic_write_bytes(path, record)
        except OSError as err:
            raise StorageIOError(f"Failed to write record {key!r}: {err}") from err
        logger.debug("Stored key=%s (%d bytes)", key, len(data))

    def retrieve(self, key: str) -> bytes:
        path = self.record_path(key)
        try:
            with directory_lock(self._dir):
                record = path.read_bytes()
        except FileNotFoundError as err:
            raise NotFoundError(f"No record stored for key {key!r}") from err
        except OSError as err:
            raise StorageIOError(f"Failed to read record {key!r}: {err}") from err
        return decrypt_record(record, self._root_secret)

    def delete(self, key: str) -> None:
        path = self.record_path(key)
        try:
            with directory_lock(self._dir):
                path.unlink()
        except FileNotFoundError as err:
            raise NotFoundError(f"No record stored for key {key!r}") from err
        except OSError as err:
            raise StorageIOError(f"Failed to delete record {key!r}: {err}") from err
        logger.debug("Deleted key=%s", key)


# ---------------------------------------------------------------------------
# OS credential vault storage
# ---------------------------------------------------------------------------

class KeyringBackend(StorageBackend):
    """Records kept in the OS credential vault through :mod:`keyring`.

    ``client`` defaults to the ``keyring`` module; anything exposing
    ``set_password``/``get_password``/``delete_password`` works.
    """

    name = "keyring"

    def __init__(self, service_name: str, client: Any = None):
        self._service = service_name
        self._client = client if client is not None else keyring

    @property
    def service_name(self) -> str:
        return self._service

    def store(self, key: str, data: bytes) -> None:
        validate_key(key)
        encoded = base64.b64encode(data).decode("ascii")
        try:
            self._client.set_password(self._service, key, encoded)
        except KeyringError as err:
            raise StorageIOError(f"Keyring write failed for {key!r}: {err}") from err
        logger.debug("Stored key=%s in keyring (%d bytes)", key, len(data))

    def retrieve(self, key: str) -> bytes:
        validate_key(key)
        try:
            encoded = self._client.get_password(self._service, key)
        except KeyringError as err:
            raise StorageIOError(f"Keyring read failed for {key!r}: {err}") from err
        if encoded is None:
            raise NotFoundError(f"No record stored for key {key!r}")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as err:
            raise InvalidDataError(
                f"Keyring value for {key!r} is not valid base64"
            ) from err

    def delete(self, key: str) -> None:
        validate_key(key)
        try:
            self._client.delete_password(self._service, key)
        except PasswordDeleteError as err:
            raise NotFoundError(f"No record stored for key {key!r}") from err
        except KeyringError as err:
            raise StorageIOError(f"Keyring delete failed for {key!r}: {err}") from err
        logger.debug("Deleted key=%s from keyring", key)


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------

def supports_keyring(service_name: str, client: Any = None) -> bool:
    """Probe whether the OS credential vault round-trips a value.

    Writes a throwaway test value, reads it back and removes it again.
    Any failure counts as "unavailable": headless sessions, a missing vault
    daemon and permission denials all surface as assorted exception types.

    Returns:
        True when the vault stored and returned the test value.
    """
    client = client if client is not None else keyring
    try:
        client.set_password(service_name, _PROBE_KEY, _PROBE_VALUE)
    except Exception as err:
        logger.info("Keyring unavailable (set failed): %s", err)
        return False
    try:
        retrieved = client.get_password(service_name, _PROBE_KEY)
    except Exception as err:
        logger.info("Keyring unavailable (get failed): %s", err)
        return False
    finally:
        try:
            client.delete_password(service_name, _PROBE_KEY)
        except Exception as err:
            logger.warning("Keyring probe cleanup failed: %s", err)
    if retrieved != _PROBE_VALUE:
        logger.info("Keyring unavailable (probe value mismatch)")
        return False
    return True


def select_backend(
    config: StorageConfig,
    keyring_client: Optional[Any] = None,
) -> StorageBackend:
    """Build the storage backend for ``config.backend``.

    - ``file``: encrypted files, root secret created on first use.
    - ``keyring``: the OS vault; fails if the probe does not pass.
    - ``auto``: the OS vault when the probe passes, encrypted files otherwise.

    Args:
        config: Storage configuration.
        keyring_client: Optional replacement for the ``keyring`` module.

    Returns:
        The selected backend instance.

    Raises:
        BackendUnavailableError: If ``keyring`` mode is forced and the
            vault probe fails.
        StorageIOError: If the root secret cannot be initialized.
    """
    mode = config.backend
    if mode in ("keyring", "auto"):
        if supports_keyring(config.service_name, keyring_client):
            logger.info("Using keyring storage (service=%s)", config.service_name)
            return KeyringBackend(config.service_name, keyring_client)
        if mode == "keyring":
            raise BackendUnavailableError(
                f"OS keyring is not usable for service {config.service_name!r}"
            )
        logger.info("Keyring probe failed, falling back to encrypted files")
    root_secret = get_or_create_root_secret(config.install_dir)
    logger.info("Using encrypted file storage in %s", config.install_dir)
    return EncryptedFileBackend(config.install_dir, root_secret)
