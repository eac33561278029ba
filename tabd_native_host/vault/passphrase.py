"""
Root Secret — The single long-lived passphrase for the file backend.

The root secret is 32 random bytes, URL-safe base64 encoded, stored once
per installation directory in ``.passphrase`` (mode 0600). Per-record
encryption keys are derived from it (see ``crypto.derive_key``).

Security Note:
    Losing this file makes every stored record unrecoverable. It is never
    regenerated while it exists, and its value is never logged.
"""
import base64
import logging
import secrets
from pathlib import Path

from .exceptions import InvalidDataError, StorageIOError
from .fileutils import atomic_write_bytes, directory_lock

logger = logging.getLogger("tabd.vault")

PASSPHRASE_FILENAME = ".passphrase"
ROOT_SECRET_BYTES = 32


def generate_root_secret() -> bytes:
    """Generate a new root secret as URL-safe base64 text (ASCII bytes)."""
    return base64.urlsafe_b64encode(secrets.token_bytes(ROOT_SECRET_BYTES))


def _read_root_secret(path: Path) -> bytes:
    # keys derive from the exact file content, so no decoding or newline translation
    secret = path.read_bytes()
    if not secret:
        raise InvalidDataError(f"Root secret file {path} is empty")
    return secret


def get_or_create_root_secret(install_dir: Path) -> bytes:
    """Return the installation's root secret, creating it on first use.

    An existing secret file is returned verbatim. Creation happens under
    the directory lock, so concurrent first runs agree on one secret.

    Args:
        install_dir: Installation directory holding the secret file.

    Returns:
        Root secret bytes, verbatim from the secret file.

    Raises:
        StorageIOError: If the secret cannot be read or persisted.
        InvalidDataError: If the existing secret file is empty.
    """
    path = Path(install_dir) / PASSPHRASE_FILENAME
    try:
        if path.exists():
            return _read_root_secret(path)
        with directory_lock(install_dir):
            # another process may have won the race while we waited
            if path.exists():
                return _read_root_secret(path)
            secret = generate_root_secret()
            atomic_write_bytes(path, secret)
    except OSError as err:
        raise StorageIOError(
            f"Unable to initialize root secret in {install_dir}: {err}"
        ) from err
    logger.info("Created new root secret in %s", install_dir)
    return secret
