"""
Storage Configuration — Installation directory and backend selection.

Reads settings from environment variables:
    TABD_DIR = <installation directory>      (default: ~/.tabd)
    TABD_STORAGE_BACKEND = file|keyring|auto (default: file)
    TABD_KEYRING_SERVICE = <service name>    (default: tabd-native-host)
    TABD_DEBUG = <any non-empty value>       (enables the debug log file)

Security Note:
    Never log the root secret. Only log paths and backend names.
"""
import os
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ..conf import (
    ENV_INSTALL_DIR,
    ENV_DEBUG,
    ENV_BACKEND,
    ENV_KEYRING_SERVICE,
    DEFAULT_INSTALL_DIR,
    DEFAULT_BACKEND,
    KEYRING_SERVICE,
    MAX_MESSAGE_SIZE,
)

logger = logging.getLogger("tabd.vault")

BACKEND_CHOICES = ("file", "keyring", "auto")


class StorageConfig(BaseModel):
    """Validated storage configuration."""

    install_dir: Path = Field(default=DEFAULT_INSTALL_DIR)
    backend: str = Field(default=DEFAULT_BACKEND)
    service_name: str = Field(default=KEYRING_SERVICE, min_length=1)
    debug: bool = False
    max_message_size: int = Field(default=MAX_MESSAGE_SIZE, ge=1)

    @field_validator("install_dir")
    @classmethod
    def expand_install_dir(cls, v: Path) -> Path:
        """Expand ``~`` so the directory never depends on the cwd."""
        return v.expanduser()

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate storage backend is supported."""
        v = v.strip().lower()
        if v not in BACKEND_CHOICES:
            raise ValueError(
                f"Unsupported storage backend: {v} "
                f"(expected one of {', '.join(BACKEND_CHOICES)})"
            )
        return v

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Create StorageConfig by loading values from environment.

        Returns:
            Populated StorageConfig instance.
        """
        install_dir = os.environ.get(ENV_INSTALL_DIR) or DEFAULT_INSTALL_DIR
        config = cls(
            install_dir=Path(install_dir),
            backend=os.environ.get(ENV_BACKEND, DEFAULT_BACKEND),
            service_name=os.environ.get(ENV_KEYRING_SERVICE, KEYRING_SERVICE),
            debug=bool(os.environ.get(ENV_DEBUG)),
        )
        logger.debug(
            "Storage config: dir=%s backend=%s", config.install_dir, config.backend,
        )
        return config
