"""Shared fixtures for the storage and host tests."""
import pytest
from keyring.errors import NoKeyringError, PasswordDeleteError

from tabd_native_host.vault import (
    EncryptedFileBackend,
    SecureStorage,
    get_or_create_root_secret,
)


class FakeKeyring:
    """In-memory stand-in for the ``keyring`` module."""

    def __init__(self, available: bool = True, echo: str | None = None):
        self.available = available
        self.echo = echo  # value returned by get_password instead of the stored one
        self.items: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str, str]] = []

    def _check(self) -> None:
        if not self.available:
            raise NoKeyringError("No recommended backend was available.")

    def set_password(self, service: str, username: str, password: str) -> None:
        self.calls.append(("set", service, username))
        self._check()
        self.items[(service, username)] = password

    def get_password(self, service: str, username: str) -> str | None:
        self.calls.append(("get", service, username))
        self._check()
        if self.echo is not None:
            return self.echo
        return self.items.get((service, username))

    def delete_password(self, service: str, username: str) -> None:
        self.calls.append(("delete", service, username))
        self._check()
        try:
            del self.items[(service, username)]
        except KeyError:
            raise PasswordDeleteError("Password not found") from None


@pytest.fixture
def install_dir(tmp_path):
    """An empty installation directory."""
    path = tmp_path / "tabd"
    path.mkdir()
    return path


@pytest.fixture
def root_secret(install_dir):
    return get_or_create_root_secret(install_dir)


@pytest.fixture
def file_backend(install_dir, root_secret):
    return EncryptedFileBackend(install_dir, root_secret)


@pytest.fixture
def storage(file_backend):
    return SecureStorage(file_backend)


@pytest.fixture
def fake_keyring():
    return FakeKeyring()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's TABD_* settings out of the tests."""
    for name in (
        "TABD_DIR",
        "TABD_DEBUG",
        "TABD_STORAGE_BACKEND",
        "TABD_KEYRING_SERVICE",
    ):
        monkeypatch.delenv(name, raising=False)
