"""Storage error taxonomy.

Every error raised by the storage core derives from :class:`StorageError`,
so callers can catch the family or single out a specific failure.
"""


class StorageError(Exception):
    """Base class for secure storage failures."""


class NotFoundError(StorageError, KeyError):
    """The requested key has no stored record."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class InvalidDataError(StorageError):
    """A stored record is structurally malformed (truncated or corrupt)."""


class AuthenticationError(StorageError):
    """AEAD tag verification failed.

    Either the record was tampered with or it was sealed under a different
    root secret.
    """


class BackendUnavailableError(StorageError):
    """The OS credential vault cannot be used."""


class StorageIOError(StorageError):
    """A filesystem operation failed."""
