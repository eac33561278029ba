"""Tab'd Native Host.

Native messaging host for the Tab'd browser extension: receives clipboard
captures over stdin/stdout and keeps the latest one in secure storage.
"""
from .version import __version__
from .vault import SecureStorage, StorageConfig

__all__ = ["__version__", "SecureStorage", "StorageConfig"]
