"""File helpers for the encrypted file backend.

- ``directory_lock`` serializes access to an installation directory across
  processes (advisory lock on ``<dir>/.lock``).
- ``atomic_write_bytes`` replaces a file via temp + fsync + rename so
  readers never observe a partially written record.
"""
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

LOCK_FILENAME = ".lock"
PRIVATE_MODE = 0o600


def _lock_file(handle) -> None:
    if os.name == "nt":
        import msvcrt

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)  # type: ignore[attr-defined]
        return
    import fcntl

    fcntl.flock(handle.fileno(), fcntl.LOCK_EX)


def _unlock_file(handle) -> None:
    if os.name == "nt":
        import msvcrt

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)  # type: ignore[attr-defined]
        return
    import fcntl

    fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def directory_lock(directory: Path) -> Iterator[Path]:
    """Hold an exclusive lock on ``directory`` for the duration of the block.

    Blocks until the lock is available. The lock file itself is never
    removed; it carries no data.
    """
    lock_path = Path(directory) / LOCK_FILENAME
    fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, PRIVATE_MODE)
    with os.fdopen(fd, "r+b") as handle:
        _lock_file(handle)
        try:
            yield lock_path
        finally:
            _unlock_file(handle)


def _fsync_dir(path: Path) -> None:
    # Directories cannot be opened for fsync on Windows.
    if os.name == "nt":
        return
    fd = os.open(str(path), os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write_bytes(path: Path, payload: bytes, *, mode: int = PRIVATE_MODE) -> None:
    """Atomically write raw bytes to ``path`` with permissions ``mode``."""
    path = Path(path)
    tmp_fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(tmp_fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)
