"""
Native messaging framing.

Each message is a 4-byte little-endian unsigned length followed by that
many bytes of UTF-8 JSON, in both directions.
"""
import struct
from typing import BinaryIO, Optional

from .conf import MAX_MESSAGE_SIZE

_LENGTH = struct.Struct("<I")


class MessagingError(Exception):
    """A frame could not be read or written."""


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_message(
    stream: BinaryIO,
    max_size: int = MAX_MESSAGE_SIZE,
) -> Optional[bytes]:
    """Read one framed message from ``stream``.

    Returns:
        Message payload, or None when the stream ended cleanly before a
        new frame started.

    Raises:
        MessagingError: On a truncated frame or an out-of-range length.
    """
    header = _read_exact(stream, _LENGTH.size)
    if not header:
        return None
    if len(header) < _LENGTH.size:
        raise MessagingError(
            f"failed to read message length: got {len(header)} of "
            f"{_LENGTH.size} bytes"
        )
    (length,) = _LENGTH.unpack(header)
    if length == 0 or length > max_size:
        raise MessagingError(f"invalid message length: {length}")
    payload = _read_exact(stream, length)
    if len(payload) < length:
        raise MessagingError(
            f"failed to read message data: got {len(payload)} of {length} bytes"
        )
    return payload


def send_message(stream: BinaryIO, payload: bytes) -> None:
    """Write one framed message to ``stream`` and flush it."""
    try:
        stream.write(_LENGTH.pack(len(payload)))
        stream.write(payload)
        stream.flush()
    except OSError as err:
        raise MessagingError(f"failed to write message: {err}") from err
