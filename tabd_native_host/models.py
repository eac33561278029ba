"""Data models exchanged with the browser extension."""
import time
from typing import Any

import orjson
from pydantic import BaseModel, Field


class ClipboardData(BaseModel):
    """Clipboard capture sent by the browser extension.

    Missing fields default to empty values and unknown fields are ignored,
    so older and newer extension builds can talk to the same host.
    """

    type: str = ""
    text: str = ""
    timestamp: int = 0
    url: str = ""
    title: str = ""

    def to_json(self, indent: bool = False) -> bytes:
        """Serialize with orjson, keeping field declaration order."""
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(self.model_dump(), option=option)

    @classmethod
    def from_json(cls, data: bytes) -> "ClipboardData":
        """Parse a JSON payload.

        Raises:
            ValueError: If ``data`` is not valid JSON or does not match
                the model (``orjson.JSONDecodeError`` and pydantic's
                ``ValidationError`` are both ``ValueError`` subclasses).
        """
        return cls.model_validate(orjson.loads(data))


def _now() -> int:
    return int(time.time())


class Response(BaseModel):
    """Reply sent to the browser extension after each message."""

    status: str
    message: str = ""
    timestamp: int = Field(default_factory=_now)

    @classmethod
    def success(cls, message: str) -> "Response":
        return cls(status="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Response":
        return cls(status="error", message=message)

    def to_json(self) -> bytes:
        payload: dict[str, Any] = {"status": self.status}
        if self.message:
            payload["message"] = self.message
        payload["timestamp"] = self.timestamp
        return orjson.dumps(payload)
