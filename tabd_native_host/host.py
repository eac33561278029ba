"""
NativeHost — Native messaging loop for the Tab'd browser extension.

Reads clipboard captures from the extension, keeps the latest one in
secure storage and replies with a status message for each capture.

Security Note:
    Never log clipboard text. Only log sizes and error messages.
"""
import logging
from typing import BinaryIO

from .conf import LATEST_CLIPBOARD_KEY, MAX_MESSAGE_SIZE
from .messaging import MessagingError, read_message, send_message
from .models import ClipboardData, Response
from .vault import SecureStorage, StorageConfig, StorageError

logger = logging.getLogger("tabd.host")


class NativeHost:
    """Handles native messaging communication with the extension."""

    def __init__(
        self,
        storage: SecureStorage,
        max_message_size: int = MAX_MESSAGE_SIZE,
    ):
        self._storage = storage
        self._max_message_size = max_message_size

    @classmethod
    def from_config(cls, config: StorageConfig) -> "NativeHost":
        """Select storage for an existing installation directory.

        The directory itself is created by the command line bootstrap.
        """
        return cls(
            SecureStorage.from_config(config),
            max_message_size=config.max_message_size,
        )

    @property
    def storage(self) -> SecureStorage:
        return self._storage

    def save_clipboard_data(self, data: ClipboardData) -> None:
        """Store ``data`` as the latest clipboard capture."""
        self._storage.store(LATEST_CLIPBOARD_KEY, data.to_json())

    def get_clipboard_data(self) -> ClipboardData:
        """Return the latest clipboard capture.

        Raises:
            NotFoundError: If nothing was captured yet.
            StorageError: If the stored record cannot be read.
            ValueError: If the stored record is not a clipboard capture.
        """
        return ClipboardData.from_json(
            self._storage.retrieve(LATEST_CLIPBOARD_KEY)
        )

    def handle_message(self, message: bytes, output: BinaryIO) -> None:
        """Process one message from the extension and send the reply."""
        try:
            data = ClipboardData.from_json(message)
        except ValueError as err:
            logger.error("Error parsing message: %s", err)
            send_message(output, Response.error(f"Invalid message: {err}").to_json())
            return

        try:
            self.save_clipboard_data(data)
        except StorageError as err:
            logger.error("Error saving clipboard data: %s", err)
            response = Response.error(f"Failed to save clipboard data: {err}")
        else:
            logger.debug("Saved clipboard data (%d bytes)", len(message))
            response = Response.success("Clipboard data saved successfully")
        send_message(output, response.to_json())

    def run(self, input: BinaryIO, output: BinaryIO) -> None:
        """Serve messages until the extension closes the pipe."""
        logger.info(
            "Tab'd Native Host started (storage=%s)", self._storage.backend_name,
        )
        while True:
            try:
                message = read_message(input, self._max_message_size)
            except MessagingError as err:
                logger.error("Error reading message: %s", err)
                continue
            if message is None:
                logger.info("Browser extension disconnected")
                break
            try:
                self.handle_message(message, output)
            except MessagingError as err:
                logger.error("Error handling message: %s", err)
