"""Tab'd Native Host defaults and environment variable names."""
from pathlib import Path

# Environment variables
ENV_INSTALL_DIR = "TABD_DIR"
ENV_DEBUG = "TABD_DEBUG"
ENV_BACKEND = "TABD_STORAGE_BACKEND"
ENV_KEYRING_SERVICE = "TABD_KEYRING_SERVICE"

DEFAULT_INSTALL_DIR = Path.home() / ".tabd"
DEFAULT_BACKEND = "file"
KEYRING_SERVICE = "tabd-native-host"

LOG_FILENAME = "native-host.log"
LOG_FORMAT = "%(asctime)s %(filename)s:%(lineno)d: %(message)s"

# Logical storage keys
LATEST_CLIPBOARD_KEY = "latest_clipboard"

# Chrome caps host-bound messages at 1 MiB
MAX_MESSAGE_SIZE = 1024 * 1024
