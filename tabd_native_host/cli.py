"""Command line entry point.

``tabd-native-host``               run the native messaging loop
``tabd-native-host getclipboard``  print the latest capture as JSON

Browsers launch the host with the extension origin (and on Windows a
``--parent-window`` flag) as arguments; anything other than
``getclipboard`` runs the messaging loop.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .conf import LOG_FILENAME, LOG_FORMAT
from .host import NativeHost
from .vault import StorageConfig, StorageError

logger = logging.getLogger("tabd.host")


def setup_logging(config: StorageConfig) -> Optional[logging.Handler]:
    """Route ``tabd`` logs to the debug log file, or discard them.

    stdout is the messaging pipe, so nothing may ever be logged there.

    Returns:
        The installed handler, so the caller can close it at exit.

    Raises:
        OSError: If the debug log file cannot be opened.
    """
    root = logging.getLogger("tabd")
    if config.debug:
        handler: logging.Handler = logging.FileHandler(
            config.install_dir / LOG_FILENAME, encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
    root.propagate = False
    root.addHandler(handler)
    return handler


def teardown_logging(handler: Optional[logging.Handler]) -> None:
    if handler is None:
        return
    root = logging.getLogger("tabd")
    root.removeHandler(handler)
    root.propagate = True
    handler.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabd-native-host",
        description="Tab'd native messaging host",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="",
        help="'getclipboard' prints the latest capture; anything else runs the host",
    )
    return parser


def _get_clipboard(host: NativeHost) -> int:
    try:
        data = host.get_clipboard_data()
    except (StorageError, ValueError) as err:
        print(f"Failed to retrieve clipboard data: {err}", file=sys.stderr)
        return 1
    sys.stdout.buffer.write(data.to_json(indent=True) + b"\n")
    sys.stdout.buffer.flush()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args, _extra = parser.parse_known_args(argv)

    try:
        config = StorageConfig.from_env()
        config.install_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except (ValidationError, OSError) as err:
        print(f"Failed to create native host: {err}", file=sys.stderr)
        return 1

    try:
        handler = setup_logging(config)
    except OSError as err:
        print(f"Failed to open log file: {err}", file=sys.stderr)
        return 1

    try:
        try:
            host = NativeHost.from_config(config)
        except StorageError as err:
            logger.error("Failed to create native host: %s", err)
            print(f"Failed to create native host: {err}", file=sys.stderr)
            return 1

        if args.command == "getclipboard":
            return _get_clipboard(host)

        host.run(sys.stdin.buffer, sys.stdout.buffer)
        logger.info("Tab'd Native Host shutdown")
        return 0
    finally:
        teardown_logging(handler)


if __name__ == "__main__":
    sys.exit(main())
