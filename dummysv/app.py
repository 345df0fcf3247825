from __future__ import annotations

import signal
import threading
from typing import Optional, Sequence

from dummysv.config import parse_config
from dummysv.handler import create_app
from dummysv.headers import HeaderError
from dummysv.log import configure_logging
from dummysv.server import DummyServer, listen

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def wait_for_signal(stop: threading.Event, signals: Sequence[signal.Signals] = STOP_SIGNALS) -> None:
    """Block the calling (main) thread until one of ``signals`` arrives or ``stop`` is set."""
    previous = {}

    def _on_signal(_signum, _frame) -> None:
        stop.set()

    # Python only delivers signals to the main thread.
    if threading.current_thread() is threading.main_thread():
        for signum in signals:
            previous[signum] = signal.signal(signum, _on_signal)
    try:
        # Short waits keep the main thread responsive to signal handlers on every platform.
        while not stop.wait(0.5):
            pass
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def main(argv: Optional[Sequence[str]] = None, stop: Optional[threading.Event] = None) -> int:
    logger = configure_logging()
    try:
        config = parse_config(argv)
    except HeaderError as exc:
        logger.critical("%s", exc)
        return 1

    try:
        listener = listen(config.network, config.address)
    except OSError as exc:
        logger.critical("Error creating listener: %s", exc)
        return 1

    server = DummyServer(create_app(config, logger), listener)
    try:
        server.start()
        logger.info("Listening on %s", server.address)
        wait_for_signal(stop if stop is not None else threading.Event())
    finally:
        server.close()
    return 0
