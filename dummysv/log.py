from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any, IO, Optional

from dummysv.sync_writer import SyncWriter

LOGGER_NAME = "dummysv"


class MicrosecondFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created)
        return stamp.strftime(datefmt or "%Y/%m/%d %H:%M:%S.%f")


def configure_logging(stream: Optional[IO[Any]] = None) -> logging.Logger:
    """Route the dummysv logger to a synchronized stream (stdout by default)."""
    writer = stream if isinstance(stream, SyncWriter) else SyncWriter(stream if stream is not None else sys.stdout)
    handler = logging.StreamHandler(writer)
    handler.setFormatter(MicrosecondFormatter("%(asctime)s %(message)s"))

    # werkzeug shares the sink but only its errors get through; access lines are INFO.
    for name, level in ((LOGGER_NAME, logging.INFO), ("werkzeug", logging.ERROR)):
        target = logging.getLogger(name)
        for existing in list(target.handlers):
            target.removeHandler(existing)
            existing.close()
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False
    return logging.getLogger(LOGGER_NAME)
