from __future__ import annotations

import threading
from typing import Any, IO


class SyncWriter:
    """Serializes writes to a stream shared between request threads."""

    def __init__(self, stream: IO[Any]) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> IO[Any]:
        return self._stream

    def write(self, data: Any) -> int:
        with self._lock:
            return self._stream.write(data)

    def flush(self) -> None:
        with self._lock:
            flush = getattr(self._stream, "flush", None)
            if flush is not None:
                flush()
