"""
Background line scanner used by ``Printer.scan`` and ``Logger.scan``.
"""

import threading
from collections.abc import Callable
from typing import Any

import structlog

from .errors import OutputError

_log = structlog.get_logger("fanlog")


class Scanner:
    """
    Reads ``stream`` line by line on a daemon thread.

    Each non-empty line, stripped of its line ending and prefixed with
    ``prefix()`` when given, is written with a trailing new line through
    ``write``.
    Cancellation is checked between lines; a read that is already blocked
    finishes first.
    """

    def __init__(
        self,
        stream: Any,
        write: Callable[[str | bytes], Any],
        prefix: Callable[[], str] | None = None,
    ):
        self.stream = stream
        self.write = write
        self.prefix = prefix
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="fanlog-scan", daemon=True)

    def start(self) -> Callable[[], None]:
        self._thread.start()
        return self.cancel

    def cancel(self) -> None:
        """Stop scanning. Safe to call many times, or after the stream ended."""
        self._stop.set()

    @property
    def done(self) -> bool:
        return not self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _lines(self):
        readline = self.stream.readline
        while not self._stop.is_set():
            line = readline()
            if not line:
                return
            yield line

    def _run(self) -> None:
        try:
            for line in self._lines():
                if self._stop.is_set():
                    return
                line = line.rstrip(b"\r\n") if isinstance(line, bytes) else line.rstrip("\r\n")
                if not line:
                    continue
                if self.prefix is not None:
                    if isinstance(line, bytes):
                        line = line.decode("utf-8", errors="replace")
                    line = self.prefix() + line
                newline = b"\n" if isinstance(line, bytes) else "\n"
                try:
                    self.write(line + newline)
                except OutputError as e:
                    _log.warning("output_write_failed", error=str(e), source="scan")
        except (OSError, ValueError) as e:
            # Stream closed or failed while reading.
            _log.error("scan_failed", error=str(e))
        finally:
            self._stop.set()
