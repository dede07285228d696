"""
Log records, structured fields and the record pool.

A record lives for exactly one print call: it is acquired from the
owning logger's pool, filled in, dispatched and released. It must never be
read after release, so handlers must not keep a reference to it.
"""

import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .levels import level_name

if TYPE_CHECKING:
    from .logger import Logger

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Fields(dict):
    """
    Structured key/value pairs attached to a record.

    Any ``Fields`` value passed positionally to a leveled log call is merged
    into the record's fields instead of being formatted into the message.
    """


@dataclass(frozen=True)
class Frame:
    """One entry of a debug stack trace."""

    function: str
    source: str
    line: int

    def __str__(self) -> str:
        return f"{self.source}:{self.line} {self.function}"


class Log:
    """A single log event, reused through a ``RecordPool``."""

    __slots__ = ("time", "timestamp", "level", "message", "fields", "new_line", "stacktrace", "logger")

    def __init__(self, logger: "Logger | None" = None):
        self.logger = logger
        self.reset()

    def reset(self) -> None:
        self.time: datetime | None = None
        self.timestamp = 0
        self.level = 0
        self.message = ""
        self.fields: Fields = Fields()
        # False when the record comes from a Print call.
        self.new_line = False
        self.stacktrace: list[Frame] = []

    def format_time(self) -> str:
        """The record time in the owning logger's time format, or ``""``."""
        if self.time is None or self.logger is None or not self.logger.time_format:
            return ""
        return self.time.strftime(self.logger.time_format)

    def to_dict(self) -> dict[str, Any]:
        """A JSON-friendly view of the record."""
        data: dict[str, Any] = {
            "level": level_name(self.level),
            "message": self.message,
        }
        if self.time is not None:
            data["timestamp"] = self.timestamp
        if self.fields:
            data["fields"] = dict(self.fields)
        if self.stacktrace:
            data["stacktrace"] = [
                {"function": f.function, "source": f.source, "line": f.line} for f in self.stacktrace
            ]
        return data

    def __repr__(self) -> str:
        return f"Log(level={self.level!r}, message={self.message!r}, fields={dict(self.fields)!r})"


class RecordPool:
    """
    Free list of ``Log`` records.

    ``acquire`` reuses a released record when one is available. ``release``
    keeps at most ``max_size`` records, so the pool never grows with the
    number of calls.
    """

    def __init__(self, logger: "Logger | None" = None, max_size: int = 64):
        self.logger = logger
        self.max_size = max_size
        self._free: list[Log] = []
        self._lock = threading.Lock()

    def acquire(self) -> Log:
        with self._lock:
            if self._free:
                return self._free.pop()
        return Log(self.logger)

    def release(self, log: Log) -> None:
        log.reset()
        with self._lock:
            if len(self._free) < self.max_size:
                self._free.append(log)

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)


def get_stacktrace(limit: int) -> list[Frame]:
    """
    Snapshot of the caller's stack, innermost first.

    Frames inside the fanlog package are skipped. ``limit == 0`` keeps every
    frame, a negative limit disables the snapshot.
    """
    if limit < 0:
        return []

    frames: list[Frame] = []
    frame = sys._getframe(1)
    while frame is not None:
        code = frame.f_code
        if os.path.dirname(os.path.abspath(code.co_filename)) != _PACKAGE_DIR:
            frames.append(Frame(code.co_name, code.co_filename, frame.f_lineno))
            if limit and len(frames) >= limit:
                break
        frame = frame.f_back
    return frames
