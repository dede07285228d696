"""
Printer: a thread-safe fan-out writer over multiple destinations.
"""

import io
import sys
import threading
from collections.abc import Callable
from typing import Any

from .colors import RichOption, is_terminal, rich_text, supports_color
from .errors import OutputError


def accepts_bytes(w: Any) -> bool:
    """Whether ``w`` is a binary destination rather than a text one."""
    if isinstance(w, io.TextIOBase):
        return False
    if isinstance(w, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(w, "mode", None)
    return isinstance(mode, str) and "b" in mode


def _write_one(w: Any, data: str | bytes, binary: bool) -> int:
    if binary and isinstance(data, str):
        data = data.encode("utf-8")
    elif not binary and isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    written = w.write(data)
    # Some writers return None.
    return len(data) if written is None else written


class Printer:
    """
    Writes every payload to an ordered list of destinations.

    For each destination the printer caches whether it supports rich
    (ANSI styled) text and whether it takes bytes or str. Both caches are
    rebuilt for the whole list every time the list changes.
    """

    def __init__(self, *writers: Any):
        self._lock = threading.Lock()
        self._writers: list[Any] = list(writers)
        self._rich: dict[int, bool] = {}
        self._binary: dict[int, bool] = {}
        self._refresh_flags()

    def _refresh_flags(self) -> None:
        self._rich = {i: supports_color(w) for i, w in enumerate(self._writers)}
        self._binary = {i: accepts_bytes(w) for i, w in enumerate(self._writers)}

    @property
    def writers(self) -> list[Any]:
        """A snapshot of the destinations."""
        with self._lock:
            return list(self._writers)

    @property
    def rich(self) -> dict[int, bool]:
        """A snapshot of the destination index to rich support mapping."""
        with self._lock:
            return dict(self._rich)

    def set_output(self, w: Any) -> None:
        """Replace all destinations with ``w``."""
        with self._lock:
            self._writers = [w]
            self._refresh_flags()

    def add_output(self, *writers: Any) -> None:
        """Append one or more destinations."""
        with self._lock:
            self._writers.extend(writers)
            self._refresh_flags()

    def refresh(self) -> None:
        """Recompute the capability flags, e.g. after toggling colors."""
        with self._lock:
            self._refresh_flags()

    def write(self, data: str | bytes) -> int:
        """
        Write ``data`` to every destination.

        All destinations are attempted even when one fails; failures are
        raised afterwards as a single ``OutputError``.

        Returns:
            The largest number of bytes/characters written to one destination
        """
        if not data:
            return 0

        with self._lock:
            return self._fan_out(lambda i: data)

    def write_rich(self, text: str, color_code: int, *options: RichOption, suffix: str = "") -> int:
        """
        Write ``text`` styled to rich destinations and plain to the others.

        ``suffix`` is appended unstyled, so a full line goes out as a
        single write per destination. The styled text is rendered at most
        once per call.
        """
        plain = text + suffix
        styled = None

        def payload(i: int) -> str:
            nonlocal styled
            if not self._rich.get(i):
                return plain
            if styled is None:
                styled = rich_text(text, color_code, *options) + suffix
            return styled

        with self._lock:
            return self._fan_out(payload)

    def _fan_out(self, payload: Callable[[int], str | bytes]) -> int:
        errors = []
        n = 0
        for i, w in enumerate(self._writers):
            try:
                written = _write_one(w, payload(i), self._binary.get(i, False))
            except Exception as e:
                errors.append(e)
                continue
            n = max(n, written)

        if errors:
            raise OutputError(errors, written=n) from errors[-1]
        return n

    def write_string(self, s: str) -> int:
        return self.write(s)

    def print(self, v: Any) -> int:
        """Write the string form of ``v``."""
        return self.write(_to_text(v))

    def println(self, v: Any) -> int:
        """Write the string form of ``v`` followed by a new line."""
        return self.write(_to_text(v) + "\n")

    def printf(self, format: str, *args: Any) -> int:
        """Write ``format % args``, or ``format`` verbatim without args."""
        if not args:
            return self.write(format)
        return self.write(format % args)

    def flush(self) -> None:
        for w in self.writers:
            flush = getattr(w, "flush", None)
            if callable(flush):
                flush()

    def terminal(self) -> "Printer | None":
        """A new printer over the terminal destinations, or None if there are none."""
        terminals = [w for w in self.writers if is_terminal(w)]
        if not terminals:
            return None
        return Printer(*terminals)

    def terminal_or_stdout(self) -> Any:
        return self.terminal() or sys.stdout

    def terminal_or_stderr(self) -> Any:
        return self.terminal() or sys.stderr

    def scan(self, stream: Any) -> Callable[[], None]:
        """
        Copy each non-empty line of ``stream`` to the destinations.

        Reading happens on a daemon thread until the stream ends or the
        returned cancel function is called. Cancelling is idempotent.
        """
        from .scan import Scanner

        return Scanner(stream, self.write).start()

    def clone(self) -> "Printer":
        """
        A new printer over the same destinations.

        Destinations exposing ``clone()`` are cloned as well.
        """
        writers = []
        for w in self.writers:
            clone = getattr(w, "clone", None)
            writers.append(clone() if callable(clone) else w)
        return Printer(*writers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._writers)

    def __repr__(self) -> str:
        return f"Printer(writers={len(self)})"


def _to_text(v: Any) -> str:
    if v is None:
        return "<nil>"
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).decode("utf-8", errors="replace")
    return str(v)


def write_rich(w: Any, text: str, color_code: int, *options: RichOption, suffix: str = "") -> int:
    """
    ``Printer.write_rich`` for any destination.

    A Printer checks its own destinations; any other writer is checked
    directly.
    """
    if isinstance(w, Printer):
        return w.write_rich(text, color_code, *options, suffix=suffix)

    if supports_color(w):
        text = rich_text(text, color_code, *options)
    return _write_single(w, text + suffix)


def write_to(w: Any, data: str | bytes) -> int:
    """Write ``data`` to a Printer or to a single destination."""
    if isinstance(w, Printer):
        return w.write(data)
    return _write_single(w, data)


def _write_single(w: Any, data: str | bytes) -> int:
    try:
        return _write_one(w, data, accepts_bytes(w))
    except Exception as e:
        raise OutputError([e]) from e
