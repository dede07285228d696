"""
The Logger: level gating, handler chain, formatting and per-level routing.
"""

import sys
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from .children import ChildRegistry
from .config import DEFAULT_TIME_FORMAT
from .errors import OutputError, UnknownFormatterError
from .formatters import Formatter, JSONFormatter
from .handlers import Handler
from .integration import integrate
from .levels import Level, levels, parse_level
from .printer import Printer, write_rich, write_to
from .record import Fields, Log, RecordPool, get_stacktrace
from .scan import Scanner

_log = structlog.get_logger("fanlog")


def split_args_fields(values: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[list[Any], Fields]:
    """
    Separate message arguments from structured fields.

    ``Fields`` values are merged into the fields, later keys winning, and
    keyword arguments are merged last. Everything else stays a message
    argument, in order.
    """
    args = []
    fields = Fields()
    for value in values:
        if isinstance(value, Fields):
            fields.update(value)
        else:
            args.append(value)
    fields.update(kwargs)
    return args, fields


def _sprint(args: list[Any]) -> str:
    return " ".join(str(a) for a in args)


class Logger:
    """
    A leveled logger writing to a shared ``Printer``.

    Usage:
        logger = Logger()
        logger.set_level("debug")
        logger.info("user logged in", user_id=42)
        db = logger.child("db")
        db.warn("slow query", Fields(ms=812))

    Records at a level above the logger's level are dropped. ``fatal``
    always logs and then exits the process.
    """

    def __init__(
        self,
        output: Any = None,
        level: str | int = Level.INFO,
        prefix: str = "",
        time_format: str = DEFAULT_TIME_FORMAT,
        stacktrace_limit: int = 0,
        new_line: bool = True,
    ):
        """
        Initialize a logger.

        Args:
            output: Destination or Printer (default: sys.stdout)
            level: Level value or name
            prefix: Text written before every message
            time_format: strftime format, empty disables timestamps
            stacktrace_limit: Max frames on debug records (0 all, negative none)
            new_line: Whether leveled and Print calls end with a new line
        """
        self._lock = threading.RLock()
        self.prefix = prefix
        self.level = parse_level(level)
        self.time_format = time_format
        self.stacktrace_limit = stacktrace_limit
        self.new_line = new_line

        if isinstance(output, Printer):
            self.printer = output
        else:
            self.printer = Printer(sys.stdout if output is None else output)

        self.level_output: dict[int, Any] = {}
        self._formatters: dict[str, Formatter] = {"json": JSONFormatter()}
        self._formatter: Formatter | None = None
        self.level_formatter: dict[int, Formatter] = {}
        self._handlers: list[Handler] = []
        self._pool = RecordPool(self)
        self._children = ChildRegistry()

    # ── Configuration ─────────────────────────────────────────────

    def set_output(self, w: Any) -> "Logger":
        """Replace the destinations of the (shared) Printer with ``w``."""
        self.printer.set_output(w)
        return self

    def add_output(self, *writers: Any) -> "Logger":
        """
        Add destinations to the (shared) Printer.

        Rich text is only written to the destinations that support it.
        """
        self.printer.add_output(*writers)
        return self

    def set_prefix(self, prefix: str) -> "Logger":
        with self._lock:
            self.prefix = prefix
        return self

    def set_child_prefix(self, prefix: str) -> "Logger":
        """
        Append ``prefix`` to the current prefix instead of replacing it.

        ``": "`` is added to ``prefix`` when missing, and a space separates
        it from a non-empty current prefix.
        """
        if not prefix:
            return self

        if not prefix.endswith(": "):
            prefix += ": "

        with self._lock:
            if self.prefix and not self.prefix.endswith(" "):
                self.prefix += " "
            self.prefix += prefix
        return self

    def set_time_format(self, time_format: str) -> "Logger":
        """Set the strftime format for timestamps; empty disables them."""
        with self._lock:
            self.time_format = time_format
        return self

    def set_stacktrace_limit(self, limit: int) -> "Logger":
        """
        Limit stack trace entries on debug records.

        Zero keeps all entries, a negative value disables the stack trace.
        """
        with self._lock:
            self.stacktrace_limit = limit
        return self

    def set_new_line(self, enabled: bool) -> "Logger":
        """Whether Print and leveled calls end with a new line. Println always does."""
        with self._lock:
            self.new_line = bool(enabled)
        return self

    def disable_new_line(self) -> "Logger":
        """Stop ending Print and leveled calls with a new line. Println still does."""
        return self.set_new_line(False)

    def set_level(self, level: str | int) -> "Logger":
        """
        Set the level from a name or value.

        Names: "disable", "fatal", "error", "warn" ("warning"), "info",
        "debug" and any registered custom level. Unknown names disable
        the logger.
        """
        with self._lock:
            self.level = parse_level(level)
        return self

    def register_formatter(self, formatter: Formatter) -> "Logger":
        with self._lock:
            self._formatters[formatter.name] = formatter
        return self

    def _lookup_formatter(self, name: str) -> Formatter:
        with self._lock:
            formatter = self._formatters.get(name)
            if formatter is None:
                raise UnknownFormatterError(name, sorted(self._formatters))
            return formatter

    def set_format(self, formatter: str, *opts: Any) -> "Logger":
        """Use the registered ``formatter`` for all levels."""
        f = self._lookup_formatter(formatter).options(*opts)
        with self._lock:
            self._formatter = f
        return self

    def set_level_format(self, level: str | int, formatter: str, *opts: Any) -> "Logger":
        """Use the registered ``formatter`` for ``level`` only."""
        f = self._lookup_formatter(formatter).options(*opts)
        with self._lock:
            self.level_formatter[parse_level(level)] = f
        return self

    def set_level_output(self, level: str | int, w: Any) -> "Logger":
        """Send records of ``level`` to ``w`` instead of the Printer."""
        with self._lock:
            self.level_output[parse_level(level)] = w
        return self

    def get_level_output(self, level: str | int) -> Any:
        """The destination for ``level``: its override, else the Printer."""
        with self._lock:
            return self._output(parse_level(level))

    def _output(self, level: int) -> Any:
        w = self.level_output.get(level)
        return self.printer if w is None else w

    def _active_formatter(self, level: int) -> Formatter | None:
        return self.level_formatter.get(level, self._formatter)

    # ── Handlers ──────────────────────────────────────────────────

    def handle(self, handler: Handler) -> "Logger":
        """
        Add a handler to the chain.

        Handlers run in registration order; the first one returning True
        stops the chain and the record is not written by the logger.
        """
        with self._lock:
            self._handlers.append(handler)
        return self

    def install(self, logger: Any) -> "Logger":
        """
        Forward every record to an external logger.

        Accepts stdlib ``logging`` loggers, structlog loggers, and objects
        with print/println/error/warn/info/debug or printf/print/println
        methods.

        Raises:
            UnsupportedIntegrationError: ``logger`` has none of these shapes
        """
        return self.handle(integrate(logger))

    def _handled(self, log: Log) -> bool:
        # The chain is shared with clones; iterate a snapshot.
        with self._lock:
            handlers = tuple(self._handlers)
        for handler in handlers:
            if handler(log):
                return True
        return False

    # ── Print path ────────────────────────────────────────────────

    def _acquire(self, level: int, message: str, new_line: bool, fields: Fields | None) -> Log:
        log = self._pool.acquire()
        log.new_line = new_line
        if self.time_format:
            log.time = datetime.now()
            log.timestamp = int(log.time.timestamp())
        log.level = level
        log.message = message
        if fields:
            log.fields = fields
        return log

    def _print(self, level: int, message: str, new_line: bool, fields: Fields | None = None) -> None:
        if level != Level.FATAL and self.level < level:
            return

        log = self._acquire(level, message, new_line, fields)
        try:
            if level == Level.DEBUG:
                log.stacktrace = get_stacktrace(self.stacktrace_limit)
            if not self._handled(log):
                self._format(log)
        except OutputError as e:
            _log.warning("output_write_failed", error=str(e), level=level)
        finally:
            self._pool.release(log)
            # Fatal exits even when a handler or formatter raised.
            if level == Level.FATAL:
                sys.exit(1)

    def _format(self, log: Log) -> None:
        with self._lock:
            w = self._output(log.level)

            formatter = self._active_formatter(log.level)
            if formatter is not None and formatter.format(w, log):
                return

            parts = []
            if t := log.format_time():
                parts.append(t + " ")
            parts.append(self.prefix)
            parts.append(log.message)
            for k, v in log.fields.items():
                parts.append(f" {k}={v}")
            if log.new_line:
                parts.append("\n")
            line = "".join(parts)

            metadata = levels.get(log.level) if log.level != Level.DISABLE else None
            if metadata is None:
                write_to(w, line)
            else:
                write_rich(w, metadata.title, metadata.color_code, *metadata.style, suffix=" " + line)

    def print(self, *v: Any) -> None:
        """Print a message without level or colors."""
        self._print(Level.DISABLE, _sprint(list(v)), self.new_line)

    def printf(self, format: str, *args: Any) -> None:
        """Print ``format % args`` without level or colors."""
        self._print(Level.DISABLE, format % args if args else format, self.new_line)

    def println(self, *v: Any) -> None:
        """Print a message without level or colors, always ending with a new line."""
        self._print(Level.DISABLE, _sprint(list(v)), True)

    def log(self, level: int, /, *v: Any, **fields: Any) -> None:
        """
        Log at any level, including custom registered levels.

        ``Fields`` arguments and keyword arguments become the record fields.
        """
        if level == Level.FATAL or self.level >= level:
            args, merged = split_args_fields(v, fields)
            self._print(level, _sprint(args), self.new_line, merged)

    def logf(self, level: int, format: str, /, *args: Any, **fields: Any) -> None:
        """Like ``log`` with a %-style format string."""
        if level == Level.FATAL or self.level >= level:
            arguments, merged = split_args_fields(args, fields)
            message = format % tuple(arguments) if arguments else format
            self._print(level, message, self.new_line, merged)

    def fatal(self, *v: Any, **fields: Any) -> None:
        """Log at fatal level, whatever the logger's level, then exit with status 1."""
        self.log(Level.FATAL, *v, **fields)

    def fatalf(self, format: str, /, *args: Any, **fields: Any) -> None:
        self.logf(Level.FATAL, format, *args, **fields)

    def error(self, *v: Any, **fields: Any) -> None:
        """Log when the level is error, warn, info or debug."""
        self.log(Level.ERROR, *v, **fields)

    def errorf(self, format: str, /, *args: Any, **fields: Any) -> None:
        self.logf(Level.ERROR, format, *args, **fields)

    def warn(self, *v: Any, **fields: Any) -> None:
        """Log when the level is warn, info or debug."""
        self.log(Level.WARN, *v, **fields)

    def warnf(self, format: str, /, *args: Any, **fields: Any) -> None:
        self.logf(Level.WARN, format, *args, **fields)

    def warningf(self, format: str, /, *args: Any, **fields: Any) -> None:
        """Same as ``warnf``."""
        self.warnf(format, *args, **fields)

    def info(self, *v: Any, **fields: Any) -> None:
        """Log when the level is info or debug."""
        self.log(Level.INFO, *v, **fields)

    def infof(self, format: str, /, *args: Any, **fields: Any) -> None:
        self.logf(Level.INFO, format, *args, **fields)

    def debug(self, *v: Any, **fields: Any) -> None:
        """Log when the level is debug, with a stack trace on the record."""
        self.log(Level.DEBUG, *v, **fields)

    def debugf(self, format: str, /, *args: Any, **fields: Any) -> None:
        self.logf(Level.DEBUG, format, *args, **fields)

    # ── Streams ───────────────────────────────────────────────────

    def scan(self, stream: Any) -> Callable[[], None]:
        """
        Copy every line of ``stream`` to the Printer, in the background.

        Lines are prefixed with the current time when a time format is set.
        Returns a cancel function that may be called any number of times.
        """

        def prefix() -> str:
            time_format = self.time_format
            if not time_format:
                return ""
            return datetime.now().strftime(time_format) + " "

        return Scanner(stream, self.printer.write, prefix).start()

    # ── Children ──────────────────────────────────────────────────

    def clone(self) -> "Logger":
        """
        A copy of this logger.

        The Printer and the handler chain are shared; prefix, level, time
        format, formatters and level outputs are copied. The clone has no
        children.
        """
        with self._lock:
            clone = Logger(
                output=self.printer,
                level=self.level,
                prefix=self.prefix,
                time_format=self.time_format,
                stacktrace_limit=self.stacktrace_limit,
                new_line=self.new_line,
            )
            clone.level_output = dict(self.level_output)
            clone._formatters = dict(self._formatters)
            clone._formatter = self._formatter
            clone.level_formatter = dict(self.level_formatter)
            clone._handlers = self._handlers
        return clone

    def child(self, key: Any) -> "Logger":
        """
        Get or create the child logger registered under ``key``.

        A string key (or a key with its own ``__str__``) is appended to
        the prefix, e.g. ``logger.child("db")`` logs with ``"db: "``.
        """
        return self._children.get_or_add(key, self)

    def last_child(self) -> "Logger | None":
        """The most recently registered surviving child."""
        return self._children.last()

    def remove_child(self, key: Any) -> bool:
        """Remove a child. Returns True if it existed."""
        return self._children.remove(key)

    def clear_children(self) -> None:
        self._children.clear()

    def child_count(self) -> int:
        return self._children.count()

    def list_child_keys(self) -> list[Any]:
        return self._children.keys()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(prefix={self.prefix!r}, level={self.level!r})"
