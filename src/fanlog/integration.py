"""
Adapters that route records to external loggers.

``probe`` classifies an external logger into one of three shapes and
``integrate`` builds the matching handler:

* STRUCTURED: stdlib ``logging`` loggers and structlog bound loggers.
  Levels and fields are translated.
* LEVELED: objects with print/println/error/warn/info/debug methods,
  including fanlog's own ``Logger``.
* MINIMAL: objects with printf/print/println methods only.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from .errors import UnsupportedIntegrationError
from .handlers import Handler
from .levels import Level
from .record import Log


class AdapterKind(Enum):
    STRUCTURED = "structured"
    LEVELED = "leveled"
    MINIMAL = "minimal"


_LEVELED_METHODS = ("print", "println", "error", "warn", "info", "debug")
_MINIMAL_METHODS = ("printf", "print", "println")

# fanlog level to stdlib logging level. Anything else maps to DEBUG.
_STD_LEVELS = {
    Level.FATAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
}

# Attributes of logging.LogRecord; passing any of them in ``extra`` raises.
LOGGING_INTERNAL_FIELDS = (
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "message",
    "module",
    "msecs",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
)
RESERVED_FIELDS = frozenset(LOGGING_INTERNAL_FIELDS)

# Parameter names of structlog's BoundLogger.log.
STRUCTLOG_RESERVED_FIELDS = frozenset(("event", "level"))


def _has_methods(obj: Any, names: tuple[str, ...]) -> bool:
    return all(callable(getattr(obj, name, None)) for name in names)


def probe(logger: Any) -> AdapterKind | None:
    """Classify ``logger``, or None when no adapter supports it."""
    if isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        return AdapterKind.STRUCTURED
    if _has_methods(logger, ("log", "bind")):
        return AdapterKind.STRUCTURED
    if _has_methods(logger, _LEVELED_METHODS):
        return AdapterKind.LEVELED
    if _has_methods(logger, _MINIMAL_METHODS):
        return AdapterKind.MINIMAL
    return None


def std_level(level: int) -> int:
    """Nearest stdlib logging level for a fanlog level."""
    return _STD_LEVELS.get(level, logging.DEBUG)


def sanitize_extra(fields: dict[str, Any], reserved: frozenset[str] = RESERVED_FIELDS) -> dict[str, Any]:
    """Prefix ``reserved`` keys with ``x_``. Defaults to the ``LogRecord`` attributes."""
    return {f"x_{k}" if k in reserved else k: v for k, v in fields.items()}


def structured_handler(logger: Any) -> Handler:
    """Handler for stdlib logging and structlog loggers."""
    is_stdlib = isinstance(logger, (logging.Logger, logging.LoggerAdapter))

    def handle(log: Log) -> bool:
        level = std_level(log.level)
        if is_stdlib:
            if log.fields:
                logger.log(level, log.message, extra=sanitize_extra(log.fields))
            else:
                logger.log(level, log.message)
        else:
            logger.log(level, log.message, **sanitize_extra(log.fields, STRUCTLOG_RESERVED_FIELDS))
        return True

    return handle


def _unleveled(logger: Any, log: Log) -> Callable[..., Any]:
    # Print/Println calls, or levels the external logger does not know.
    if log.new_line:
        return logger.println
    return logger.print


def leveled_handler(logger: Any) -> Handler:
    """Handler for loggers with print/println/error/warn/info/debug methods."""
    methods = {
        Level.ERROR: logger.error,
        Level.WARN: logger.warn,
        Level.INFO: logger.info,
        Level.DEBUG: logger.debug,
    }

    def handle(log: Log) -> bool:
        method = methods.get(log.level) or _unleveled(logger, log)
        method(log.message)
        return True

    return handle


def minimal_handler(logger: Any) -> Handler:
    """Handler for loggers with printf/print/println methods, no levels."""

    def handle(log: Log) -> bool:
        _unleveled(logger, log)(log.message)
        return True

    return handle


_FACTORIES: dict[AdapterKind, Callable[[Any], Handler]] = {
    AdapterKind.STRUCTURED: structured_handler,
    AdapterKind.LEVELED: leveled_handler,
    AdapterKind.MINIMAL: minimal_handler,
}


def integrate(logger: Any) -> Handler:
    """
    Build the handler that forwards records to ``logger``.

    Raises:
        UnsupportedIntegrationError: ``logger`` matches no supported shape
    """
    kind = probe(logger)
    if kind is None:
        raise UnsupportedIntegrationError(logger)
    return _FACTORIES[kind](logger)
