"""
The process-wide default logger and the package-level logging functions.
"""

import threading
from collections.abc import Callable
from typing import Any, Optional

from .handlers import Handler
from .logger import Logger


class DefaultLogger:
    """
    Holder of the default ``Logger`` singleton.

    The logger is created on first use and replaced only by ``reset()``.
    """

    _instance: Optional[Logger] = None
    _lock = threading.Lock()

    @classmethod
    def instance(cls) -> Logger:
        """Get or create the default logger."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = _new_default()
        return cls._instance

    @classmethod
    def reset(cls) -> Logger:
        """Replace the default logger with a fresh one and return it."""
        with cls._lock:
            cls._instance = _new_default()
            return cls._instance


def _new_default() -> Logger:
    from .config import get_config

    config = get_config()
    return Logger(
        level=config["level"],
        time_format=config["time_format"],
        stacktrace_limit=config["stacktrace_limit"],
        new_line=config["new_line"],
    )


def get_default() -> Logger:
    return DefaultLogger.instance()


def reset() -> Logger:
    return DefaultLogger.reset()


def set_output(w: Any) -> None:
    """Replace the default logger's destinations with ``w``."""
    get_default().set_output(w)


def add_output(*writers: Any) -> None:
    """Add destinations to the default logger."""
    get_default().add_output(*writers)


def set_time_format(time_format: str) -> None:
    get_default().set_time_format(time_format)


def set_level(level: str | int) -> None:
    get_default().set_level(level)


def print(*v: Any) -> None:
    get_default().print(*v)


def println(*v: Any) -> None:
    get_default().println(*v)


def fatal(*v: Any, **fields: Any) -> None:
    get_default().fatal(*v, **fields)


def fatalf(format: str, /, *args: Any, **fields: Any) -> None:
    get_default().fatalf(format, *args, **fields)


def error(*v: Any, **fields: Any) -> None:
    get_default().error(*v, **fields)


def errorf(format: str, /, *args: Any, **fields: Any) -> None:
    get_default().errorf(format, *args, **fields)


def warn(*v: Any, **fields: Any) -> None:
    get_default().warn(*v, **fields)


def warnf(format: str, /, *args: Any, **fields: Any) -> None:
    get_default().warnf(format, *args, **fields)


def info(*v: Any, **fields: Any) -> None:
    get_default().info(*v, **fields)


def infof(format: str, /, *args: Any, **fields: Any) -> None:
    get_default().infof(format, *args, **fields)


def debug(*v: Any, **fields: Any) -> None:
    get_default().debug(*v, **fields)


def debugf(format: str, /, *args: Any, **fields: Any) -> None:
    get_default().debugf(format, *args, **fields)


def install(logger: Any) -> None:
    """Forward the default logger's records to an external logger."""
    get_default().install(logger)


def handle(handler: Handler) -> None:
    get_default().handle(handler)


def scan(stream: Any) -> Callable[[], None]:
    return get_default().scan(stream)


def child(key: Any) -> Logger:
    return get_default().child(key)
