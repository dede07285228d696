"""
Handlers intercept records before the default format and write step.

A handler receives the record and returns True when it fully handled it,
which stops the chain and suppresses the logger's own output. Handlers
run without the logger's lock held, so they may log through the same
logger.
"""

import threading
from collections.abc import Callable

from .formatters import JSONFormatter
from .printer import write_to
from .record import Log

Handler = Callable[[Log], bool]


def json_handler(indent: int | str | None = None) -> Handler:
    """
    A handler that writes every record as JSON to the logger's level output.

    Usage:
        logger.handle(json_handler(indent=2))
    """
    formatter = JSONFormatter(indent=indent)
    lock = threading.Lock()

    def handle(log: Log) -> bool:
        try:
            data = formatter.render(log)
        except (TypeError, ValueError):
            return False
        with lock:
            write_to(log.logger.get_level_output(log.level), data + "\n")
        return True

    return handle
