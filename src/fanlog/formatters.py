"""
Named, swappable formatting strategies.

A formatter turns a record into output on a destination. When it returns
True the logger considers the record written; False falls back to the
default ``[LEVEL] time prefix message key=value`` composer.
"""

from abc import ABC, abstractmethod
from typing import Any

from structlog.processors import JSONRenderer

from .printer import write_to
from .record import Log


class Formatter(ABC):
    """
    Base class for formatters.

    Subclasses are registered by ``name`` on a logger and selected with
    ``Logger.set_format`` or ``Logger.set_level_format``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key of the formatter."""

    def options(self, *opts: Any) -> "Formatter":
        """
        Return a formatter configured with ``opts``.

        Implementations return a new instance so the registered one stays
        untouched. The default ignores the options.
        """
        return self

    @abstractmethod
    def format(self, dest: Any, log: Log) -> bool:
        """Write ``log`` to ``dest``. Return True if the record was written."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class JSONFormatter(Formatter):
    """
    Writes one JSON document per record.

    Options: an indent (int or whitespace string). Without one each record
    is a single JSON line.
    """

    def __init__(self, indent: int | str | None = None):
        self.indent = indent
        self._renderer = JSONRenderer(indent=indent, sort_keys=False)

    @property
    def name(self) -> str:
        return "json"

    def options(self, *opts: Any) -> "JSONFormatter":
        if not opts:
            return self
        return JSONFormatter(indent=opts[0] or None)

    def render(self, log: Log) -> str:
        return self._renderer(None, "", log.to_dict())

    def format(self, dest: Any, log: Log) -> bool:
        try:
            data = self.render(log)
        except (TypeError, ValueError):
            return False
        write_to(dest, data + "\n")
        return True
