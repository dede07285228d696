"""
Log levels and the process-wide level metadata table.

Gating: a record at level ``L`` is emitted when the logger's level is
``>= L``. ``FATAL`` is out of band, it is always emitted and then the
process exits.
"""

import threading
from dataclasses import dataclass, field, replace
from enum import IntEnum

from . import colors
from .colors import RichOption
from .errors import LevelRegistrationError, UnknownLevelError


class Level(IntEnum):
    """The built-in levels."""

    DISABLE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5


@dataclass(frozen=True)
class LevelMetadata:
    """Display information for a level."""

    name: str
    title: str
    color_code: int
    style: tuple[RichOption, ...] = ()
    alternative_names: tuple[str, ...] = field(default_factory=tuple)

    def text(self, enable_color: bool) -> str:
        """The level tag, styled when ``enable_color`` is set."""
        if not enable_color:
            return self.title
        return colors.rich_text(self.title, self.color_code, *self.style)

    def matches(self, name: str) -> bool:
        return name == self.name or name in self.alternative_names


def _builtin_levels() -> dict[int, LevelMetadata]:
    return {
        Level.FATAL: LevelMetadata("fatal", "[FTAL]", colors.RED, (RichOption.BACKGROUND,)),
        Level.ERROR: LevelMetadata("error", "[ERRO]", colors.RED),
        Level.WARN: LevelMetadata("warn", "[WARN]", colors.MAGENTA, alternative_names=("warning",)),
        Level.INFO: LevelMetadata("info", "[INFO]", colors.CYAN),
        Level.DEBUG: LevelMetadata("debug", "[DBUG]", colors.YELLOW),
    }


class LevelTable:
    """
    Registry of level metadata keyed by level value.

    One instance exists per process (``levels``). Custom levels are added
    above the built-in range; ``reset`` drops them and restores the
    built-in tags.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[int, LevelMetadata] = _builtin_levels()

    def reset(self) -> None:
        """Forget custom levels and restore the built-in titles and colors."""
        with self._lock:
            self._table = _builtin_levels()

    def register(self, value: int, metadata: LevelMetadata) -> int:
        """
        Register display metadata for a custom level.

        Args:
            value: Level value, must be above ``Level.DEBUG``
            metadata: Name, tag, color and style of the level

        Returns:
            The level value, for use with ``Logger.log``
        """
        if value <= Level.DEBUG:
            raise LevelRegistrationError(value, Level.DEBUG + 1)
        with self._lock:
            self._table[value] = metadata
        return value

    def set_text(self, value: int, title: str, color_code: int, *style: RichOption) -> LevelMetadata:
        """
        Replace the tag and color of a registered level, built-in or custom.

        Names and aliases are kept, so parsing is unaffected.

        Raises:
            UnknownLevelError: ``value`` has no metadata
        """
        with self._lock:
            metadata = self._table.get(value)
            if metadata is None:
                raise UnknownLevelError(value)
            metadata = replace(metadata, title=title, color_code=color_code, style=tuple(style))
            self._table[value] = metadata
        return metadata

    def get(self, value: int) -> LevelMetadata | None:
        with self._lock:
            return self._table.get(value)

    def parse(self, name: "str | int") -> int:
        """
        Resolve a level name, case-sensitive. Unknown names give ``DISABLE``.
        """
        if isinstance(name, int):
            return name
        with self._lock:
            for value, metadata in self._table.items():
                if metadata.matches(name):
                    return value
        return Level.DISABLE

    def __contains__(self, value: int) -> bool:
        with self._lock:
            return value in self._table

    def __iter__(self):
        with self._lock:
            return iter(sorted(self._table.items()))


levels = LevelTable()


def parse_level(name: "str | int") -> int:
    """Resolve a level name through the process-wide table."""
    return levels.parse(name)


def register_level(value: int, metadata: LevelMetadata) -> int:
    """Register a custom level in the process-wide table."""
    return levels.register(value, metadata)


def set_level_text(level: "str | int", title: str, color_code: int, *style: RichOption) -> LevelMetadata:
    """
    Change the tag of a level in the process-wide table.

    Usage:
        set_level_text("error", "|ERROR|", colors.RED, RichOption.BOLD)
    """
    return levels.set_text(levels.parse(level), title, color_code, *style)


def level_name(value: int) -> str:
    """Display name for a level value. Falls back to the numeric string."""
    if value == Level.DISABLE:
        return "disable"
    metadata = levels.get(value)
    return metadata.name if metadata else str(value)
