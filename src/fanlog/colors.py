"""
Rich text encoding and the per-destination color capability check.
"""

import sys
from enum import IntEnum
from typing import Any

from rich.color import Color, ColorSystem
from rich.console import Console
from rich.style import Style

from . import config

# Standard SGR foreground codes. Any code in 30-37 or 90-97 can be used
# when the destination supports rich text.
BLACK = 30
RED = 31
GREEN = 32
YELLOW = 33
BLUE = 34
MAGENTA = 35
CYAN = 36
WHITE = 37
GRAY = WHITE


class RichOption(IntEnum):
    """Style options for rich text formatting."""

    BACKGROUND = 0
    UNDERLINE = 1
    BOLD = 2


def _ansi_color(code: int) -> Color:
    # SGR 30-37 are palette 0-7, 90-97 the bright palette 8-15.
    if 90 <= code <= 97:
        return Color.from_ansi(code - 90 + 8)
    return Color.from_ansi(code - 30)


def rich_text(text: str, color_code: int, *options: RichOption) -> str:
    """Return ``text`` wrapped in ANSI escape codes for the color and options."""
    color = _ansi_color(color_code)
    style = Style(
        color=color,
        bgcolor=color if RichOption.BACKGROUND in options else None,
        underline=RichOption.UNDERLINE in options or None,
        bold=RichOption.BOLD in options or None,
    )
    return style.render(text, color_system=ColorSystem.STANDARD)


class NopOutput:
    """A destination that discards every write."""

    def write(self, data: Any) -> int:
        return len(data)

    def flush(self) -> None:
        pass

    def is_nop(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "NopOutput()"


NOP_OUTPUT = NopOutput()


def is_nop(w: Any) -> bool:
    """Whether ``w`` declares itself a no-op sink."""
    check = getattr(w, "is_nop", None)
    return bool(check()) if callable(check) else False


def is_terminal(w: Any) -> bool:
    """Whether ``w`` is attached to a terminal."""
    isatty = getattr(w, "isatty", None)
    if not callable(isatty):
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        # Closed or detached streams.
        return False


def supports_color(w: Any) -> bool:
    """
    Report whether rich text can be written to ``w``.

    True only for terminal destinations while colors are globally enabled.
    On Windows the console must also handle ANSI sequences natively.
    """
    if w is None or is_nop(w) or not is_terminal(w):
        return False

    if not config.colors_enabled():
        return False

    if sys.platform == "win32":
        console = Console(file=w)
        return console.color_system is not None and not console.legacy_windows

    return True
