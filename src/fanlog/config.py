"""
Configuration system for fanlog.

Supports environment variables, config files, and programmatic configuration.
"""

import json
import os
from pathlib import Path
from typing import Any

DEFAULT_TIME_FORMAT = "%Y/%m/%d %H:%M"

_DEFAULTS: dict[str, Any] = {
    "level": "info",
    "time_format": DEFAULT_TIME_FORMAT,
    "colors": True,
    "new_line": True,
    "stacktrace_limit": 0,
}

# Global configuration
_GLOBAL_CONFIG: dict[str, Any] = dict(_DEFAULTS)


def configure(
    level: str | None = None,
    time_format: str | None = None,
    colors: bool | None = None,
    new_line: bool | None = None,
    stacktrace_limit: int | None = None,
    config_file: str | Path | None = None,
    use_env: bool = True,
) -> None:
    """
    Configure global logging settings and apply them to the default logger.

    Args:
        level: Level name (disable, fatal, error, warn, info, debug)
        time_format: strftime format for timestamps, empty disables them
        colors: Whether rich text may be written to terminals
        new_line: Whether log calls end with a new line
        stacktrace_limit: Debug stack trace limit (0 unlimited, negative off)
        config_file: Path to JSON config file
        use_env: Whether to read from environment variables

    Only the default logger's Printer re-reads the color setting. Call
    ``refresh()`` on any other Printer created before the change.
    """
    # Load from config file if provided
    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            with open(config_path) as f:
                file_config = json.load(f)
                _GLOBAL_CONFIG.update(file_config)

    # Load from environment variables if enabled
    if use_env:
        env_config = _load_env_config()
        _GLOBAL_CONFIG.update(env_config)

    # Apply explicit arguments (highest priority)
    if level is not None:
        _GLOBAL_CONFIG["level"] = level
    if time_format is not None:
        _GLOBAL_CONFIG["time_format"] = time_format
    if colors is not None:
        _GLOBAL_CONFIG["colors"] = colors
    if new_line is not None:
        _GLOBAL_CONFIG["new_line"] = new_line
    if stacktrace_limit is not None:
        _GLOBAL_CONFIG["stacktrace_limit"] = stacktrace_limit

    _apply_to_default_logger()


def _load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}

    # FANLOG_LEVEL
    if level := os.getenv("FANLOG_LEVEL"):
        config["level"] = level

    # FANLOG_TIME_FORMAT, may be set to an empty string to disable timestamps
    time_format = os.getenv("FANLOG_TIME_FORMAT")
    if time_format is not None:
        config["time_format"] = time_format

    # FANLOG_COLORS
    if colors := os.getenv("FANLOG_COLORS"):
        config["colors"] = colors.lower() in ("true", "1", "yes")

    # NO_COLOR (https://no-color.org) wins over FANLOG_COLORS
    if os.getenv("NO_COLOR"):
        config["colors"] = False

    # FANLOG_NEW_LINE
    if new_line := os.getenv("FANLOG_NEW_LINE"):
        config["new_line"] = new_line.lower() in ("true", "1", "yes")

    # FANLOG_STACKTRACE_LIMIT
    if limit := os.getenv("FANLOG_STACKTRACE_LIMIT"):
        config["stacktrace_limit"] = int(limit)

    return config


def _apply_to_default_logger() -> None:
    from .default import DefaultLogger

    logger = DefaultLogger.instance()
    logger.set_level(_GLOBAL_CONFIG["level"])
    logger.set_time_format(_GLOBAL_CONFIG["time_format"])
    logger.set_stacktrace_limit(_GLOBAL_CONFIG["stacktrace_limit"])
    logger.set_new_line(_GLOBAL_CONFIG["new_line"])
    # Rich flags are cached per destination.
    logger.printer.refresh()


def colors_enabled() -> bool:
    """Whether rich text output is globally allowed."""
    return bool(_GLOBAL_CONFIG.get("colors", True))


def get_config() -> dict[str, Any]:
    """Get current global configuration."""
    return _GLOBAL_CONFIG.copy()


def reset_config() -> None:
    """Reset configuration to defaults."""
    _GLOBAL_CONFIG.clear()
    _GLOBAL_CONFIG.update(_DEFAULTS)
