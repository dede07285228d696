"""
fanlog: leveled logging with fan-out output for Fenixflow applications.

Formats records (level, time, message, fields) and writes them to one or
more destinations, with pluggable formatters, per-level routing, child
loggers and adapters to external loggers.
"""

__version__ = "0.1.0"

from .children import ChildRegistry
from .colors import NOP_OUTPUT, NopOutput, RichOption
from .config import configure, get_config, reset_config
from .default import (
    DefaultLogger,
    add_output,
    child,
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    get_default,
    handle,
    info,
    infof,
    install,
    print,
    println,
    reset,
    scan,
    set_level,
    set_output,
    set_time_format,
    warn,
    warnf,
)
from .errors import (
    FanlogError,
    LevelRegistrationError,
    OutputError,
    UnknownFormatterError,
    UnknownLevelError,
    UnsupportedIntegrationError,
)
from .formatters import Formatter, JSONFormatter
from .handlers import Handler, json_handler
from .integration import AdapterKind, integrate, probe
from .levels import Level, LevelMetadata, LevelTable, parse_level, register_level, set_level_text
from .logger import Logger
from .printer import Printer
from .record import Fields, Frame, Log, RecordPool

__all__ = [
    "Logger",
    "Printer",
    "Level",
    "LevelMetadata",
    "Log",
    "Fields",
    "Frame",
    "RecordPool",
    "ChildRegistry",
    "Formatter",
    "JSONFormatter",
    "Handler",
    "json_handler",
    "AdapterKind",
    "integrate",
    "probe",
    "NopOutput",
    "NOP_OUTPUT",
    "RichOption",
    "LevelTable",
    "parse_level",
    "register_level",
    "set_level_text",
    "DefaultLogger",
    "get_default",
    "reset",
    "configure",
    "get_config",
    "reset_config",
    "FanlogError",
    "LevelRegistrationError",
    "OutputError",
    "UnknownFormatterError",
    "UnknownLevelError",
    "UnsupportedIntegrationError",
]
