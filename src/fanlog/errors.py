"""
Custom exceptions for the fanlog package.
"""


class FanlogError(Exception):
    """Base exception for all fanlog errors."""

    pass


class UnsupportedIntegrationError(FanlogError, TypeError):
    """Raised when an external logger matches none of the supported shapes."""

    def __init__(self, logger: object):
        self.logger = logger
        super().__init__(
            f"Unsupported logger integration: {type(logger).__name__}. "
            "Expected a structured logger (logging.Logger, structlog), "
            "a leveled printer (print/println/error/warn/info/debug) "
            "or a minimal printer (printf/print/println)"
        )


class UnknownFormatterError(FanlogError, KeyError):
    """Raised when selecting a formatter name that was never registered."""

    def __init__(self, name: str, available: list = None):
        self.name = name
        self.available = available or []

        if available:
            message = f"Unknown formatter: {name}. Registered formatters: {', '.join(available)}"
        else:
            message = f"Unknown formatter: {name}"

        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise.
        return self.args[0]


class LevelRegistrationError(FanlogError, ValueError):
    """Raised when a custom level collides with the built-in range."""

    def __init__(self, value: int, minimum: int):
        self.value = value
        super().__init__(f"Custom level {value} must be greater than {minimum - 1}")


class OutputError(FanlogError, OSError):
    """
    Raised after a fan-out write when at least one destination failed.

    Every destination was still attempted. ``error`` is the last failure,
    ``errors`` holds all of them and ``written`` the largest count written.
    """

    def __init__(self, errors: list, written: int = 0):
        self.errors = list(errors)
        self.error = self.errors[-1] if self.errors else None
        self.written = written

        if len(self.errors) > 1:
            message = f"{len(self.errors)} outputs failed, last error: {self.error}"
        else:
            message = f"Output failed: {self.error}"

        super().__init__(message)


class UnknownLevelError(FanlogError, KeyError):
    """Raised when changing the tag of a level that has no metadata."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Unknown level: {value}")

    def __str__(self) -> str:
        return self.args[0]
