"""Exception types for shellbase."""

from __future__ import annotations


class ShellBaseError(Exception):
    """Base exception for shellbase."""


class ParseError(ShellBaseError, ValueError):
    """Raised when an input line cannot be split into words."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class HandlerFault(ShellBaseError):
    """Raised when a command handler fails."""

    def __init__(self, command: str, error: BaseException) -> None:
        super().__init__(f"{command}: {error}" if command else str(error))
        self.command = command
        self.error = error


class ConfigurationError(ShellBaseError):
    """Base exception for construction and startup validation errors."""


class RcFileError(ConfigurationError):
    """Raised when an existing rc file cannot be read."""
