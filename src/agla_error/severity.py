from __future__ import annotations

from enum import Enum


class ErrorSeverity(str, Enum):
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def log_level(self) -> str:
        """Name of the matching loguru level."""
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    ErrorSeverity.FATAL: "CRITICAL",
    ErrorSeverity.ERROR: "ERROR",
    ErrorSeverity.WARNING: "WARNING",
    ErrorSeverity.INFO: "INFO",
}

_VALUES = frozenset(member.value for member in ErrorSeverity)


def is_valid_error_severity(value: object) -> bool:
    """Return True only for members of ErrorSeverity (or their exact values)."""
    if isinstance(value, ErrorSeverity):
        return True
    # Enum members hash by name, so plain strings are checked against values.
    return type(value) is str and value in _VALUES
