"""Structured, chainable and serializable error values."""

from .context import guard_agla_error_context, is_valid_agla_error_context
from .errors import (
    AglaError,
    AglaErrorContext,
    AglaErrorOptions,
    InvalidCauseError,
    InvalidContextError,
)
from .severity import ErrorSeverity, is_valid_error_severity

__all__ = [
    "AglaError",
    "AglaErrorContext",
    "AglaErrorOptions",
    "ErrorSeverity",
    "InvalidCauseError",
    "InvalidContextError",
    "guard_agla_error_context",
    "is_valid_agla_error_context",
    "is_valid_error_severity",
]
