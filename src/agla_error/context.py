from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard

from .errors import AglaErrorContext, InvalidContextError


def is_valid_agla_error_context(value: object) -> TypeGuard[AglaErrorContext]:
    """True for mappings (empty ones included); False for everything else."""
    return isinstance(value, Mapping) and not callable(value)


def guard_agla_error_context(value: object) -> AglaErrorContext:
    """Return *value* unchanged if it is a usable context, else raise.

    Raises:
        InvalidContextError: *value* is None, a primitive, a sequence or a
            callable.
    """
    if not is_valid_agla_error_context(value):
        raise InvalidContextError(
            f"Context must be a mapping, got {type(value).__name__}",
            context={"receivedType": type(value).__name__},
        )
    return value
