from __future__ import annotations

import traceback
from collections.abc import Callable, Mapping
from typing import Any, Self, TypedDict

from .serialization import AglaErrorPayload, dumps, format_timestamp
from .severity import ErrorSeverity

AglaErrorContext = Mapping[str, Any]

MISSING_CAUSE_MESSAGE = "undefined"

_OPTION_KEYS = frozenset({"code", "severity", "timestamp", "context"})


class AglaErrorOptions(TypedDict, total=False):
    code: str
    severity: ErrorSeverity
    timestamp: Any
    context: AglaErrorContext


def _split_options(
    options: Mapping[str, Any] | None,
) -> Mapping[str, Any]:
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise TypeError(
            f"options must be a mapping or None, got {type(options).__name__}"
        )
    if _OPTION_KEYS.intersection(options.keys()):
        return options
    # Legacy calling convention: the whole mapping is the context.
    return {"context": options}


def _read(cause: object, key: str) -> Any:
    if isinstance(cause, Mapping):
        return cause.get(key)
    return getattr(cause, key, None)


def _cause_message(cause: object) -> str | None:
    raw = _read(cause, "message")
    if raw is None and isinstance(cause, BaseException):
        raw = str(cause)
    return None if raw is None else str(raw)


def _cause_snapshot(cause: object, message: str | None) -> dict[str, Any]:
    if isinstance(cause, AglaError):
        stack: str | None = cause.stack
    elif isinstance(cause, BaseException):
        stack = "".join(traceback.format_exception(cause))
    else:
        return {
            "name": _read(cause, "name"),
            "message": message,
            "stack": _read(cause, "stack"),
        }
    return {"name": type(cause).__name__, "message": message, "stack": stack}


def _new_error(cls: type[AglaError], message: str) -> AglaError:
    return BaseException.__new__(cls, message)


class AglaError(Exception):
    """Structured error value that accumulates its causal history.

    Attributes:
        error_type: Caller-supplied classification, fixed at construction.
        message: Human-readable message, extended by every ``chain`` call.
        code: Optional stable identifier.
        severity: Optional severity; stored as given, never validated.
        timestamp: Optional date-like value; stored as given.
        context: Optional diagnostic mapping, merged by ``chain``.

    ``chain`` mutates the instance in place. Concurrent chaining of one
    instance must be serialized by the caller.
    """

    def __init__(
        self,
        error_type: str,
        message: str,
        options: AglaErrorOptions | AglaErrorContext | None = None,
        *,
        code: str | None = None,
        severity: ErrorSeverity | None = None,
        timestamp: Any = None,
        context: AglaErrorContext | None = None,
        on_chain: Callable[[AglaError], None] | None = None,
    ) -> None:
        super().__init__(message)
        opts = _split_options(options)
        self.message = message
        self._error_type = error_type
        self._code = code if code is not None else opts.get("code")
        self._severity = severity if severity is not None else opts.get("severity")
        self._timestamp = timestamp if timestamp is not None else opts.get("timestamp")
        self._context = context if context is not None else opts.get("context")
        self._on_chain = on_chain
        self._causes: list[str] = []
        frames = traceback.format_stack()[:-1]
        self._stack = f"{self.name}: {message}\n" + "".join(frames)

    @property
    def error_type(self) -> str:
        return self._error_type

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def severity(self) -> ErrorSeverity | None:
        return self._severity

    @property
    def timestamp(self) -> Any:
        return self._timestamp

    @property
    def context(self) -> AglaErrorContext | None:
        return self._context

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def stack(self) -> str:
        return self._stack

    @property
    def causes(self) -> tuple[str, ...]:
        """Cause fragments in the order they were chained."""
        return tuple(self._causes)

    def chain(self, cause: object) -> Self:
        """Record *cause* on this error and return the same instance.

        Appends ``" (caused by: <message>)"`` to the current message and merges
        ``cause``/``originalError`` into the context, overwriting any earlier
        values of those two keys. Causes without a message contribute the
        token ``undefined``.
        """
        if cause is None:
            raise InvalidCauseError(context={"errorType": self._error_type})

        message = _cause_message(cause)
        fragment = MISSING_CAUSE_MESSAGE if message is None else message
        self._causes.append(fragment)
        self.message = f"{self.message} (caused by: {fragment})"
        self._context = {
            **(self._context or {}),
            "cause": fragment,
            "originalError": _cause_snapshot(cause, message),
        }
        if self._on_chain is not None:
            self._on_chain(self)
        return self

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"errorType": self._error_type, "message": self.message}
        if self._code is not None:
            data["code"] = self._code
        if self._severity is not None:
            data["severity"] = self._severity
        if self._timestamp is not None:
            data["timestamp"] = format_timestamp(self._timestamp)
        if self._context is not None:
            data["context"] = self._context
        return data

    def to_string(self) -> str:
        text = f"{self._error_type}: {self.message}"
        if self._context is not None:
            text = f"{text} {dumps(self._context)}"
        return text

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.name}({self._error_type!r}, {self.message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        # args only hold the message, so rebuild from the instance state.
        state = {**self.__dict__, "_causes": list(self._causes)}
        return _new_error, (type(self), self.message), state

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Self:
        """Rebuild an error from a ``to_dict`` snapshot or its decoded JSON."""
        data = AglaErrorPayload.model_validate(payload)
        return cls(
            data.error_type,
            data.message,
            code=data.code,
            severity=data.parsed_severity(),
            timestamp=data.parsed_timestamp(),
            context=data.context,
        )


class InvalidCauseError(AglaError, ValueError):
    """Raised by ``chain`` when the cause is None."""

    def __init__(
        self,
        message: str = "Cannot chain a None cause",
        *,
        context: AglaErrorContext | None = None,
    ) -> None:
        super().__init__(
            "InvalidCause",
            message,
            code="AGLA_INVALID_CAUSE",
            severity=ErrorSeverity.ERROR,
            context=context,
        )


class InvalidContextError(AglaError, TypeError):
    """Raised when a value cannot be used as an error context."""

    def __init__(
        self,
        message: str = "Context must be a mapping",
        *,
        context: AglaErrorContext | None = None,
    ) -> None:
        super().__init__(
            "InvalidContext",
            message,
            code="AGLA_INVALID_CONTEXT",
            severity=ErrorSeverity.ERROR,
            context=context,
        )
