from __future__ import annotations

import asyncio
import functools
import inspect
import traceback
from collections.abc import Callable
from typing import Any, NoReturn, ParamSpec, TypeVar

from loguru import logger

from .errors import AglaError, AglaErrorContext
from .severity import ErrorSeverity

P = ParamSpec("P")
R = TypeVar("R")


def _format_tail(exc: BaseException, *, limit: int = 6) -> str:
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(tb[-limit:])


def log_and_wrap(
    exc: BaseException,
    error_cls: type[AglaError],
    error_type: str,
    message: str,
    *,
    context: AglaErrorContext | None = None,
    log=logger,  # loguru logger-like
) -> NoReturn:
    formatted_tb = _format_tail(exc)
    log.opt(exception=exc).exception("{}", formatted_tb)
    wrapped = error_cls(error_type, message, context=context).chain(exc)
    raise wrapped from exc


def wrap_exceptions(
    error_type: str,
    message: str | None = None,
    *,
    error_cls: type[AglaError] = AglaError,
    code: str | None = None,
    severity: ErrorSeverity | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to log short traceback and re-raise as a chained *error_cls*."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        text = message or f"{func.__qualname__} failed"

        def build(exc: Exception) -> AglaError:
            formatted_tb = _format_tail(exc)
            logger.opt(exception=exc).exception("{}", formatted_tb)
            error = error_cls(error_type, text, code=code, severity=severity)
            return error.chain(exc)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                try:
                    return await func(*args, **kwargs)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    raise build(exc) from exc

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                raise build(exc) from exc

        return sync_wrapper

    return decorator
