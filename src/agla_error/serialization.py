from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .severity import ErrorSeverity, is_valid_error_severity


class AglaErrorPayload(BaseModel):
    """Validated shape of an ``AglaError.to_dict()`` snapshot."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    error_type: str = Field(alias="errorType")
    message: str
    code: str | None = None
    severity: Any = None
    timestamp: str | None = None
    context: dict[str, Any] | None = None

    def parsed_severity(self) -> ErrorSeverity | str | None:
        if self.severity is not None and is_valid_error_severity(self.severity):
            return ErrorSeverity(self.severity)
        return self.severity

    def parsed_timestamp(self) -> datetime | str | None:
        if self.timestamp is None:
            return None
        try:
            return datetime.fromisoformat(self.timestamp)
        except ValueError:
            return self.timestamp


def format_timestamp(value: Any) -> str:
    """Render a stored timestamp the way ``to_dict`` emits it."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.isoformat(timespec="milliseconds")
        utc = value.astimezone(timezone.utc).replace(tzinfo=None)
        return utc.isoformat(timespec="milliseconds") + "Z"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    if callable(value):
        return None
    return str(value)


def dumps(value: Any) -> str:
    """Compact JSON text; reference cycles raise ``ValueError``."""
    return json.dumps(
        value, default=json_default, ensure_ascii=False, separators=(",", ":")
    )
