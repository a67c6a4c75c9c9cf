import sys
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Self

import pytest
from loguru import logger

from agla_error import AglaError


class PrefixedAglaError(AglaError):
    """Overrides chain to tag the message after the base merge."""

    def chain(self, cause: object) -> Self:
        super().chain(cause)
        self.message = f"[TEST] {self.message}"
        return self


class BasicAglaError(AglaError):
    """Inherits chain unchanged."""


@pytest.fixture
def prefixed_cls() -> type[PrefixedAglaError]:
    return PrefixedAglaError


@pytest.fixture
def basic_cls() -> type[BasicAglaError]:
    return BasicAglaError


@pytest.fixture
def fixed_ts() -> datetime:
    return datetime(2025, 8, 29, 21, 42, tzinfo=timezone.utc)


@pytest.fixture
def log_records() -> Iterator[list[str]]:
    """Collect formatted loguru records emitted during the test."""
    records: list[str] = []
    sink_id = logger.add(records.append, level="TRACE", format="{level}|{message}")
    yield records
    logger.remove(sink_id)


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)
