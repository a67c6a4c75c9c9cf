import json

import pytest
from loguru import logger

from agla_error import AglaError, ErrorSeverity
from agla_error.config import Settings
from agla_error.log import configure_logging, level_for, log_error


@pytest.mark.parametrize(
    "severity, level",
    [
        (ErrorSeverity.FATAL, "CRITICAL"),
        (ErrorSeverity.ERROR, "ERROR"),
        (ErrorSeverity.WARNING, "WARNING"),
        (ErrorSeverity.INFO, "INFO"),
        (None, "ERROR"),
        ("critical", "ERROR"),
        ("info", "INFO"),
    ],
)
def test_level_for(severity: object, level: str) -> None:
    assert level_for(AglaError("T", "m", severity=severity)) == level  # type: ignore[arg-type]


def test_log_error_emits_at_mapped_level(log_records: list[str]) -> None:
    err = AglaError("GITHUB_ACTION_ERROR", "Action failed", severity=ErrorSeverity.WARNING)
    log_error(err)
    assert log_records == ["WARNING|GITHUB_ACTION_ERROR: Action failed\n"]


def test_log_error_binds_snapshot() -> None:
    extras: list[dict] = []
    sink_id = logger.add(lambda m: extras.append(m.record["extra"]), level="TRACE")
    err = AglaError("T", "m", code="C1", context={"workflow": "ci"})
    log_error(err)
    logger.remove(sink_id)
    assert extras == [{"agla_error": err.to_dict()}]


def test_configure_logging_json(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(Settings(AGLA_LOG_LEVEL="warning", AGLA_LOG_JSON=True))
    logger.info("hidden")
    logger.warning("shown")
    lines = [line for line in capsys.readouterr().err.splitlines() if line]
    assert len(lines) == 1
    assert json.loads(lines[0])["record"]["message"] == "shown"
