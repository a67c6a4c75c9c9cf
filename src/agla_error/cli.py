from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from pydantic import ValidationError

from .config import Settings
from .errors import AglaError
from .log import configure_logging, log_error
from .serialization import dumps
from .severity import is_valid_error_severity

app = typer.Typer(
    name="agla-error",
    help="Inspect, chain and render structured AglaError payloads",
)


def _read_payload(source: str) -> dict[str, Any]:
    try:
        text = sys.stdin.read() if source == "-" else Path(source).read_text("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Cannot read payload {source}: {exc}", err=True)
        raise typer.Exit(2) from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        typer.echo(f"Invalid JSON payload: {exc}", err=True)
        raise typer.Exit(2) from exc
    if not isinstance(payload, dict):
        typer.echo("Payload must be a JSON object", err=True)
        raise typer.Exit(2)
    return payload


def _load_error(source: str) -> AglaError:
    payload = _read_payload(source)
    try:
        return AglaError.from_dict(payload)
    except ValidationError as exc:
        typer.echo(f"Invalid error payload: {exc}", err=True)
        raise typer.Exit(2) from exc


def _render(error: AglaError, output: Optional[str]) -> None:
    fmt = output or Settings().default_format
    if fmt not in ("text", "json"):
        typer.echo(f"Unknown format: {fmt}", err=True)
        raise typer.Exit(2)
    if fmt == "json":
        typer.echo(dumps(error.to_dict()))
    else:
        typer.echo(str(error))


@app.command("severity", help="Check whether VALUE is a known severity")
def severity(value: str) -> None:
    if is_valid_error_severity(value):
        typer.echo("valid")
        return
    typer.echo("invalid")
    raise typer.Exit(1)


@app.command("render", help="Render an error payload as text or JSON")
def render(
    payload: str = typer.Argument("-", help="Payload file, '-' for stdin"),
    output: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: text or json"
    ),
) -> None:
    _render(_load_error(payload), output)


@app.command("chain", help="Chain causes onto an error payload and render it")
def chain(
    payload: str = typer.Argument("-", help="Payload file, '-' for stdin"),
    causes: list[str] = typer.Option(
        ..., "--cause", "-c", help="Cause message, repeat to chain several"
    ),
    output: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: text or json"
    ),
    log: bool = typer.Option(False, "--log", help="Also log the chained error"),
) -> None:
    error = _load_error(payload)
    for cause in causes:
        error.chain({"message": cause})
    if log:
        log_error(error)
    _render(error, output)


@app.callback()
def root() -> None:
    """Root command for agla-error."""
    configure_logging(Settings())
    logger.debug("agla-error CLI started")


def main() -> None:  # pragma: no cover - CLI entry point
    """Entrypoint for the CLI."""
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
