"""
carroh CLI

Images every disc listed in a harvest manifest into a per-batch directory:

    carroh [OPTIONS] INPUT_CSV OUTPUT_PARENT [DEVICE]
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer

from carroh import __version__
from carroh.config import ExecutionMode, ExistingOutputPolicy, ImportSettings
from carroh.devices import select_gateway
from carroh.errors import CarrohError
from carroh.operator import TerminalOperator
from carroh.pipeline import ImportOrchestrator

app = typer.Typer(
    add_completion=False,
    help="California Revealed Raw Optical Harvest: image the discs listed in a manifest.",
)

# -q -q ... -v -v
LOG_LEVELS = [logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]
DEFAULT_LOG_LEVEL_INDEX = 2

# Attributes every LogRecord carries; anything else came in through `extra=`.
STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _json_value(value: Any) -> Any:
    """Paths and other non-JSON values are logged as their repr."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, msg, logger, then the record's `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key not in STANDARD_RECORD_ATTRS and not key.startswith("_"):
                payload[key] = _json_value(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def log_level(verbose: int, quiet: int) -> int:
    """Map -v/-q counts onto a logging level (default WARNING)."""
    i = DEFAULT_LOG_LEVEL_INDEX + verbose - quiet
    return LOG_LEVELS[max(0, min(i, len(LOG_LEVELS) - 1))]


def setup_logging(level: int) -> logging.Logger:
    logger = logging.getLogger("carroh")
    logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("carroh")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"carroh {__version__}")
        raise typer.Exit()


@app.command()
def harvest(
    input_csv: Path = typer.Argument(..., help="Path to the CSV file we want to process"),
    output_parent: Path = typer.Argument(..., help="Output parent directory"),
    device: str | None = typer.Argument(
        None,
        help="Device to use as ISO generation source. If none is provided, "
        "the user will be prompted to select a device",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Don't actually create or modify any files"
    ),
    confirm_existing: bool = typer.Option(
        False,
        "--confirm-existing",
        help="Ask before continuing into an output directory that already exists "
        "instead of failing",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase logging verbosity"),
    quiet: int = typer.Option(0, "--quiet", "-q", count=True, help="Decrease logging verbosity"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Print version"
    ),
) -> None:
    """
    Validate a harvest manifest, create the batch directories and image each disc.

    For every identifier in the manifest the operator is asked to insert the
    matching disc; an ISO image and a copy of the disc's files are written to
    OUTPUT_PARENT/{grant cycle}_{marc}/{marc}_{grant cycle}_Raw/.

    Example:
        carroh cahuca_2023-2024_checkin.csv /srv/harvest sr0 --dry-run
    """
    global LOGGER
    LOGGER = setup_logging(log_level(verbose, quiet))

    settings = ImportSettings(
        input_csv=input_csv,
        output_parent=output_parent,
        device=device,
        mode=ExecutionMode.DRY if dry_run else ExecutionMode.LIVE,
        existing_output=(
            ExistingOutputPolicy.CONFIRM if confirm_existing else ExistingOutputPolicy.STRICT
        ),
    )
    LOGGER.info("settings", extra={"settings": settings.model_dump(mode="json")})

    operator = TerminalOperator()

    try:
        devices = select_gateway(sys.platform, operator)
        summary = ImportOrchestrator(settings, devices, operator).run()
    except (CarrohError, OSError) as e:
        LOGGER.debug("run_failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if settings.mode.is_dry:
        typer.echo("Dry run: no directories or files were written.")

    typer.echo(f"\n{'='*60}")
    typer.echo("📊 Summary:")
    typer.echo(f"  Discs imaged: {len(summary.completed)}")
    typer.echo(f"  Discs skipped (output already exists): {len(summary.skipped)}")
    for identifier in summary.skipped:
        typer.echo(f"    - {identifier}")
    typer.echo(f"  Device: {summary.device}")
    typer.echo(f"  Output directory: {summary.layout.raw}")
    typer.echo(f"  Elapsed: {summary.elapsed_seconds:.1f}s")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
