"""
Run configuration.

ImportSettings carries everything a harvest run needs to know up front,
including the execution mode, so that mutating operations read the mode
from the settings they were handed instead of from global state.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MARC_COLUMN = "marc"
DEFAULT_GRANT_CYCLE_COLUMN = "obj_grant_cycle"
DEFAULT_IDENTIFIER_COLUMNS = ("obj_call_number", "obj_temporary_id")
DEFAULT_IDENTIFIER_SEPARATOR = ";"


class ExecutionMode(str, Enum):
    """Whether mutating operations actually touch the filesystem/device."""

    LIVE = "live"
    DRY = "dry"

    @property
    def is_dry(self) -> bool:
        return self is ExecutionMode.DRY


class ExistingOutputPolicy(str, Enum):
    """
    What to do when a batch output directory already exists.

    STRICT: fail immediately (default).
    CONFIRM: ask the operator whether to continue into the existing directory.
    """

    STRICT = "strict"
    CONFIRM = "confirm"


class ImportSettings(BaseModel):
    """
    Settings for one harvest run.

    Attributes:
        input_csv: Manifest CSV path
        output_parent: Existing directory the batch directories are created in
        device: Device identifier to image from; prompts when None
        mode: Live or dry execution
        existing_output: Policy for pre-existing batch directories
        marc_column: Column that must hold one MARC code for the batch
        grant_cycle_column: Column that must hold one grant cycle for the batch
        identifier_columns: Preferred and fallback per-item identifier columns
        identifier_separator: Separator between sub-identifiers in one cell
    """

    model_config = ConfigDict(frozen=True)

    input_csv: Path
    output_parent: Path
    device: str | None = None
    mode: ExecutionMode = ExecutionMode.LIVE
    existing_output: ExistingOutputPolicy = ExistingOutputPolicy.STRICT
    marc_column: str = DEFAULT_MARC_COLUMN
    grant_cycle_column: str = DEFAULT_GRANT_CYCLE_COLUMN
    identifier_columns: tuple[str, str] = Field(default=DEFAULT_IDENTIFIER_COLUMNS)
    identifier_separator: str = Field(default=DEFAULT_IDENTIFIER_SEPARATOR, min_length=1)

    @field_validator("input_csv", "output_parent")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("device")
    @classmethod
    def _blank_device_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()
