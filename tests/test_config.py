"""Tests for run settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from carroh.config import ExecutionMode, ExistingOutputPolicy, ImportSettings


class TestImportSettings:
    """Tests for ImportSettings."""

    def test_defaults(self):
        settings = ImportSettings(input_csv=Path("batch.csv"), output_parent=Path("out"))

        assert settings.device is None
        assert settings.mode is ExecutionMode.LIVE
        assert settings.existing_output is ExistingOutputPolicy.STRICT
        assert settings.marc_column == "marc"
        assert settings.grant_cycle_column == "obj_grant_cycle"
        assert settings.identifier_columns == ("obj_call_number", "obj_temporary_id")
        assert settings.identifier_separator == ";"

    def test_user_paths_are_expanded(self):
        settings = ImportSettings(input_csv=Path("~/batch.csv"), output_parent=Path("~"))

        assert not str(settings.input_csv).startswith("~")
        assert settings.output_parent == Path.home()

    def test_blank_device_means_prompt(self):
        settings = ImportSettings(input_csv=Path("a.csv"), output_parent=Path("o"), device="  ")
        assert settings.device is None

    def test_device_is_trimmed(self):
        settings = ImportSettings(input_csv=Path("a.csv"), output_parent=Path("o"), device=" sr0 ")
        assert settings.device == "sr0"

    def test_frozen(self):
        settings = ImportSettings(input_csv=Path("a.csv"), output_parent=Path("o"))

        with pytest.raises(ValidationError):
            settings.device = "sr0"

    def test_empty_separator_rejected(self):
        with pytest.raises(ValidationError):
            ImportSettings(input_csv=Path("a.csv"), output_parent=Path("o"), identifier_separator="")

    def test_dry_mode_flag(self):
        assert ExecutionMode.DRY.is_dry is True
        assert ExecutionMode.LIVE.is_dry is False
