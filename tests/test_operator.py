"""Tests for the terminal operator prompts."""

import pytest
import typer

from carroh.operator import TerminalOperator


class TestTerminalOperator:
    """Tests for TerminalOperator (typer prompts are patched)."""

    def test_confirm(self, monkeypatch):
        monkeypatch.setattr(typer, "confirm", lambda prompt: prompt.endswith("?"))

        assert TerminalOperator().confirm("Inserted?") is True

    def test_ask_text_strips(self, monkeypatch):
        monkeypatch.setattr(typer, "prompt", lambda prompt, **kwargs: "  sr0 \n")

        assert TerminalOperator().ask_text("Device:") == "sr0"

    def test_ask_choice_returns_option(self, monkeypatch, capsys):
        monkeypatch.setattr(typer, "prompt", lambda prompt, **kwargs: 2)

        picked = TerminalOperator().ask_choice("What now?", ["Cancel", "Skip"])

        assert picked == "Skip"
        out = capsys.readouterr().out
        assert "1) Cancel" in out
        assert "2) Skip" in out

    def test_ask_choice_reasks_out_of_range(self, monkeypatch, capsys):
        answers = iter([0, 3, 1])
        monkeypatch.setattr(typer, "prompt", lambda prompt, **kwargs: next(answers))

        assert TerminalOperator().ask_choice("What now?", ["Cancel", "Skip"]) == "Cancel"
        assert capsys.readouterr().err.count("between 1 and 2") == 2

    def test_ask_choice_requires_options(self):
        with pytest.raises(ValueError):
            TerminalOperator().ask_choice("Nothing to pick", [])
