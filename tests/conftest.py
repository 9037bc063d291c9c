"""Shared fixtures: fake device/operator gateways and manifest helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

import pytest

from carroh.config import ImportSettings
from carroh.errors import GatewayError


FIXTURES_DIR = Path(__file__).parent / "fixtures"

HEADER = ["marc", "obj_grant_cycle", "obj_call_number", "obj_temporary_id", "obj_title"]


@dataclass
class FakeDeviceGateway:
    """In-memory device: records every call and writes placeholder outputs."""

    labels: list[str] = field(default_factory=lambda: ["DISC"])
    device: str = "sr0"
    fail_on: set[str] = field(default_factory=set)
    calls: list[tuple[str, tuple]] = field(default_factory=list)
    name: str = "fake"

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, args))
        if op in self.fail_on:
            raise GatewayError(op, "simulated failure")

    def ops(self) -> list[str]:
        return [op for op, _ in self.calls]

    def list_devices(self) -> str:
        self._record("list_devices")
        return f"NAME LABEL SIZE\n{self.device} DISC 650M"

    def select_device(self) -> str:
        self._record("select_device")
        return self.device

    def eject(self, device: str) -> None:
        self._record("eject", device)

    def read_label(self, device: str) -> str:
        self._record("read_label", device)
        # One label per disc; the last one repeats
        return self.labels.pop(0) if len(self.labels) > 1 else self.labels[0]

    def image_source(self, device: str, label: str) -> Path:
        return Path("/dev") / device

    def mount_point(self, device: str, label: str) -> Path:
        return Path("/media") / label

    def dump_image(self, source: Path, dest: Path) -> None:
        self._record("dump_image", source, dest)
        dest.write_bytes(b"ISO")

    def copy_recursive(self, source: Path, dest: Path) -> None:
        self._record("copy_recursive", source, dest)
        dest.mkdir()
        (dest / "README.TXT").write_text("disc contents")

    def fix_permissions(self, path: Path) -> None:
        self._record("fix_permissions", path)


@dataclass
class ScriptedOperator:
    """
    Operator that answers from scripts.

    Unscripted confirms answer yes. Choice answers are "skip" or "cancel".
    """

    confirms: list[bool] = field(default_factory=list)
    choices: list[str] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.confirms.pop(0) if self.confirms else True

    def ask_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.texts.pop(0)

    def ask_choice(self, prompt: str, options: Sequence[str]) -> str:
        self.prompts.append(prompt)
        answer = self.choices.pop(0)
        prefix = "Skip" if answer == "skip" else "Cancel"
        return next(o for o in options if o.startswith(prefix))


@pytest.fixture
def devices() -> FakeDeviceGateway:
    return FakeDeviceGateway()


@pytest.fixture
def operator() -> ScriptedOperator:
    return ScriptedOperator()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (header first) to a CSV under tmp_path and return its path."""

    def _write(rows: Sequence[Sequence[str]], name: str = "manifest.csv") -> Path:
        path = tmp_path / name
        lines = [",".join(row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    root = tmp_path / "out"
    root.mkdir()
    return root


@pytest.fixture
def make_settings(output_root: Path) -> Callable[..., ImportSettings]:
    def _make(input_csv: Path, **overrides) -> ImportSettings:
        values = {"input_csv": input_csv, "output_parent": output_root, "device": "sr0"}
        values.update(overrides)
        return ImportSettings(**values)

    return _make


@pytest.fixture(autouse=True)
def _restore_carroh_logger():
    """The CLI replaces the carroh logger's handlers; put them back after each test."""
    logger = logging.getLogger("carroh")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
