"""
Device/media gateway interface and the shared command runner.

The orchestrator only ever talks to DeviceGateway; the concrete variant is
picked once per process by carroh.devices.select_gateway().
"""

from __future__ import annotations

import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol, Sequence

from carroh.errors import DeviceCommandError, GatewayError


logger = logging.getLogger(__name__)


class DeviceGateway(Protocol):
    """Platform operations needed to image one optical disc at a time."""

    name: str

    def list_devices(self) -> str:
        """Human-readable device listing for the operator."""
        ...

    def select_device(self) -> str:
        """Ask the operator which device to image from."""
        ...

    def eject(self, device: str) -> None:
        ...

    def read_label(self, device: str) -> str:
        """Volume label of the disc currently in `device`."""
        ...

    def image_source(self, device: str, label: str) -> Path:
        """Path the ISO image is made from."""
        ...

    def mount_point(self, device: str, label: str) -> Path:
        """Directory the disc's files are copied from."""
        ...

    def dump_image(self, source: Path, dest: Path) -> None:
        ...

    def copy_recursive(self, source: Path, dest: Path) -> None:
        ...

    def fix_permissions(self, path: Path) -> None:
        ...


def run_command(args: Sequence[str]) -> str:
    """
    Run an external command and return its stdout.

    Parameters:
        args: Program and arguments

    Returns:
        Captured standard output

    Raises:
        DeviceCommandError: If the program is missing or exits non-zero
    """
    cmd = [str(a) for a in args]
    logger.debug("command_start", extra={"command": cmd})

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise DeviceCommandError(
            cmd, f"{cmd[0]!r} not found. Install it and ensure it is on your PATH."
        ) from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip()
        raise DeviceCommandError(cmd, f"exit status {e.returncode}\n{detail}".rstrip()) from e

    logger.debug("command_output", extra={"command": cmd, "stdout": proc.stdout})
    return proc.stdout


@contextmanager
def gateway_operation(operation: str) -> Iterator[None]:
    """Re-raise command failures with the operation that was attempted."""
    try:
        yield
    except DeviceCommandError as e:
        raise GatewayError(operation, str(e)) from e


def absolute(path: Path) -> str:
    return str(Path(path).absolute())
