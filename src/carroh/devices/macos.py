from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import typer

from carroh.errors import GatewayError
from carroh.operator import OperatorGateway

from .base import absolute, gateway_operation, run_command


logger = logging.getLogger(__name__)

VOLUMES_ROOT = Path("/Volumes")

# "   Volume Name:              CAHUCA_001"
_VOLUME_NAME = re.compile(r"^\s*Volume Name:\s*(.*?)\s*$", re.MULTILINE)


def parse_volume_name(diskutil_info: str) -> str | None:
    """Extract the volume name from `diskutil information` output, if the disk has one."""
    m = _VOLUME_NAME.search(diskutil_info)
    if not m:
        return None
    name = m.group(1)
    if not name or name.startswith("Not applicable"):
        return None
    return name


@dataclass
class MacDeviceGateway:
    """Optical imaging with the macOS disk tools.

    Uses:
        diskutil   device listing and volume labels
        drutil     tray control
        hdiutil    ISO/Joliet hybrid image of the mounted volume
        cp -R      file-level copy of the mounted volume
    """

    operator: OperatorGateway
    name: str = "macos"

    def list_devices(self) -> str:
        with gateway_operation("listing devices"):
            return run_command(["diskutil", "list"])

    def select_device(self) -> str:
        typer.echo(self.list_devices())
        device = self.operator.ask_text(
            "Enter the DISK identifier you would like to image from for this session. "
            "(Do not enter the partition identifier. For example, disk4 is correct, "
            "but disk4s1 is not.):"
        )
        if not device:
            raise GatewayError("selecting a ROM device", "no disk identifier was entered")
        return device

    def eject(self, device: str) -> None:
        # drutil addresses the drive, not the disk identifier
        with gateway_operation(f"ejecting {device!r}"):
            run_command(["drutil", "tray", "eject"])

    def read_label(self, device: str) -> str:
        with gateway_operation(f"reading the label of device {device!r}"):
            out = run_command(["diskutil", "information", device])

        label = parse_volume_name(out)
        if label is None:
            raise GatewayError(
                f"reading the label of device {device!r}",
                f"Device {device!r} label could not be found.",
            )
        return label

    def image_source(self, device: str, label: str) -> Path:
        return VOLUMES_ROOT / label

    def mount_point(self, device: str, label: str) -> Path:
        return VOLUMES_ROOT / label

    def dump_image(self, source: Path, dest: Path) -> None:
        logger.debug("dump_image", extra={"source": str(source), "dest": str(dest)})
        with gateway_operation(f"dumping ISO (from: {str(source)!r}, to: {str(dest)!r})"):
            run_command(
                ["hdiutil", "makehybrid", "-iso", "-joliet", "-o", absolute(dest), absolute(source)]
            )

    def copy_recursive(self, source: Path, dest: Path) -> None:
        logger.debug("copy_recursive", extra={"source": str(source), "dest": str(dest)})
        with gateway_operation(f"copying files (from: {str(source)!r}, to: {str(dest)!r})"):
            run_command(["cp", "-R", absolute(source), absolute(dest)])

    def fix_permissions(self, path: Path) -> None:
        logger.debug("fix_permissions", extra={"path": str(path)})
        with gateway_operation(f"fixing permissions in {str(path)!r}"):
            run_command(["chmod", "-R", "a+rwX", absolute(path)])
