from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from carroh.errors import GatewayError
from carroh.operator import OperatorGateway

from .base import absolute, gateway_operation, run_command


logger = logging.getLogger(__name__)


def device_path(device: str) -> Path:
    """Map a block device name (`sr0`) to its node (`/dev/sr0`); absolute paths pass through."""
    p = Path(device)
    return p if p.is_absolute() else Path("/dev") / device


@dataclass
class LinuxDeviceGateway:
    """Optical imaging with util-linux and coreutils.

    Uses:
        lsblk      device listing and volume labels
        eject      tray control
        dd         raw image of the block device
        cp -r      file-level copy of the mounted disc
    """

    operator: OperatorGateway
    name: str = "linux"

    def list_devices(self) -> str:
        with gateway_operation("listing devices"):
            return run_command(["lsblk", "--all", "-o", "name,label,size"])

    def select_device(self) -> str:
        typer.echo(self.list_devices())
        device = self.operator.ask_text(
            "Enter the device NAME you would like to image from for this session:"
        )
        if not device:
            raise GatewayError("selecting a ROM device", "no device name was entered")
        return device

    def eject(self, device: str) -> None:
        with gateway_operation(f"ejecting {device!r}"):
            run_command(["eject", str(device_path(device))])

    def read_label(self, device: str) -> str:
        with gateway_operation(f"reading the label of device {device!r}"):
            out = run_command(
                ["lsblk", "--noheadings", "--output", "LABEL", str(device_path(device))]
            )

        for line in out.splitlines():
            if line.strip():
                return line.strip()
        raise GatewayError(
            f"reading the label of device {device!r}",
            f"Device {device!r} label could not be found.",
        )

    def image_source(self, device: str, label: str) -> Path:
        return device_path(device)

    def mount_point(self, device: str, label: str) -> Path:
        with gateway_operation(f"finding the mount point of device {device!r}"):
            out = run_command(
                ["lsblk", "--noheadings", "--output", "MOUNTPOINT", str(device_path(device))]
            )

        for line in out.splitlines():
            if line.strip():
                return Path(line.strip())
        raise GatewayError(
            f"finding the mount point of device {device!r}",
            f"Disc {label!r} in {device!r} is not mounted.",
        )

    def dump_image(self, source: Path, dest: Path) -> None:
        logger.debug("dump_image", extra={"source": str(source), "dest": str(dest)})
        with gateway_operation(
            f"dumping ISO (from: {str(source)!r}, to: {str(dest)!r}). "
            "Should this program be running as root?"
        ):
            run_command(
                ["dd", f"if={absolute(source)}", f"of={absolute(dest)}", "conv=noerror,sync", "bs=1M"]
            )

    def copy_recursive(self, source: Path, dest: Path) -> None:
        logger.debug("copy_recursive", extra={"source": str(source), "dest": str(dest)})
        with gateway_operation(f"copying files (from: {str(source)!r}, to: {str(dest)!r})"):
            run_command(["cp", "--recursive", absolute(source), absolute(dest)])

    def fix_permissions(self, path: Path) -> None:
        logger.debug("fix_permissions", extra={"path": str(path)})
        with gateway_operation(f"fixing permissions in {str(path)!r}"):
            run_command(["chmod", "-R", "a+rwX", absolute(path)])
