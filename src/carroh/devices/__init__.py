"""
Device/media gateways.

One concrete gateway is chosen per process from the running platform:

    >>> from carroh.devices import select_gateway
    >>> from carroh.operator import TerminalOperator
    >>>
    >>> devices = select_gateway(sys.platform, TerminalOperator())
    >>> label = devices.read_label("sr0")
"""

from __future__ import annotations

from carroh.errors import UnsupportedPlatform
from carroh.operator import OperatorGateway

from .base import DeviceGateway, run_command
from .linux import LinuxDeviceGateway
from .macos import MacDeviceGateway


def select_gateway(platform: str, operator: OperatorGateway) -> DeviceGateway:
    """
    Return the device gateway for a `sys.platform` value.

    Raises:
        UnsupportedPlatform: For anything other than Linux or macOS
    """
    if platform.startswith("linux"):
        return LinuxDeviceGateway(operator=operator)
    if platform == "darwin":
        return MacDeviceGateway(operator=operator)
    raise UnsupportedPlatform(platform)


__all__ = [
    "DeviceGateway",
    "LinuxDeviceGateway",
    "MacDeviceGateway",
    "run_command",
    "select_gateway",
]
