"""Device abstraction: capability interface, web device and discovery."""

from .interfaces import (
    Device,
    DeviceCapabilities,
    DeviceState,
    LaunchResult,
    NoOpDeviceLogReader,
    NoOpDevicePortForwarder,
)
from .device import WebDevice, create_web_device
from .discovery import WebDevices

__all__ = [
    "Device",
    "DeviceCapabilities",
    "DeviceState",
    "LaunchResult",
    "NoOpDeviceLogReader",
    "NoOpDevicePortForwarder",
    "WebDevice",
    "WebDevices",
    "create_web_device",
]
