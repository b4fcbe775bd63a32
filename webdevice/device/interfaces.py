"""Capability interface shared by every device implementation.

Version: 0.1.0

A device is anything satisfying the ``Device`` protocol; there is no base
class to inherit from. Helpers for devices without logs or port
forwarding live here too.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel


class DeviceState(str, Enum):
    """Lifecycle states of a device session."""

    IDLE = "idle"           # Nothing served; may be started
    STARTING = "starting"   # Compiling, bundling, binding, launching
    RUNNING = "running"     # Server up, browser launched
    STOPPING = "stopping"   # Server being closed


@dataclass(frozen=True)
class DeviceCapabilities:
    """What a device advertises to the tool.

    Hot reload and hot restart are advertised for the web device but their
    protocols are not implemented here.
    """

    hot_reload: bool = False
    hot_restart: bool = False
    start_paused: bool = False
    stop_app: bool = False
    screenshot: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LaunchResult(BaseModel):
    """Outcome of a start request."""

    started: bool
    url: Optional[str] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, url: str | None = None) -> LaunchResult:
        return cls(started=True, url=url)

    @classmethod
    def failed(cls, error_code: str, message: str) -> LaunchResult:
        return cls(started=False, error_code=error_code, message=message)


class NoOpDeviceLogReader:
    """Log reader for devices that produce no log stream."""

    def __init__(self, name: str) -> None:
        self.name = name

    def lines(self) -> Iterator[str]:
        return iter(())

    def dispose(self) -> None:
        pass


class NoOpDevicePortForwarder:
    """Port forwarder for devices that share the host network."""

    @property
    def forwarded_ports(self) -> List[int]:
        return []

    def forward(self, device_port: int, host_port: int | None = None) -> int:
        return host_port or device_port

    def unforward(self, host_port: int) -> None:
        pass


@runtime_checkable
class Device(Protocol):
    """Operations every device exposes."""

    id: str
    name: str
    capabilities: DeviceCapabilities

    def is_supported(self) -> bool: ...

    def install_app(self, app: Any) -> bool: ...

    def uninstall_app(self, app: Any) -> bool: ...

    def is_app_installed(self, app: Any) -> bool: ...

    def start_app(self, app: Any, main_path: Any = None) -> LaunchResult: ...

    def stop_app(self, app: Any = None) -> bool: ...

    def get_log_reader(self, app: Any = None) -> NoOpDeviceLogReader: ...

    def clear_logs(self) -> None: ...
