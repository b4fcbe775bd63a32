import json
import logging
import time
from pathlib import Path
from typing import Callable

from webdevice.config import WebDeviceConfig
from webdevice.core.exceptions import ToolExit
from webdevice.core.project import WebProject
from webdevice.device import WebDevices, create_web_device

logger = logging.getLogger(__name__)


def _wait_for_interrupt() -> None:
    """Block until the user presses Ctrl+C."""
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


def handle_devices(config: WebDeviceConfig, as_json: bool) -> int:
    """List the devices that discovery currently exposes."""
    devices = WebDevices(config).poll_devices()
    if as_json:
        payload = [
            {
                "id": device.id,
                "name": device.name,
                "capabilities": device.capabilities.to_dict(),
            }
            for device in devices
        ]
        print(json.dumps(payload, indent=2))
        return 0

    if not devices:
        print("No devices available.")
        return 0
    for device in devices:
        print(f"{device.name} ({device.id})")
    return 0


def handle_run(
    root: Path,
    config: WebDeviceConfig,
    target: Path | None,
    minify: bool,
    enable_assertions: bool,
    wait: Callable[[], None] = _wait_for_interrupt,
) -> int:
    """Start the app on the web device and keep serving until interrupted."""
    project = WebProject.from_directory(root)
    device = create_web_device(config)

    if not device.is_supported():
        logger.error("The web device is disabled. Set FLUTTER_WEB=true (not available on the stable channel).")
        return 1
    if not device.is_supported_for_project(project):
        raise ToolExit(f"No web/ directory found in {root}")

    main_path = root / target if target else None
    result = device.start_app(project, main_path=main_path, minify=minify, enable_assertions=enable_assertions)
    if not result.started:
        return 1

    print(f"Serving {project.name} at {result.url} (Ctrl+C to stop)")
    try:
        wait()
    finally:
        device.stop_app(project)
    return 0
