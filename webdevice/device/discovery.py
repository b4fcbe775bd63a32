"""Device discovery for the web device."""

from __future__ import annotations

import logging
from typing import List

from webdevice.config import WebDeviceConfig
from webdevice.device.device import WEB_DEVICE_ID, WebDevice, create_web_device
from webdevice.device.interfaces import Device

logger = logging.getLogger(__name__)


class WebDevices:
    """Polling discovery that lists the single web device when enabled."""

    name = WEB_DEVICE_ID

    def __init__(self, config: WebDeviceConfig, device: WebDevice | None = None) -> None:
        self.config = config
        self._device = device or create_web_device(config)

    @property
    def supports_platform(self) -> bool:
        return self.config.web_enabled

    @property
    def can_list_anything(self) -> bool:
        return self.config.web_enabled

    def poll_devices(self) -> List[Device]:
        if not self.can_list_anything:
            logger.debug("Web device disabled; set FLUTTER_WEB=true on a non-stable channel to enable it")
            return []
        return [self._device]
