"""
Configuration loading and models for webdevice.

Version: 0.1.0
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "webdevice.yaml"
WEB_ENABLED_ENV_VAR = "FLUTTER_WEB"
STABLE_CHANNEL = "stable"


@dataclass
class ServerConfig:
    """Configuration for the loopback asset server."""

    host: str = "127.0.0.1"
    port: int = 0  # 0 = ephemeral port assigned by the OS


@dataclass
class BrowserConfig:
    """Configuration for the browser launcher.

    Attributes:
        executable: Explicit browser executable, bypassing platform discovery.
    """

    executable: Optional[str] = None


@dataclass
class CompilerConfig:
    """Configuration for the JavaScript compile step."""

    command: list[str] = field(default_factory=lambda: ["dart2js"])
    minify: bool = False
    enable_assertions: bool = True


@dataclass
class BuildConfig:
    """Layout of the build output directory, relative to the project root."""

    directory: str = "build"
    web_subdirectory: str = "web"
    assets_subdirectory: str = "flutter_assets"

    def web_build_dir(self, root: Path) -> Path:
        return root / self.directory / self.web_subdirectory

    def asset_build_dir(self, root: Path) -> Path:
        return root / self.directory / self.assets_subdirectory


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        path: Log file destination path (None = console only).
        reset_on_start: If True, delete the log file on startup. If False, append to it.
    """

    level: str = "INFO"
    path: Optional[str] = None
    reset_on_start: bool = True


@dataclass
class WebDeviceConfig:
    """Top-level configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    channel: str = "master"
    web_enabled: bool = False
    project_root: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebDeviceConfig:
        """Create a config object from a dictionary."""
        compiler_data = dict(data.get("compiler") or {})
        command = compiler_data.get("command")
        if isinstance(command, str):
            compiler_data["command"] = command.split()

        return cls(
            server=ServerConfig(**(data.get("server") or {})),
            browser=BrowserConfig(**(data.get("browser") or {})),
            compiler=CompilerConfig(**compiler_data),
            build=BuildConfig(**(data.get("build") or {})),
            logging=LoggingConfig(**(data.get("logging") or {})),
            channel=str(data.get("channel", "master")),
        )

    @property
    def web_build_dir(self) -> Path:
        return self.build.web_build_dir(self.project_root)

    @property
    def asset_build_dir(self) -> Path:
        return self.build.asset_build_dir(self.project_root)


def resolve_web_enabled(environ: Mapping[str, str] | None = None, channel: str = "master") -> bool:
    """Return whether the web device may be listed at all.

    The device is only discoverable when ``FLUTTER_WEB=true`` and the
    toolchain is not on the stable channel.
    """
    env = os.environ if environ is None else environ
    flag = (env.get(WEB_ENABLED_ENV_VAR) or "").strip().lower() == "true"
    return flag and channel.strip().lower() != STABLE_CHANNEL


def get_config_path(root_path: Path) -> Path:
    """Return the project configuration file location."""
    return root_path / CONFIG_FILE_NAME


def load_config(root_path: Path, environ: Mapping[str, str] | None = None) -> WebDeviceConfig:
    """Load configuration from ``webdevice.yaml`` in the project root.

    The feature flag is resolved here, once, from the environment.
    """
    config_path = get_config_path(root_path)
    config = WebDeviceConfig(project_root=root_path)

    if not config_path.is_file():
        logger.debug("No config file found at %s, using defaults.", config_path)
    else:
        logger.info("Loading config from %s", config_path)
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            config = WebDeviceConfig.from_dict(data)
            config.project_root = root_path
        except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
            logger.error("Failed to load config file: %s", e)
            config = WebDeviceConfig(project_root=root_path)

    config.web_enabled = resolve_web_enabled(environ, config.channel)
    return config

