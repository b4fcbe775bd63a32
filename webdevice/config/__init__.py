"""Configuration system for webdevice."""

from .config import (
    BrowserConfig,
    BuildConfig,
    CompilerConfig,
    LoggingConfig,
    ServerConfig,
    WebDeviceConfig,
    load_config,
    resolve_web_enabled,
)

__all__ = [
    "BrowserConfig",
    "BuildConfig",
    "CompilerConfig",
    "LoggingConfig",
    "ServerConfig",
    "WebDeviceConfig",
    "load_config",
    "resolve_web_enabled",
]
