"""Local serving and browser launch for web device sessions.

The asset server answers the browser; the launcher opens it.
"""

from .browser import ChromeLauncher, current_platform_id, resolve_windows_executable
from .server import AssetServer, BundleContext, resolve_request_path

__all__ = [
    "AssetServer",
    "BundleContext",
    "ChromeLauncher",
    "current_platform_id",
    "resolve_request_path",
    "resolve_windows_executable",
]
