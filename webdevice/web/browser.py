"""Locate and launch Chrome pointed at the asset server.

Launched browsers are never tracked: there is no reliable way to tell which
Chrome processes belong to this tool, so they are left open rather than
risking closing unrelated windows.
"""

from __future__ import annotations

import logging
import ntpath
import os
import platform
import shutil
import subprocess
import sys
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from webdevice.core.exceptions import ExecutableNotFoundError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

LINUX_EXECUTABLE = "google-chrome"
MACOS_EXECUTABLE = "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"
WINDOWS_EXECUTABLE = r"Google\Chrome\Application\chrome.exe"
WINDOWS_PREFIX_ENV_VARS = ("LOCALAPPDATA", "PROGRAMFILES", "PROGRAMFILES(X86)")
EXECUTABLE_NOT_FOUND = "."

_PLATFORM_IDS = {
    "darwin": "macos",
    "linux": "linux",
    "windows": "windows",
}


def current_platform_id() -> str:
    """Return ``macos``, ``linux`` or ``windows`` (other systems lowercased)."""
    system = platform.system().lower()
    return _PLATFORM_IDS.get(system, system)


def windows_prefixes(environ: Mapping[str, str]) -> list[Optional[str]]:
    """Candidate install roots, in lookup order. Unset variables stay None."""
    return [environ.get(name) for name in WINDOWS_PREFIX_ENV_VARS]


def resolve_windows_executable(
    prefixes: Iterable[Optional[str]],
    file_exists: Callable[[str], bool] = os.path.isfile,
) -> str:
    """Return the first ``<prefix>\\Google\\Chrome\\Application\\chrome.exe`` on disk."""
    for prefix in prefixes:
        if not prefix:
            continue
        candidate = ntpath.join(prefix, WINDOWS_EXECUTABLE)
        if file_exists(candidate):
            return candidate
    return EXECUTABLE_NOT_FOUND


def spawn_detached(args: Sequence[str]) -> subprocess.Popen:
    """Start a process that outlives this one and is not waited on."""
    kwargs: dict[str, Any] = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
    }
    if sys.platform == "win32":
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True
    return subprocess.Popen(list(args), **kwargs)


class ChromeLauncher:
    """Launch the Chrome browser to a particular host page.

    Platform identity, environment, filesystem checks and process spawning
    are all injected so lookups can be exercised on any host.
    """

    def __init__(
        self,
        platform_id: str | None = None,
        environ: Mapping[str, str] | None = None,
        file_exists: Callable[[str], bool] = os.path.isfile,
        which: Callable[[str], Optional[str]] = shutil.which,
        spawn: Callable[[Sequence[str]], Any] = spawn_detached,
        executable_override: str | None = None,
    ) -> None:
        self.platform_id = platform_id or current_platform_id()
        self.environ = os.environ if environ is None else environ
        self._file_exists = file_exists
        self._which = which
        self._spawn = spawn
        self.executable_override = executable_override

    def resolve_executable(self, platform_id: str | None = None) -> str:
        """Return the browser executable path for ``platform_id``."""
        if self.executable_override:
            return self.executable_override

        target = platform_id or self.platform_id
        if target == "macos":
            return MACOS_EXECUTABLE
        if target == "linux":
            return self._which(LINUX_EXECUTABLE) or LINUX_EXECUTABLE
        if target == "windows":
            return resolve_windows_executable(windows_prefixes(self.environ), self._file_exists)
        raise UnsupportedPlatformError(
            f"Platform {target} is not supported.",
            details={"platform": target},
        )

    def launch(self, url: str) -> Any:
        """Start Chrome on ``url`` and return its process without waiting."""
        executable = self.resolve_executable()
        if not self._file_exists(executable):
            raise ExecutableNotFoundError(
                f"Chrome executable not found at {executable}",
                details={"executable": executable},
            )

        logger.info("Launching %s on %s", executable, url)
        return self._spawn([executable, url])
