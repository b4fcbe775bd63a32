"""Tests for Chrome executable discovery and launch."""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from webdevice.core.exceptions import ExecutableNotFoundError, ToolExit, UnsupportedPlatformError
from webdevice.web import browser
from webdevice.web.browser import (
    EXECUTABLE_NOT_FOUND,
    LINUX_EXECUTABLE,
    MACOS_EXECUTABLE,
    ChromeLauncher,
    current_platform_id,
    resolve_windows_executable,
    spawn_detached,
    windows_prefixes,
)

CHROME_IN_B = "C:\\B\\Google\\Chrome\\Application\\chrome.exe"


def _exists_only(*paths):
    existing = set(paths)
    checked = []

    def _file_exists(path):
        checked.append(path)
        return path in existing

    _file_exists.checked = checked
    return _file_exists


# --- Windows lookup ---

def test_windows_resolution_skips_missing_and_unset_prefixes():
    file_exists = _exists_only(CHROME_IN_B)

    resolved = resolve_windows_executable([None, "C:\\A", "C:\\B"], file_exists)

    assert resolved == CHROME_IN_B
    assert file_exists.checked == [
        "C:\\A\\Google\\Chrome\\Application\\chrome.exe",
        CHROME_IN_B,
    ]


def test_windows_resolution_returns_sentinel_when_nothing_matches():
    assert resolve_windows_executable([None, "C:\\A"], _exists_only()) == EXECUTABLE_NOT_FOUND


def test_windows_prefixes_follow_environment_order():
    environ = {"PROGRAMFILES": "C:\\Program Files", "LOCALAPPDATA": "C:\\Users\\dev\\AppData\\Local"}
    assert windows_prefixes(environ) == [
        "C:\\Users\\dev\\AppData\\Local",
        "C:\\Program Files",
        None,
    ]


def test_launcher_resolves_windows_from_environment():
    launcher = ChromeLauncher(
        platform_id="windows",
        environ={"PROGRAMFILES": "C:\\A", "PROGRAMFILES(X86)": "C:\\B"},
        file_exists=_exists_only(CHROME_IN_B),
    )
    assert launcher.resolve_executable() == CHROME_IN_B


# --- Other platforms ---

def test_macos_uses_fixed_path():
    launcher = ChromeLauncher(platform_id="macos", environ={})
    assert launcher.resolve_executable() == MACOS_EXECUTABLE


def test_linux_uses_search_path():
    which = MagicMock(return_value="/usr/bin/google-chrome")
    launcher = ChromeLauncher(platform_id="linux", environ={}, which=which)

    assert launcher.resolve_executable() == "/usr/bin/google-chrome"
    which.assert_called_once_with(LINUX_EXECUTABLE)


def test_linux_falls_back_to_bare_name():
    launcher = ChromeLauncher(platform_id="linux", environ={}, which=lambda name: None)
    assert launcher.resolve_executable() == LINUX_EXECUTABLE


def test_explicit_platform_argument_wins():
    launcher = ChromeLauncher(platform_id="linux", environ={})
    assert launcher.resolve_executable("macos") == MACOS_EXECUTABLE


def test_unsupported_platform_is_fatal():
    launcher = ChromeLauncher(platform_id="freebsd", environ={})
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        launcher.resolve_executable()
    assert isinstance(excinfo.value, ToolExit)
    assert "freebsd" in str(excinfo.value)


def test_executable_override_skips_discovery():
    launcher = ChromeLauncher(platform_id="freebsd", environ={}, executable_override="/opt/chromium/chrome")
    assert launcher.resolve_executable() == "/opt/chromium/chrome"


@pytest.mark.parametrize("system,expected", [("Darwin", "macos"), ("Linux", "linux"), ("Windows", "windows"), ("SunOS", "sunos")])
def test_current_platform_id(system, expected):
    with patch.object(browser.platform, "system", return_value=system):
        assert current_platform_id() == expected


# --- Launch ---

def test_launch_missing_executable_starts_nothing():
    spawn = MagicMock()
    launcher = ChromeLauncher(platform_id="macos", environ={}, file_exists=lambda path: False, spawn=spawn)

    with pytest.raises(ExecutableNotFoundError) as excinfo:
        launcher.launch("http://localhost:1234")

    assert MACOS_EXECUTABLE in str(excinfo.value)
    spawn.assert_not_called()


def test_launch_windows_without_chrome_fails():
    spawn = MagicMock()
    launcher = ChromeLauncher(platform_id="windows", environ={}, file_exists=lambda path: False, spawn=spawn)

    with pytest.raises(ExecutableNotFoundError):
        launcher.launch("http://localhost:1234")
    spawn.assert_not_called()


def test_launch_passes_url_as_sole_argument():
    process = object()
    spawn = MagicMock(return_value=process)
    launcher = ChromeLauncher(
        platform_id="linux",
        environ={},
        which=lambda name: "/usr/bin/google-chrome",
        file_exists=lambda path: True,
        spawn=spawn,
    )

    assert launcher.launch("http://localhost:4321") is process
    spawn.assert_called_once_with(["/usr/bin/google-chrome", "http://localhost:4321"])


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX detach flags")
def test_spawn_detached_starts_new_session():
    with patch.object(browser.subprocess, "Popen") as popen:
        spawn_detached(["/usr/bin/google-chrome", "http://localhost:1"])

    args, kwargs = popen.call_args
    assert args[0] == ["/usr/bin/google-chrome", "http://localhost:1"]
    assert kwargs["start_new_session"] is True
    assert kwargs["stdout"] is subprocess.DEVNULL
    popen.return_value.wait.assert_not_called()
