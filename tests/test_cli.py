"""Tests for the command line entrypoint."""

import json
from pathlib import Path

import pytest

from webdevice.cli import command_handlers
from webdevice.cli.main import build_parser, main
from webdevice.config import WebDeviceConfig
from webdevice.core.exceptions import ToolExit
from webdevice.device import DeviceState, WebDevice


class _Compiler:
    def __init__(self, status: int = 0) -> None:
        self.status = status

    def compile(self, target, minify=False, enable_assertions=True):
        return self.status


class _Bundle:
    entries: dict = {}

    def build(self):
        return 0


class _Launcher:
    def __init__(self) -> None:
        self.urls = []

    def launch(self, url):
        self.urls.append(url)


@pytest.fixture
def web_project(tmp_path):
    (tmp_path / "web").mkdir()
    (tmp_path / "web" / "index.html").write_text("<html></html>")
    (tmp_path / "pubspec.yaml").write_text("name: cli_app\n")
    return tmp_path


def _fake_device(config, status=0):
    return WebDevice(config=config, compiler=_Compiler(status), bundle_factory=_Bundle, launcher=_Launcher())


def test_parser_run_options():
    args = build_parser().parse_args(["run", "app", "--target", "lib/alt.dart", "--minify", "--no-asserts"])
    assert args.command == "run"
    assert args.root == Path("app")
    assert args.target == Path("lib/alt.dart")
    assert args.minify is True
    assert args.enable_assertions is False


def test_parser_run_defaults_defer_to_config():
    args = build_parser().parse_args(["run"])
    assert args.minify is None
    assert args.enable_assertions is None


def test_devices_json_when_enabled(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("FLUTTER_WEB", "true")

    assert main(["--root", str(tmp_path), "devices", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload[0]["id"] == "web"
    assert payload[0]["capabilities"]["hot_reload"] is True


def test_devices_when_disabled(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("FLUTTER_WEB", raising=False)

    assert main(["--root", str(tmp_path), "devices"]) == 0
    assert "No devices available." in capsys.readouterr().out


def test_run_without_web_directory_exits(tmp_path, monkeypatch):
    monkeypatch.setenv("FLUTTER_WEB", "true")

    with pytest.raises(SystemExit) as excinfo:
        main(["run", str(tmp_path)])
    assert excinfo.value.code == 1


def test_handle_run_serves_until_interrupted(web_project, monkeypatch, capsys):
    config = WebDeviceConfig(project_root=web_project, web_enabled=True)
    device = _fake_device(config)
    monkeypatch.setattr(command_handlers, "create_web_device", lambda cfg: device)
    seen = {}

    def _wait():
        seen["state"] = device.state
        seen["url"] = device.server.url

    code = command_handlers.handle_run(web_project, config, None, minify=False, enable_assertions=True, wait=_wait)

    assert code == 0
    assert seen["state"] == DeviceState.RUNNING
    assert seen["url"] in capsys.readouterr().out
    assert device.launcher.urls == [seen["url"]]
    assert device.state == DeviceState.IDLE
    assert device.server is None


def test_handle_run_compile_failure(web_project, monkeypatch):
    config = WebDeviceConfig(project_root=web_project, web_enabled=True)
    device = _fake_device(config, status=1)
    monkeypatch.setattr(command_handlers, "create_web_device", lambda cfg: device)

    code = command_handlers.handle_run(web_project, config, None, False, True, wait=lambda: None)

    assert code == 1
    assert device.launcher.urls == []


def test_handle_run_disabled_device(web_project):
    config = WebDeviceConfig(project_root=web_project, web_enabled=False)
    assert command_handlers.handle_run(web_project, config, None, False, True, wait=lambda: None) == 1


def test_handle_run_requires_web_directory(tmp_path):
    config = WebDeviceConfig(project_root=tmp_path, web_enabled=True)
    with pytest.raises(ToolExit):
        command_handlers.handle_run(tmp_path, config, None, False, True, wait=lambda: None)
