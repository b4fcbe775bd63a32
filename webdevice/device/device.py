"""The web device: compile, bundle, serve over loopback, open a browser.

Version: 0.1.0
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from webdevice.config import WebDeviceConfig
from webdevice.core.bundle import AssetBundle, BundleWriter, write_bundle
from webdevice.core.compiler import Dart2JsCompiler
from webdevice.core.exceptions import BundleBuildFailure, CompileFailure
from webdevice.core.project import WebProject
from webdevice.device.interfaces import (
    DeviceCapabilities,
    DeviceState,
    LaunchResult,
    NoOpDeviceLogReader,
    NoOpDevicePortForwarder,
)
from webdevice.web.browser import ChromeLauncher
from webdevice.web.server import AssetServer, BundleContext

logger = logging.getLogger(__name__)

WEB_DEVICE_ID = "web"


class Compiler(Protocol):
    def compile(self, target: Path, minify: bool = False, enable_assertions: bool = True) -> int: ...


class Bundle(Protocol):
    entries: dict[str, bytes]

    def build(self) -> int: ...


class Launcher(Protocol):
    def launch(self, url: str) -> Any: ...


class WebDevice:
    """A device that runs the app in a local browser.

    ``start_app`` and ``stop_app`` are serialized; at most one asset server
    exists per device.
    """

    id = WEB_DEVICE_ID
    name = WEB_DEVICE_ID
    capabilities = DeviceCapabilities(
        hot_reload=True,
        hot_restart=True,
        start_paused=True,
        stop_app=True,
        screenshot=False,
    )
    target_platform = "web"
    sdk_name_and_version = "web"
    is_local_emulator = False

    def __init__(
        self,
        config: WebDeviceConfig,
        compiler: Compiler,
        bundle_factory: Callable[[], Bundle],
        launcher: Launcher,
        bundle_writer: BundleWriter = write_bundle,
        server_factory: Optional[Callable[[BundleContext], AssetServer]] = None,
    ) -> None:
        self.config = config
        self.compiler = compiler
        self.bundle_factory = bundle_factory
        self.bundle_writer = bundle_writer
        self.launcher = launcher
        self.server_factory = server_factory or self._default_server
        self.port_forwarder = NoOpDevicePortForwarder()
        self._lock = threading.Lock()
        self._state = DeviceState.IDLE
        self._server: AssetServer | None = None
        self._context: BundleContext | None = None

    def _default_server(self, context: BundleContext) -> AssetServer:
        return AssetServer(context, host=self.config.server.host, port=self.config.server.port)

    @property
    def state(self) -> DeviceState:
        return self._state

    @property
    def server(self) -> AssetServer | None:
        return self._server

    @property
    def context(self) -> BundleContext | None:
        return self._context

    # Capability surface -------------------------------------------------

    def is_supported(self) -> bool:
        return self.config.web_enabled

    def is_supported_for_project(self, project: WebProject) -> bool:
        return project.has_web()

    def install_app(self, app: Any) -> bool:
        return True

    def uninstall_app(self, app: Any) -> bool:
        return True

    def is_app_installed(self, app: Any) -> bool:
        return True

    def is_latest_build_installed(self, app: Any) -> bool:
        return True

    def clear_logs(self) -> None:
        pass

    def get_log_reader(self, app: Any = None) -> NoOpDeviceLogReader:
        return NoOpDeviceLogReader(getattr(app, "name", self.name))

    # Lifecycle -----------------------------------------------------------

    def start_app(
        self,
        app: WebProject,
        main_path: Path | None = None,
        minify: bool | None = None,
        enable_assertions: bool | None = None,
    ) -> LaunchResult:
        """Compile, bundle, serve and open ``app`` in the browser.

        A compile failure is reported in the result. Bundle, platform and
        browser failures raise ``ToolExit``; bind failures raise ``BindError``.
        """
        with self._lock:
            if self._server is not None:
                logger.info("Replacing the running session of %s", self._context.app_name if self._context else "app")
                self._stop_locked()

            self._state = DeviceState.STARTING
            try:
                return self._start_locked(app, main_path, minify, enable_assertions)
            except BaseException:
                self._state = DeviceState.IDLE
                raise

    def _start_locked(
        self,
        app: WebProject,
        main_path: Path | None,
        minify: bool | None,
        enable_assertions: bool | None,
    ) -> LaunchResult:
        try:
            self._compile(app, main_path, minify, enable_assertions)
        except CompileFailure as exc:
            logger.error(exc.message)
            self._state = DeviceState.IDLE
            return LaunchResult.failed(exc.code, exc.message)

        bundle = self.bundle_factory()
        if bundle.build() != 0:
            raise BundleBuildFailure("Error: Failed to build asset bundle")
        self.bundle_writer(self.config.asset_build_dir, bundle.entries)

        context = BundleContext(
            app_name=app.name,
            web_source_root=app.web_source_path,
            compiled_output_root=self.config.web_build_dir,
            asset_bundle_root=self.config.asset_build_dir,
        )
        server = self.server_factory(context)
        server.bind()
        server.serve()
        self._server = server
        self._context = context
        logger.info("Serving assets from %s", server.url)

        try:
            self.launcher.launch(server.url)
        except BaseException:
            self._stop_locked()
            raise

        self._state = DeviceState.RUNNING
        return LaunchResult.succeeded(server.url)

    def _compile(
        self,
        app: WebProject,
        main_path: Path | None,
        minify: bool | None,
        enable_assertions: bool | None,
    ) -> None:
        target = main_path or app.default_target
        logger.info("Compiling %s to JavaScript...", app.name)
        started = time.perf_counter()
        status = self.compiler.compile(
            target,
            minify=self.config.compiler.minify if minify is None else minify,
            enable_assertions=self.config.compiler.enable_assertions if enable_assertions is None else enable_assertions,
        )
        if status != 0:
            raise CompileFailure(
                f"Failed to compile {app.name} to JavaScript",
                details={"target": str(target), "status": status},
            )
        logger.info("Compiled %s in %.1fs", app.name, time.perf_counter() - started)

    def stop_app(self, app: Any = None) -> bool:
        """Close the asset server. Launched browsers are left open."""
        with self._lock:
            self._stop_locked()
        return True

    def _stop_locked(self) -> None:
        if self._server is None:
            self._context = None
            self._state = DeviceState.IDLE
            return

        self._state = DeviceState.STOPPING
        server, self._server = self._server, None
        try:
            server.shutdown()
        finally:
            self._context = None
            self._state = DeviceState.IDLE


def create_web_device(config: WebDeviceConfig, launcher: Launcher | None = None) -> WebDevice:
    """Build a ``WebDevice`` wired to the real compiler, bundle and browser."""
    compiler = Dart2JsCompiler(
        command=config.compiler.command,
        output_dir=config.web_build_dir,
        cwd=config.project_root,
    )
    return WebDevice(
        config=config,
        compiler=compiler,
        bundle_factory=lambda: AssetBundle(config.project_root),
        launcher=launcher or ChromeLauncher(executable_override=config.browser.executable),
    )
