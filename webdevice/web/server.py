"""Loopback asset server for a running web device session.

Version: 0.1.0

Only three kinds of GET request are understood:

- ``/`` serves ``index.html`` from the web source directory.
- ``/main.dart.js`` serves the compiled entrypoint.
- anything else is looked up in the asset bundle, with one leading
  ``/assets/`` removed.

Every other method is answered with 403.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from pathlib import Path
from socketserver import ThreadingTCPServer
from typing import Callable
from urllib.parse import unquote

from webdevice import __version__
from webdevice.core.compiler import COMPILED_ENTRY_NAME
from webdevice.core.exceptions import BindError

logger = logging.getLogger(__name__)

LOOPBACK_HOST = "127.0.0.1"
ASSETS_PREFIX = "/assets/"
INDEX_FILE_NAME = "index.html"
# Bodies sent with a rejected method are drained up to this many bytes.
# Anything larger, or of unknown length, closes the connection instead.
MAX_DISCARDED_BODY = 1024 * 1024
DISCARD_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class BundleContext:
    """The application currently being served."""

    app_name: str
    web_source_root: Path
    compiled_output_root: Path
    asset_bundle_root: Path


def _contained(root: Path, relative: str) -> Path | None:
    """Join ``relative`` onto ``root``, refusing results outside of it."""
    base = root.resolve()
    candidate = (base / relative).resolve()
    if candidate != base and base not in candidate.parents:
        return None
    return candidate


def resolve_request_path(raw_path: str, context: BundleContext | None) -> tuple[Path | None, str | None]:
    """Map a request path to ``(file, content_type)``.

    ``file`` is None when there is nothing that may be served, either because
    no bundle is active or because the path escapes its root.
    """
    if context is None:
        return None, None

    path = unquote(raw_path.split("?", 1)[0].split("#", 1)[0])
    if path == "/":
        return _contained(context.web_source_root, INDEX_FILE_NAME), "text/html"
    if path == "/" + COMPILED_ENTRY_NAME:
        return _contained(context.compiled_output_root, COMPILED_ENTRY_NAME), "text/javascript"

    if path.startswith(ASSETS_PREFIX):
        path = path[len(ASSETS_PREFIX):]
    return _contained(context.asset_bundle_root, path.lstrip("/")), None


class _AssetTCPServer(ThreadingTCPServer):
    daemon_threads = True
    # server_close() must not wait for responses still streaming
    block_on_close = False


class AssetServer:
    """Serve one bundle over a loopback port chosen by the OS."""

    def __init__(self, context: BundleContext | None = None, host: str = LOOPBACK_HOST, port: int = 0) -> None:
        self.context = context
        self.host = host
        self.requested_port = port
        self._server: ThreadingTCPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> str | None:
        if self._server is None:
            return None
        return self._server.server_address[0]

    @property
    def port(self) -> int | None:
        if self._server is None:
            return None
        return self._server.server_address[1]

    @property
    def url(self) -> str | None:
        if self._server is None:
            return None
        return f"http://localhost:{self.port}"

    @property
    def is_serving(self) -> bool:
        return self._thread is not None

    def _build_handler(self) -> Callable[..., BaseHTTPRequestHandler]:
        """Return a request handler bound to this server's bundle context."""

        asset_server = self

        class _Handler(BaseHTTPRequestHandler):
            server_version = f"webdevice/{__version__}"

            def end_headers(self) -> None:
                self.send_header("Cache-Control", "no-store, no-cache, must-revalidate")
                self.send_header("Pragma", "no-cache")
                self.send_header("Expires", "0")
                super().end_headers()

            def log_message(self, format: str, *args) -> None:  # noqa: A002 (BaseHTTPRequestHandler interface)
                logger.debug("%s - %s", self.address_string(), format % args)

            def parse_request(self) -> bool:
                if not super().parse_request():
                    return False
                if self.command != "GET":
                    drained = self._discard_body()
                    self._send_empty(HTTPStatus.FORBIDDEN, close=not drained)
                    return False
                return True

            def _discard_body(self) -> bool:
                """Read and drop the request body. Returns False if some of it is left unread."""
                if self.headers.get("Transfer-Encoding"):
                    return False
                try:
                    length = int(self.headers.get("Content-Length") or 0)
                except ValueError:
                    return False
                if length < 0 or length > MAX_DISCARDED_BODY:
                    return False

                remaining = length
                while remaining > 0:
                    chunk = self.rfile.read(min(remaining, DISCARD_CHUNK_SIZE))
                    if not chunk:
                        return False
                    remaining -= len(chunk)
                return True

            def _send_empty(self, status: HTTPStatus, close: bool = False) -> None:
                self.send_response(status)
                self.send_header("Content-Length", "0")
                if close:
                    self.close_connection = True
                    self.send_header("Connection", "close")
                self.end_headers()

            def do_GET(self) -> None:  # noqa: N802 (BaseHTTPRequestHandler interface)
                target, content_type = resolve_request_path(self.path, asset_server.context)
                if target is None or not target.is_file():
                    self._send_empty(HTTPStatus.NOT_FOUND)
                    return

                try:
                    stream = target.open("rb")
                except OSError as e:
                    logger.warning("Cannot open %s: %s", target, e)
                    self._send_empty(HTTPStatus.NOT_FOUND)
                    return

                with stream:
                    self.send_response(HTTPStatus.OK)
                    if content_type is not None:
                        self.send_header("Content-Type", content_type)
                    self.send_header("Content-Length", str(os.fstat(stream.fileno()).st_size))
                    self.end_headers()
                    try:
                        shutil.copyfileobj(stream, self.wfile)
                    except (BrokenPipeError, ConnectionResetError):
                        logger.debug("Client went away while streaming %s", target)

        return _Handler

    def bind(self) -> tuple[str, int]:
        """Bind the listener on the loopback interface.

        A listener left over from a previous bind is closed first.
        """
        if self._server is not None:
            self.shutdown()

        try:
            self._server = _AssetTCPServer((self.host, self.requested_port), self._build_handler())
        except OSError as e:
            raise BindError(
                f"Unable to bind asset server on {self.host}:{self.requested_port}: {e}",
                details={"host": self.host, "port": self.requested_port},
            ) from e

        address, port = self._server.server_address[:2]
        logger.debug("Asset server bound to %s:%s", address, port)
        return address, port

    def serve(self) -> None:
        """Start accepting requests on a background thread."""
        if self._server is None:
            raise RuntimeError("bind() must be called before serve()")
        if self._thread is not None:
            return

        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.1},
            name=f"asset-server-{self.port}",
            daemon=True,
        )
        self._thread.start()

    def shutdown(self) -> None:
        """Close the listener. Safe to call repeatedly or before bind().

        Requests already being handled are not waited for.
        """
        server, thread = self._server, self._thread
        if server is None:
            return

        self._server = None
        self._thread = None
        logger.info("Stopping asset server on port %s", server.server_address[1])
        if thread is not None:
            server.shutdown()
            thread.join()
        server.server_close()
