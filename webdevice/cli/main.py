"""
Command line entrypoint for webdevice.

Version: 0.1.0
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from webdevice import __version__
from webdevice.cli.command_handlers import handle_devices, handle_run
from webdevice.cli.utils import resolve_root_argument
from webdevice.config import load_config
from webdevice.core.exceptions import ToolExit
from webdevice.core.logging_utils import configure_logging

configure_logging("INFO")
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""

    parser = argparse.ArgumentParser(description="Run a web app in a local browser")
    parser.add_argument("--version", action="version", version=f"webdevice {__version__}")
    parser.add_argument("--root", dest="root_option", type=Path, default=None, help="Project root (optional, overrides current directory)")

    subcommands = parser.add_subparsers(dest="command", required=False)

    devices_parser = subcommands.add_parser("devices", help="List available devices")
    devices_parser.add_argument("--json", action="store_true", help="Output as JSON")

    run_parser = subcommands.add_parser("run", help="Compile, serve and open the app in Chrome")
    run_parser.add_argument("root", type=Path, nargs="?", default=None, help="Project root")
    run_parser.add_argument("-t", "--target", type=Path, default=None, help="Entrypoint (default: lib/main.dart)")
    run_parser.add_argument("--minify", action="store_true", default=None, help="Minify the compiled JavaScript")
    run_parser.add_argument(
        "--no-asserts",
        action="store_false",
        dest="enable_assertions",
        default=None,
        help="Compile without assertions",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    root = resolve_root_argument(getattr(args, "root", None) or args.root_option)
    config = load_config(root)
    configure_logging(
        config.logging.level,
        log_file=config.logging.path,
        reset_on_start=config.logging.reset_on_start,
    )

    try:
        if args.command == "devices":
            return handle_devices(config, args.json)
        if args.command == "run":
            return handle_run(
                root=root,
                config=config,
                target=args.target,
                minify=config.compiler.minify if args.minify is None else args.minify,
                enable_assertions=(
                    config.compiler.enable_assertions if args.enable_assertions is None else args.enable_assertions
                ),
            )
    except ToolExit as exc:
        logger.error(exc.message)
        raise SystemExit(exc.exit_code) from exc

    raise ValueError(f"Unhandled command {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
