"""JavaScript compile step."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List

from webdevice.core.runner import CommandResult, run_command

logger = logging.getLogger(__name__)

COMPILED_ENTRY_NAME = "main.dart.js"


class Dart2JsCompiler:
    """Compile an entrypoint to ``<output_dir>/main.dart.js``.

    Only the exit status matters to the caller; output is logged.
    """

    def __init__(
        self,
        command: List[str],
        output_dir: Path,
        cwd: Path,
        runner: Callable[[List[str], Path], CommandResult] = run_command,
    ) -> None:
        self.command = list(command)
        self.output_dir = output_dir
        self.cwd = cwd
        self._runner = runner

    def build_arguments(self, target: Path, minify: bool, enable_assertions: bool) -> list[str]:
        args = [*self.command, "-o", str(self.output_dir / COMPILED_ENTRY_NAME)]
        if minify:
            args.append("--minify")
        if enable_assertions:
            args.append("--enable-asserts")
        args.append(str(target))
        return args

    def compile(self, target: Path, minify: bool = False, enable_assertions: bool = True) -> int:
        """Run the compiler and return its exit status (nonzero on failure)."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        result = self._runner(self.build_arguments(target, minify, enable_assertions), self.cwd)
        if result.stdout:
            logger.debug(result.stdout.rstrip())
        if not result.ok:
            logger.error("Compiler exited with %s: %s", result.returncode, result.stderr.strip())
        return result.returncode
