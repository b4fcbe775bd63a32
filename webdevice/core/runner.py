"""Command execution utilities."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Result of an executed command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(command: List[str], cwd: Path, env: Optional[dict[str, str]] = None) -> CommandResult:
    """Executes a command to completion and captures its output.

    No timeout is applied; the call returns when the process exits.
    """
    logger.info("Running command: %s in %s", " ".join(command), cwd)

    try:
        process = subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=cwd,
            env=env,
            check=False,  # non-zero exit codes are reported, not raised
        )
    except OSError as e:
        logger.error("Failed to run command '%s': %s", " ".join(command), e)
        return CommandResult(stdout="", stderr=str(e), returncode=-1)

    return CommandResult(
        stdout=process.stdout,
        stderr=process.stderr,
        returncode=process.returncode,
    )
