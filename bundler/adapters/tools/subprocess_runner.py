# bundler/adapters/tools/subprocess_runner.py
import subprocess
from pathlib import Path
from typing import Mapping, Optional

import structlog

from bundler.core.domain.exceptions import ExternalToolError
from bundler.core.domain.models import ToolCommand, ToolResult

logger = structlog.get_logger()


class SubprocessToolRunner:
    """
    Concrete IToolRunner spawning the real tool and waiting for it.

    Output is captured, then forwarded line by line to the log so the
    operator sees it; the returned ToolResult keeps the full text.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self.env = dict(env) if env is not None else None

    def run(self, command: ToolCommand, cwd: Path) -> ToolResult:
        logger.info("tool_started", tool=command.name, cmd=str(command), cwd=str(cwd))
        try:
            proc = subprocess.run(
                command.argv,
                cwd=str(cwd),
                env=self.env,
                capture_output=True,
                # Output is informational; undecodable bytes must not fail the build
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ExternalToolError(command.name, command.argv, details=str(e)) from e

        for line in proc.stdout.splitlines():
            logger.info("tool_stdout", tool=command.name, line=line)
        for line in proc.stderr.splitlines():
            logger.warning("tool_stderr", tool=command.name, line=line)

        logger.info("tool_finished", tool=command.name, returncode=proc.returncode)
        return ToolResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
