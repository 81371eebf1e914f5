# bundler/core/ports/tool_runner.py
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from bundler.core.domain.models import ToolCommand, ToolResult


class IToolRunner(Protocol):
    """
    Port for running an external build tool (installer, linter, bundler).

    Implementations:
    - SubprocessToolRunner (spawns the real process)
    - test doubles that write fixed outputs without spawning anything
    """

    def run(self, command: ToolCommand, cwd: Path) -> ToolResult:
        """
        Run `command` to completion in `cwd` and return its exit status
        and captured output.

        Raises:
            ExternalToolError: If the process cannot be started.
        """
        ...
