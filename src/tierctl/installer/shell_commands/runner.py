"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
the Helm and kubectl command modules.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    A missing executable is reported as a failed CommandResult (exit code
    127) rather than an exception, so callers only ever branch on
    ``success``.
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
        """
        self.project_root = project_root

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.project_root,
                capture_output=capture_output,
                text=True,
            )
        except FileNotFoundError:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(
                success=False, stderr=f"{cmd[0]}: command not found", returncode=127
            )

        if result.returncode != 0:
            logger.debug(f"Exit {result.returncode}: {(result.stderr or '').strip()}")
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a shell command with real-time output streaming.

        stderr is merged into stdout; every non-empty line is collected and
        passed to ``on_output`` as soon as it is read.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            on_output: Callback called with each line of output

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug(f"Streaming: {' '.join(cmd)}")
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        try:
            process = subprocess.Popen(
                list(cmd),
                cwd=cwd or self.project_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                env=env,
            )
        except FileNotFoundError:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(
                success=False, stderr=f"{cmd[0]}: command not found", returncode=127
            )

        stdout_lines: list[str] = []
        if process.stdout:
            for line in iter(process.stdout.readline, ""):
                line = line.rstrip("\n")
                if line:
                    stdout_lines.append(line)
                    if on_output:
                        on_output(line)
        process.wait()

        if process.returncode != 0:
            logger.debug(f"Exit {process.returncode}")
        return CommandResult(
            success=process.returncode == 0,
            stdout="\n".join(stdout_lines),
            returncode=process.returncode or 0,
        )

    @staticmethod
    def which(binary: str) -> str | None:
        """Return the full path of an executable on PATH, or None."""
        return shutil.which(binary)
