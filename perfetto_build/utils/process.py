"""
External command execution for the build driver
"""

import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from ..errors import MissingCommandError, StepFailedError, ToolchainError

Command = Sequence[Union[str, Path]]


def format_command(cmd: Command) -> str:
    """Render a command line for log output"""
    return " ".join(f'"{c}"' if " " in str(c) else str(c) for c in cmd)


class CommandRunner:
    """Runs external commands one at a time, waiting for each to finish"""

    def __init__(self, logger: Any, dry_run: bool = False):
        """
        Initialize command runner

        Args:
            logger: Logger instance
            dry_run: If True, log commands instead of running them
        """
        self.logger = logger
        self.dry_run = dry_run

    def run(self,
            cmd: Command,
            cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None) -> int:
        """
        Run a command with logging

        Args:
            cmd: Command and arguments
            cwd: Working directory
            env: Complete environment for the child process

        Returns:
            The command's exit status
        """
        cmd_str = format_command(cmd)
        self.logger.debug(f"Running: {cmd_str}")
        if cwd is not None:
            self.logger.debug(f"  in: {cwd}")

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return 0

        try:
            result = subprocess.run(
                [str(c) for c in cmd],
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                check=False
            )
        except FileNotFoundError:
            raise MissingCommandError(str(cmd[0]))
        except OSError as e:
            raise ToolchainError(f"Cannot run {cmd[0]}: {e.strerror or e}")

        return result.returncode

    def run_step(self,
                 step: str,
                 cmd: Command,
                 cwd: Optional[Path] = None,
                 env: Optional[Dict[str, str]] = None) -> None:
        """
        Run a build step that must succeed

        Raises:
            StepFailedError: If the command exits non-zero
        """
        returncode = self.run(cmd, cwd=cwd, env=env)
        if returncode != 0:
            self.logger.error(f"Command failed: {format_command(cmd)}")
            raise StepFailedError(step, returncode)

    def run_best_effort(self,
                        step: str,
                        cmd: Command,
                        cwd: Optional[Path] = None,
                        env: Optional[Dict[str, str]] = None) -> int:
        """Run a build step whose failure is only reported"""
        returncode = self.run(cmd, cwd=cwd, env=env)
        if returncode != 0:
            self.logger.warning(f"{step} returned non-zero ({returncode}). Continuing...")
        return returncode

    def capture(self,
                cmd: Command,
                cwd: Optional[Path] = None,
                env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
        """
        Run a read-only probe command and capture its output

        Probes run in dry-run mode too. A missing executable is reported as
        exit status 127 and one that cannot be executed as 126, the way a
        shell reports them.
        """
        self.logger.debug(f"Probing: {format_command(cmd)}")
        try:
            return subprocess.run(
                [str(c) for c in cmd],
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                capture_output=True,
                text=True,
                check=False
            )
        except FileNotFoundError:
            return subprocess.CompletedProcess(cmd, 127, "", "")
        except OSError as e:
            return subprocess.CompletedProcess(cmd, 126, "", e.strerror or str(e))
