"""Subprocess execution with explicit results.

Everything the sync tool runs (git, npm, gh) goes through a CommandRunner so
tests can substitute a fake and the orchestrator can branch on results
instead of catching exceptions.
"""

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.args)

    def describe_failure(self) -> str:
        """Short human readable description of a failed command."""
        detail = (self.stderr or self.stdout).strip()
        message = f"'{self.command}' exited with status {self.returncode}"
        return f"{message}: {detail}" if detail else message


class CommandRunner:
    """Runs commands synchronously, without timeouts."""

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command and wait for it to exit.

        Args:
            args: Program and arguments
            cwd: Working directory
            capture: Capture stdout/stderr; if False output goes to the terminal
            env: Full environment for the child process (inherited if None)

        Returns:
            CommandResult; a missing executable is reported as status 127
        """
        args = [str(a) for a in args]
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=capture,
                text=True,
                env=dict(env) if env is not None else None,
            )
        except FileNotFoundError as e:
            return CommandResult(args=args, returncode=127, stderr=str(e))

        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
