"""External command execution for stackinit.

Two implementations share one surface, so step code never branches on the run mode:

- `CommandRunner`: runs commands via `subprocess.run` with the target root as working directory.
- `DryRunCommandRunner`: executes nothing and echoes the command it would have run.

Commands are argument vectors (`["openspec", "init", ...]`) and run without a shell. A plain
string is accepted for the rare case that needs a literal pipe or redirection between two tools;
it is handed to the shell as-is.

Failure is a value, never an exception: a non-zero exit, a spawn error (missing executable,
permission problem) or a timeout all come back as `CommandOutcome(success=False, ...)` with a
trimmed diagnostic. Callers decide per step whether that is fatal or a warning.

Output handling
- `capture=True`: stdout and stderr are collected; nothing is shown while the command runs. On
  failure the diagnostic is the captured stderr (falling back to stdout).
- `capture=False`: the child inherits the terminal, so its output streams live. On failure the
  runner logs the command, the error and the exit code.

There is no default timeout; a hung tool hangs the run. Pass `timeout=` (seconds) to bound it.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .log import Reporter

Command = list[str] | str


@dataclass(frozen=True)
class CommandOutcome:
    success: bool
    output: str = ""
    exit_code: int | None = None


def format_command(cmd: Command) -> str:
    if isinstance(cmd, str):
        return cmd
    return shlex.join(cmd)


class CommandRunner:
    def __init__(self, *, root: Path, log: Reporter, timeout: float | None = None) -> None:
        self.root = root
        self.log = log
        self.timeout = timeout

    def run(self, cmd: Command, *, capture: bool = False, input: str | None = None) -> CommandOutcome:
        shown = format_command(cmd)
        try:
            p = subprocess.run(
                cmd,
                cwd=str(self.root),
                shell=isinstance(cmd, str),
                text=True,
                input=input,
                capture_output=capture,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return self._failed(shown, f"timed out after {self.timeout}s", None, capture=capture)
        except OSError as e:
            return self._failed(shown, str(e), None, capture=capture)

        stdout = (p.stdout or "").strip() if capture else ""
        if p.returncode == 0:
            return CommandOutcome(success=True, output=stdout, exit_code=0)

        stderr = (p.stderr or "").strip() if capture else ""
        detail = stderr or stdout or f"command exited with status {p.returncode}"
        return self._failed(shown, detail, p.returncode, capture=capture)

    def _failed(self, shown: str, detail: str, exit_code: int | None, *, capture: bool) -> CommandOutcome:
        if not capture:
            self.log.error(f"Command failed: {shown}")
            if detail:
                self.log.error(f"Error: {detail}")
            if exit_code is not None:
                self.log.error(f"Exit code: {exit_code}")
        return CommandOutcome(success=False, output=detail, exit_code=exit_code)


class DryRunCommandRunner(CommandRunner):
    """Echoes commands instead of running them."""

    def run(self, cmd: Command, *, capture: bool = False, input: str | None = None) -> CommandOutcome:  # type: ignore[override]
        echo = f"[DRY RUN] {format_command(cmd)}"
        self.log.info(echo)
        return CommandOutcome(success=True, output=echo, exit_code=0)
