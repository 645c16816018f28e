from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from stackinit import runner as runner_mod
from stackinit.runner import CommandOutcome, CommandRunner, DryRunCommandRunner, format_command


class RecordingReporter:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def _rec(self, level: str, msg: str) -> None:
        self.lines.append((level, msg))

    def info(self, msg: str) -> None:
        self._rec("info", msg)

    def ok(self, msg: str) -> None:
        self._rec("ok", msg)

    def warn(self, msg: str) -> None:
        self._rec("warn", msg)

    def skip(self, msg: str) -> None:
        self._rec("skip", msg)

    def error(self, msg: str) -> None:
        self._rec("error", msg)

    def step(self, msg: str) -> None:
        self._rec("step", msg)

    def section(self, msg: str) -> None:
        self._rec("section", msg)


def test_format_command_quotes_argv_and_passes_strings_through() -> None:
    assert format_command(["bd", "create", "two words"]) == "bd create 'two words'"
    assert format_command("echo N | bd init") == "echo N | bd init"


def test_dry_run_echoes_without_executing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log = RecordingReporter()
    monkeypatch.setattr(
        runner_mod.subprocess, "run", lambda *a, **k: (_ for _ in ()).throw(AssertionError("executed"))
    )

    out = DryRunCommandRunner(root=tmp_path, log=log).run(["openspec", "init", "--force"], capture=True)

    assert out == CommandOutcome(success=True, output="[DRY RUN] openspec init --force", exit_code=0)
    assert log.lines == [("info", "[DRY RUN] openspec init --force")]


def test_live_success_captures_stdout_and_runs_in_root(tmp_path: Path) -> None:
    log = RecordingReporter()
    cmd = [sys.executable, "-c", "import os; print(os.getcwd())"]

    out = CommandRunner(root=tmp_path, log=log).run(cmd, capture=True)

    assert out.success is True
    assert out.exit_code == 0
    assert Path(out.output).resolve() == tmp_path.resolve()
    assert log.lines == []


def test_live_failure_returns_trimmed_stderr_and_exit_code(tmp_path: Path) -> None:
    log = RecordingReporter()
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('  boom  \\n'); sys.exit(3)"]

    out = CommandRunner(root=tmp_path, log=log).run(cmd, capture=True)

    assert out == CommandOutcome(success=False, output="boom", exit_code=3)
    # Captured failures are left for the caller to report.
    assert log.lines == []


def test_live_failure_without_capture_logs_command_and_exit_code(tmp_path: Path) -> None:
    log = RecordingReporter()
    cmd = [sys.executable, "-c", "import sys; sys.exit(5)"]

    out = CommandRunner(root=tmp_path, log=log).run(cmd)

    assert out.success is False
    assert out.exit_code == 5
    levels = [level for level, _ in log.lines]
    assert levels and set(levels) == {"error"}
    assert log.lines[0][1].startswith("Command failed: ")
    assert ("error", "Exit code: 5") in log.lines


def test_live_input_is_fed_to_stdin(tmp_path: Path) -> None:
    cmd = [sys.executable, "-c", "import sys; print(sys.stdin.read().strip().lower())"]

    out = CommandRunner(root=tmp_path, log=RecordingReporter()).run(cmd, capture=True, input="N\n")

    assert out.success is True
    assert out.output == "n"


def test_spawn_error_is_a_failed_outcome_not_an_exception(tmp_path: Path) -> None:
    log = RecordingReporter()

    out = CommandRunner(root=tmp_path, log=log).run(["stackinit-no-such-binary-xyz", "--version"], capture=True)

    assert out.success is False
    assert out.exit_code is None
    assert out.output


def test_timeout_is_a_failed_outcome(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: object, **kwargs: object) -> SimpleNamespace:
        assert kwargs["timeout"] == 2.5
        raise subprocess.TimeoutExpired(cmd="x", timeout=2.5)

    monkeypatch.setattr(runner_mod.subprocess, "run", fake_run)

    out = CommandRunner(root=tmp_path, log=RecordingReporter(), timeout=2.5).run(["slow"], capture=True)

    assert out == CommandOutcome(success=False, output="timed out after 2.5s", exit_code=None)


def test_argv_runs_without_shell_and_strings_with_shell(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_run(cmd: object, **kwargs: object) -> SimpleNamespace:
        calls.append({"cmd": cmd, **kwargs})
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr(runner_mod.subprocess, "run", fake_run)
    r = CommandRunner(root=tmp_path, log=RecordingReporter())

    r.run(["bd", "setup", "claude"])
    r.run("echo N | bd init --quiet")

    assert calls[0]["cmd"] == ["bd", "setup", "claude"]
    assert calls[0]["shell"] is False
    assert calls[0]["cwd"] == str(tmp_path)
    assert calls[0]["capture_output"] is False
    assert calls[1]["shell"] is True
    assert all(c["check"] is False for c in calls)
