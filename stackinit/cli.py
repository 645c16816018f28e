"""stackinit.cli

Command-line entrypoint for stackinit, an idempotent initializer that provisions a project
directory with OpenSpec, Beads, claude-mem and two Claude Code skills.

Entry points
- `stackinit.cli:main`
- `python3 -m stackinit ...` (delegates to this module)

Usage
- `stackinit`                 provision the current directory
- `stackinit ./my-project`    provision a specific directory
- `stackinit --dry-run`       report what would happen without changing anything

Positional argument
- `target`: directory to provision (default: current working directory). It must exist, be a
  directory, and be writable; otherwise stackinit exits 1 before running any step.

Flags
- `--dry-run` / `-n`: simulation mode. No external command runs and no file is written; each
  would-be action is printed instead.
- `--skills-dir <path>`: directory holding bundled skills (`migrate-to-openspec/`). Falls back to
  `$STACKINIT_SKILLS_DIR`; when neither is set the skill step is skipped.
- `--timeout <seconds>`: upper bound for each external command. Falls back to
  `$STACKINIT_COMMAND_TIMEOUT`; default is no timeout.
- `--no-color`: plain output (also honored: `$NO_COLOR`).

Exit status
- 0 when the run completes, even if individual steps failed or were skipped (they are listed
  in the summary).
- 1 on fatal errors: invalid or unwritable target, a path escaping the target, or a failed
  write.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .context import ExecutionContext
from .errors import SetupError
from .files import DryRunFileWriter, SafeFileWriter
from .ignore import DryRunIgnoreListEditor, IgnoreListEditor
from .log import ConsoleReporter, Reporter
from .pipeline import StepPipeline, Toolkit
from .probe import ToolProbe
from .runner import CommandRunner, DryRunCommandRunner
from .steps import INSTALL_HINTS, default_steps
from .templates import NEXT_STEPS


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stackinit",
        description="Idempotent initializer for OpenSpec + Beads + claude-mem + skills.",
    )
    p.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Directory to provision (default: current directory).",
    )
    p.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Preview every action without executing commands or writing files.",
    )
    p.add_argument(
        "--skills-dir",
        default=None,
        help="Directory containing bundled skills (default: $STACKINIT_SKILLS_DIR).",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds before an external command is abandoned (default: $STACKINIT_COMMAND_TIMEOUT or none).",
    )
    p.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors in output.",
    )
    return p


def build_toolkit(*, ctx: ExecutionContext, log: Reporter, skills_dir: Path | None, timeout: float | None) -> Toolkit:
    if ctx.simulate:
        runner: CommandRunner = DryRunCommandRunner(root=ctx.root, log=log, timeout=timeout)
        writer: SafeFileWriter = DryRunFileWriter(ctx=ctx, log=log)
        ignore: IgnoreListEditor = DryRunIgnoreListEditor(ctx=ctx, log=log)
    else:
        runner = CommandRunner(root=ctx.root, log=log, timeout=timeout)
        writer = SafeFileWriter(ctx=ctx, log=log)
        ignore = IgnoreListEditor(ctx=ctx, log=log)
    return Toolkit(
        ctx=ctx,
        runner=runner,
        probe=ToolProbe(),
        writer=writer,
        ignore=ignore,
        log=log,
        skills_dir=skills_dir,
        install_hints=dict(INSTALL_HINTS),
    )


def _resolve_timeout(arg: float | None) -> float | None:
    if arg is not None:
        return arg if arg > 0 else None
    raw = os.environ.get("STACKINIT_COMMAND_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise SystemExit(f"stackinit: invalid STACKINIT_COMMAND_TIMEOUT: {raw!r}") from None
    return value if value > 0 else None


def _resolve_skills_dir(arg: str | None) -> Path | None:
    raw = arg or os.environ.get("STACKINIT_SKILLS_DIR")
    return Path(raw).expanduser().resolve() if raw else None


def _banner(log: Reporter, ctx: ExecutionContext) -> None:
    log.section("stackinit - OpenSpec + Beads + claude-mem + skills")
    log.section(f"  Project : {ctx.project_name}")
    log.section(f"  Path    : {ctx.root}")
    log.section(f"  Mode    : {'DRY RUN (no changes)' if ctx.simulate else 'LIVE'}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    log = ConsoleReporter(color=False if args.no_color else None)
    timeout = _resolve_timeout(args.timeout)
    skills_dir = _resolve_skills_dir(args.skills_dir)

    try:
        ctx = ExecutionContext.resolve(args.target, simulate=bool(args.dry_run))
        _banner(log, ctx)
        ctx.verify_writable()

        kit = build_toolkit(ctx=ctx, log=log, skills_dir=skills_dir, timeout=timeout)
        report = StepPipeline(steps=default_steps(), kit=kit).run()
    except SetupError as e:
        log.error(str(e))
        return 1

    report.render(log)
    log.section("\n" + NEXT_STEPS)
    return 0
