"""stackinit pipeline: a fixed, linear sequence of idempotent provisioning steps.

Each `Step` bundles:
- `satisfied`: an already-satisfied predicate, evaluated against the filesystem. When it holds the
  step is recorded as `already-satisfied` and nothing else happens. This is what makes re-runs
  safe: a second run only performs the work the first one did not finish.
- `requires` / `precondition`: the dependency gate. Missing tools (per `ToolProbe`) or a missing
  non-tool dependency record `skipped-missing-tool` with install guidance.
- `action`: the work itself, built from the collaborators in `Toolkit` (command runner, file
  writer, ignore-list editor). It returns a short detail string on success or raises `StepFailed`.

Lifecycle of `StepPipeline.run()`
1. Optional preflight (`check_tools`): list every tool any step needs, warn about missing ones.
2. For every step, in order: announce, check the predicate, check the gate, run the action.
3. Record exactly one `StepOutcome` per step and continue regardless of its status; a failed or
   skipped step never stops the steps after it.
4. Return the `RunReport` (outcomes in step order plus the warnings collected along the way).

Fatal errors (`SetupError`: path traversal, failed writes) are not caught here. They propagate to
the CLI, which exits 1 without attempting further steps.

Simulation is not handled here at all: the CLI puts dry-run collaborators into the `Toolkit`, and
step code behaves identically in both modes.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .context import ExecutionContext
from .errors import StepFailed
from .files import SafeFileWriter
from .ignore import IgnoreListEditor
from .log import Reporter
from .probe import ToolProbe
from .runner import CommandRunner


class StepStatus(str, Enum):
    DONE = "done"
    ALREADY_SATISFIED = "already-satisfied"
    SKIPPED_MISSING_TOOL = "skipped-missing-tool"
    FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    name: str
    status: StepStatus
    detail: str = ""


@dataclass(frozen=True)
class Toolkit:
    ctx: ExecutionContext
    runner: CommandRunner
    probe: ToolProbe
    writer: SafeFileWriter
    ignore: IgnoreListEditor
    log: Reporter
    skills_dir: Path | None = None
    install_hints: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def warn(self, msg: str) -> None:
        self.log.warn(msg)
        self.warnings.append(msg)

    def exists(self, relative_path: str) -> bool:
        return (self.ctx.root / relative_path).exists()


@dataclass(frozen=True)
class Step:
    name: str
    title: str
    action: Callable[[Toolkit], str | None]
    satisfied: Callable[[Toolkit], bool] | None = None
    satisfied_note: str | None = None
    requires: tuple[str, ...] = ()
    # Returns a description of the missing dependency, or None when it is present.
    precondition: Callable[[Toolkit], str | None] | None = None
    guidance: str | None = None


@dataclass
class RunReport:
    outcomes: list[StepOutcome] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def counts(self) -> Counter[StepStatus]:
        return Counter(o.status for o in self.outcomes)

    @property
    def failed(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.status == StepStatus.FAILED]

    def render(self, log: Reporter) -> None:
        log.section("\nSummary")
        for o in self.outcomes:
            line = f"{o.name}: {o.status.value}" + (f" - {o.detail}" if o.detail else "")
            if o.status == StepStatus.DONE:
                log.ok(line)
            elif o.status == StepStatus.FAILED:
                log.error(line)
            elif o.status == StepStatus.SKIPPED_MISSING_TOOL:
                log.warn(line)
            else:
                log.skip(line)

        if self.warnings:
            log.section("\nWarnings")
            for w in self.warnings:
                log.warn(w)

        counts = self.counts()
        log.info(", ".join(f"{s.value}={counts.get(s, 0)}" for s in StepStatus))


class StepPipeline:
    def __init__(self, *, steps: Sequence[Step], kit: Toolkit) -> None:
        self.steps = list(steps)
        self.kit = kit

    def required_tools(self) -> list[str]:
        seen: list[str] = []
        for step in self.steps:
            for tool in step.requires:
                if tool not in seen:
                    seen.append(tool)
        return seen

    def check_tools(self) -> list[str]:
        """Log availability of every required tool; return the missing ones."""
        self.kit.log.step("Checking required tools")
        missing: list[str] = []
        for tool in self.required_tools():
            if self.kit.probe.is_available(tool):
                self.kit.log.ok(tool)
                continue
            missing.append(tool)
            self.kit.warn(f"{tool} not found - install: {self._hint(tool)}")
        if missing and not self.kit.ctx.simulate:
            self.kit.log.warn("Some tools are missing. Continuing anyway - affected steps will be skipped.")
        return missing

    def run(self, *, preflight: bool = True) -> RunReport:
        mark = len(self.kit.warnings)
        if preflight:
            self.check_tools()

        report = RunReport()
        for step in self.steps:
            report.outcomes.append(self._run_step(step))
        report.warnings = list(self.kit.warnings[mark:])
        return report

    def _run_step(self, step: Step) -> StepOutcome:
        log = self.kit.log
        log.step(step.title)

        if step.satisfied is not None and step.satisfied(self.kit):
            note = step.satisfied_note or "already satisfied"
            log.skip(note)
            return StepOutcome(name=step.name, status=StepStatus.ALREADY_SATISFIED, detail=note)

        missing = [t for t in step.requires if not self.kit.probe.is_available(t)]
        if missing:
            detail = "; ".join(f"{t} not found - install: {self._hint(t)}" for t in missing)
            log.warn(f"{detail} (skipping)")
            return StepOutcome(name=step.name, status=StepStatus.SKIPPED_MISSING_TOOL, detail=detail)

        if step.precondition is not None:
            absent = step.precondition(self.kit)
            if absent:
                log.warn(f"{absent} (skipping)")
                return StepOutcome(name=step.name, status=StepStatus.SKIPPED_MISSING_TOOL, detail=absent)

        try:
            detail = step.action(self.kit)
        except StepFailed as e:
            guidance = e.guidance or step.guidance
            detail = e.detail + (f" - run manually: {guidance}" if guidance else "")
            log.warn(detail)
            return StepOutcome(name=step.name, status=StepStatus.FAILED, detail=detail)

        return StepOutcome(name=step.name, status=StepStatus.DONE, detail=detail or "")

    def _hint(self, tool: str) -> str:
        return self.kit.install_hints.get(tool, "see the tool's documentation")
