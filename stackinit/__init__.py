"""stackinit: idempotent setup orchestrator for an OpenSpec + Beads + claude-mem project stack.

This package implements a CLI (`stackinit.cli:main`, runnable via `python -m stackinit`) that
provisions a target directory through a fixed, linear sequence of steps. Each step either invokes
an external tool, writes a file, or edits `.gitignore`.

What stackinit provides
- An execution context (`stackinit.context.ExecutionContext`) that resolves and validates the target
  root once per run.
- Collaborators with a live and a dry-run implementation each:
  - `stackinit.runner`: external commands (argument vectors, never raising on failure),
  - `stackinit.files`: create-if-absent writes confined to the target root,
  - `stackinit.ignore`: duplicate-free `.gitignore` entries.
- A PATH probe (`stackinit.probe.ToolProbe`) to gate steps on installed tools.
- The pipeline (`stackinit.pipeline.StepPipeline`) that runs every step, records one outcome per
  step, and never stops at a step failure.

Important invariants
- Re-running is safe: every step checks the filesystem first and only does the remaining work.
- Nothing is written outside the target root, and existing files are never overwritten.
- `--dry-run` runs no external command and writes nothing.
- Only fatal errors (invalid/unwritable target, path traversal, failed writes) produce exit
  status 1; step failures are reported and the run exits 0.

Key exports from this module
- `__version__`: the package version string. (`__all__` is intentionally limited to this.)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
