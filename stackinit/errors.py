"""Error taxonomy for stackinit.

Two kinds of failure exist:

- Fatal (`SetupError` and subclasses): the target directory is unusable or a write could leave it
  half-initialized. These propagate out of the pipeline; the CLI logs them and exits 1.
- Step-local (`StepFailed`): raised by a step action and converted by the pipeline into a
  `failed` outcome. The run continues with the next step.

Command failures are neither: `CommandRunner.run()` reports them as a `CommandOutcome` value.
"""

from __future__ import annotations


class SetupError(RuntimeError):
    """Fatal precondition or I/O failure; aborts the whole run."""


class InvalidTarget(SetupError):
    pass


class PermissionDenied(SetupError):
    pass


class PathTraversalError(SetupError):
    pass


class FileWriteError(SetupError):
    pass


class StepFailed(Exception):
    """A single step could not complete; the pipeline records it and moves on."""

    def __init__(self, detail: str, *, guidance: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.guidance = guidance
