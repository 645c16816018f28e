from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidTarget, PermissionDenied

PROBE_PREFIX = ".stackinit-probe-"


@dataclass(frozen=True)
class ExecutionContext:
    """The resolved target root plus the run mode.

    `root` is the only directory stackinit is allowed to mutate.
    """

    root: Path
    simulate: bool = False

    @property
    def project_name(self) -> str:
        return self.root.name

    @classmethod
    def resolve(cls, raw_path: str | None, *, simulate: bool = False) -> "ExecutionContext":
        root = (Path(raw_path).expanduser() if raw_path else Path.cwd()).resolve()
        if not root.exists():
            raise InvalidTarget(f"Directory not found: {root}")
        if not root.is_dir():
            raise InvalidTarget(f"Target path is not a directory: {root}")
        return cls(root=root, simulate=simulate)

    def verify_writable(self) -> None:
        """Create and remove a probe file; raise `PermissionDenied` on any OS error.

        Runs in dry-run mode too: the probe leaves the tree exactly as it found it.
        """
        probe = self.root / f"{PROBE_PREFIX}{uuid.uuid4().hex}"
        try:
            probe.touch(exist_ok=False)
            probe.unlink()
        except OSError as e:
            raise PermissionDenied(f"No write permission for directory: {self.root} ({e})") from e
