"""Idempotent edits to the project's `.gitignore`.

The file is treated as a set of patterns layered over plain text lines: `ensure_entry()` appends
a blank line, a `# comment` line and the pattern, unless the raw file content already contains
the pattern as a substring. Repeated runs therefore never duplicate an entry. Any mention of the
pattern counts as present (including inside a comment); the file is never parsed or rewritten,
only appended to.

The file may hold bytes that are not valid UTF-8 (git does not care). They are read with
`surrogateescape` so the substring check still works and the existing content is never touched.
"""

from __future__ import annotations

from pathlib import Path

from .context import ExecutionContext
from .errors import FileWriteError
from .log import Reporter

IGNORE_FILENAME = ".gitignore"


class IgnoreListEditor:
    def __init__(self, *, ctx: ExecutionContext, log: Reporter, filename: str = IGNORE_FILENAME) -> None:
        self.ctx = ctx
        self.log = log
        self.filename = filename

    @property
    def path(self) -> Path:
        return self.ctx.root / self.filename

    def read(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as e:
            raise FileWriteError(f"Failed to read {self.filename}: {e}") from e

    def contains(self, pattern: str) -> bool:
        return pattern in self.read()

    def ensure_entry(self, pattern: str, comment: str) -> None:
        if not self.path.exists():
            self._create_empty()
        if self.contains(pattern):
            return
        self._append(pattern, comment)

    def _create_empty(self) -> None:
        try:
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            raise FileWriteError(f"Failed to create {self.filename}: {e}") from e

    def _append(self, pattern: str, comment: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(f"\n# {comment}\n{pattern}\n")
        except OSError as e:
            raise FileWriteError(f"Failed to update {self.filename}: {e}") from e
        self.log.info(f"  {self.filename} <- {pattern}")


class DryRunIgnoreListEditor(IgnoreListEditor):
    def _create_empty(self) -> None:  # type: ignore[override]
        self.log.info(f"[DRY RUN] Would create: {self.filename}")

    def _append(self, pattern: str, comment: str) -> None:  # type: ignore[override]
        self.log.info(f"[DRY RUN] Would add to {self.filename}: {pattern}")
