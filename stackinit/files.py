"""Create-if-absent file writing confined to the target root.

`SafeFileWriter.write_if_absent(relative_path, content)` is the only way stackinit creates files:

- Path safety: separators (`/` and `\\`) are normalized, the path is joined onto the root and
  resolved. Anything that does not land on the root or below it raises `PathTraversalError`.
  That covers `..` segments, absolute paths elsewhere, and symlinks pointing out of the root.
- No overwrite: an existing path returns `WriteResult.SKIPPED_EXISTS` and is left untouched. The
  final write uses exclusive-create mode, so a file that appears between the check and the write
  is also left alone.
- Live writes create missing parent directories first. Any `OSError` raises `FileWriteError`;
  a half-initialized target is not something to continue from silently.

`DryRunFileWriter` performs the same path-safety and existence checks but writes nothing and
returns `WriteResult.WOULD_CREATE`.

`remove_if_present` deletes a generated file that a template replaces. It gets the same path
checks, and the dry-run writer only reports the removal.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from .context import ExecutionContext
from .errors import FileWriteError, PathTraversalError
from .log import Reporter

_SEPARATORS = re.compile(r"[/\\]+")


class WriteResult(str, Enum):
    CREATED = "created"
    SKIPPED_EXISTS = "skipped-exists"
    WOULD_CREATE = "would-create"


def is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def source_files(source_dir: Path) -> list[tuple[str, Path]]:
    """Files under `source_dir` in sorted order, paired with their POSIX path relative to it."""
    return [(p.relative_to(source_dir).as_posix(), p) for p in sorted(source_dir.rglob("*")) if p.is_file()]


class SafeFileWriter:
    def __init__(self, *, ctx: ExecutionContext, log: Reporter) -> None:
        self.ctx = ctx
        self.log = log

    def resolve(self, relative_path: str) -> Path:
        """Resolve `relative_path` under the root or raise `PathTraversalError`."""
        parts = [p for p in _SEPARATORS.split(relative_path) if p]
        normalized = "/".join(parts)
        if relative_path[:1] in ("/", "\\"):
            normalized = "/" + normalized
        full = (self.ctx.root / normalized).resolve()
        if not is_within(full, self.ctx.root):
            self.log.error(f'Security: path traversal detected in "{relative_path}"')
            raise PathTraversalError(f"Refusing to write outside {self.ctx.root}: {relative_path!r}")
        return full

    def write_if_absent(self, relative_path: str, content: str, *, description: str | None = None) -> WriteResult:
        full = self.resolve(relative_path)
        if full.exists():
            self.log.skip(f"{relative_path} already exists")
            return WriteResult.SKIPPED_EXISTS
        return self._create(full, relative_path, content, description=description)

    def copy_tree_if_absent(self, source_dir: Path, relative_dir: str) -> list[WriteResult]:
        """Copy every file under `source_dir` to `relative_dir` via `write_if_absent`.

        All sources are read before the first write, so an unreadable file leaves the destination
        untouched instead of half-copied.
        """
        contents = [(rel, src.read_text(encoding="utf-8")) for rel, src in source_files(source_dir)]
        return [self.write_if_absent(f"{relative_dir}/{rel}", content) for rel, content in contents]

    def remove_if_present(self, relative_path: str) -> bool:
        """Delete a file under the root; return whether there was one. `FileWriteError` on failure."""
        full = self.resolve(relative_path)
        if not full.is_file():
            return False
        return self._remove(full, relative_path)

    def _remove(self, full: Path, relative_path: str) -> bool:
        try:
            full.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FileWriteError(f"Failed to remove {relative_path}: {e}") from e
        self.log.info(f"Removed {relative_path}")
        return True

    def _create(self, full: Path, relative_path: str, content: str, *, description: str | None) -> WriteResult:
        parent = full.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileWriteError(f"Failed to create directory {parent}: {e}") from e

        try:
            with full.open("x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            self.log.skip(f"{relative_path} already exists")
            return WriteResult.SKIPPED_EXISTS
        except OSError as e:
            raise FileWriteError(f"Failed to write {relative_path}: {e}") from e

        suffix = f" - {description}" if description else ""
        self.log.ok(f"Created {relative_path}{suffix}")
        return WriteResult.CREATED


class DryRunFileWriter(SafeFileWriter):
    def _create(self, full: Path, relative_path: str, content: str, *, description: str | None) -> WriteResult:  # type: ignore[override]
        self.log.info(f"[DRY RUN] Would create: {relative_path}")
        return WriteResult.WOULD_CREATE

    def _remove(self, full: Path, relative_path: str) -> bool:  # type: ignore[override]
        self.log.info(f"[DRY RUN] Would remove: {relative_path}")
        return True
