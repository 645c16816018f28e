from __future__ import annotations

import shutil


class ToolProbe:
    """PATH lookup for external tools. Never runs the tool."""

    def __init__(self, *, path: str | None = None) -> None:
        # None means the process PATH.
        self.path = path

    def is_available(self, name: str) -> bool:
        return shutil.which(name, path=self.path) is not None
