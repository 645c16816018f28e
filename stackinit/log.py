"""Terminal reporting for stackinit.

Every component receives a `Reporter` explicitly; nothing logs through module-level state.
`ConsoleReporter` writes tagged lines (`[INFO]`, `[ OK ]`, `[WARN]`, `[SKIP]`, `[ERR ]`) and
`==> title` step headers. Colors are applied only when the stream is a terminal and `NO_COLOR`
is not set.
"""

from __future__ import annotations

import os
import sys
from typing import Protocol, TextIO


class Reporter(Protocol):
    def info(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def skip(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def step(self, msg: str) -> None: ...

    def section(self, msg: str) -> None: ...


ANSI_COLORS = {
    "bold": "1",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "cyan": "36",
}


def colorize(text: str, *, color: str, enabled: bool = True) -> str:
    code = ANSI_COLORS.get(color)
    if not enabled or code is None:
        return text
    return f"\033[{code}m{text}\033[0m"


def color_enabled(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ConsoleReporter:
    def __init__(self, *, out: TextIO | None = None, err: TextIO | None = None, color: bool | None = None) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.color = color_enabled(self.out) if color is None else color

    def _emit(self, stream: TextIO, text: str) -> None:
        stream.write(text + "\n")
        stream.flush()

    def _tagged(self, tag: str, color: str, msg: str) -> str:
        return f"{colorize(tag, color=color, enabled=self.color)} {msg}"

    def info(self, msg: str) -> None:
        self._emit(self.out, self._tagged("[INFO]", "blue", msg))

    def ok(self, msg: str) -> None:
        self._emit(self.out, self._tagged("[ OK ]", "green", msg))

    def warn(self, msg: str) -> None:
        self._emit(self.out, self._tagged("[WARN]", "yellow", msg))

    def skip(self, msg: str) -> None:
        self._emit(self.out, self._tagged("[SKIP]", "yellow", msg))

    def error(self, msg: str) -> None:
        self._emit(self.err, self._tagged("[ERR ]", "red", msg))

    def step(self, msg: str) -> None:
        header = colorize(f"==> {msg}", color="cyan", enabled=self.color)
        self._emit(self.out, f"\n{header}")

    def section(self, msg: str) -> None:
        self._emit(self.out, colorize(msg, color="bold", enabled=self.color))
