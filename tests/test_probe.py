from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from stackinit.probe import ToolProbe


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX executable bits")
def test_is_available_finds_executable_on_path(tmp_path: Path) -> None:
    tool = tmp_path / "fake-tool"
    tool.write_text("#!/bin/sh\nexit 99\n", encoding="utf-8")
    tool.chmod(tool.stat().st_mode | stat.S_IXUSR)

    probe = ToolProbe(path=str(tmp_path))

    assert probe.is_available("fake-tool") is True
    assert probe.is_available("other-tool") is False


def test_is_available_uses_process_path_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATH", str(tmp_path))

    assert ToolProbe().is_available("definitely-not-installed-stackinit-tool") is False


def test_is_available_never_executes_the_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    import stackinit.probe as probe_mod

    seen: list[tuple[str, str | None]] = []

    def fake_which(name: str, path: str | None = None) -> str | None:
        seen.append((name, path))
        return os.path.join("/opt/bin", name)

    monkeypatch.setattr(probe_mod.shutil, "which", fake_which)
    monkeypatch.setattr(
        "subprocess.run", lambda *a, **k: (_ for _ in ()).throw(AssertionError("must not execute"))
    )

    assert ToolProbe().is_available("bd") is True
    assert seen == [("bd", None)]
