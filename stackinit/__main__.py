"""Module entrypoint for ``python -m stackinit``.

A thin wrapper around :func:`stackinit.cli.main`; the CLI return code becomes the process exit
status. Equivalent to the ``stackinit`` console script configured in ``pyproject.toml``.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
