from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_shellbase_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in list(os.environ):
        if name.startswith("SHELLBASE_"):
            monkeypatch.delenv(name)
    # ShellSettings reads .env from the working directory.
    monkeypatch.chdir(tmp_path)
