"""Shared pytest fixtures for workshop.cli tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in list(os.environ):
        if key.startswith("WORKSHOP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / ".env"))
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from workshop.infra.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def audience_file(tmp_path: Path) -> Path:
    return tmp_path / "audience.yaml"
