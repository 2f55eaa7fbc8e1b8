"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_working_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run every test from an empty directory so a developer's config.local.yaml never leaks in."""
    monkeypatch.chdir(tmp_path)
