"""Guardrails for packaging configuration."""

from __future__ import annotations

import tomllib
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
PYPROJECT_PATH = REPO_ROOT / "pyproject.toml"


def _load_pyproject() -> dict:
    return tomllib.loads(PYPROJECT_PATH.read_text(encoding="utf-8"))


def test_wheel_includes_package() -> None:
    pyproject = _load_pyproject()
    wheel_cfg = pyproject.get("tool", {}).get("hatch", {}).get("build", {}).get("targets", {}).get("wheel", {})
    assert wheel_cfg.get("packages") == ["dossier"]


def test_runtime_dependencies_declared() -> None:
    deps = " ".join(_load_pyproject()["project"]["dependencies"])
    for name in ("beautifulsoup4", "pydantic", "python-docx", "pyyaml"):
        assert name in deps
