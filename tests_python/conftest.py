"""Shared fixtures for the release helper test suite."""

from __future__ import annotations

import importlib
import sys
import typing as typ
from pathlib import Path
from types import ModuleType

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
MODULE_DIR = REPO_ROOT / ".github" / "actions" / "release" / "scripts"
WORKFLOW_SCRIPTS_DIR = REPO_ROOT / ".github" / "workflows" / "scripts"


@pytest.fixture(scope="session")
def release_common() -> ModuleType:
    """Load the release helper package once for reuse across tests."""
    sys_path = str(MODULE_DIR)

    sys.path.insert(0, sys_path)
    try:
        return importlib.import_module("release_common")
    finally:
        sys.path.remove(sys_path)


@pytest.fixture
def release_module(release_common: ModuleType) -> typ.Callable[[str], ModuleType]:
    """Return a loader for ``release_common`` submodules."""

    def _load(name: str) -> ModuleType:
        return importlib.import_module(f"release_common.{name}")

    return _load


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated workspace and set ``GITHUB_WORKSPACE`` accordingly."""
    root = tmp_path / "workspace"
    root.mkdir()
    monkeypatch.setenv("GITHUB_WORKSPACE", str(root))
    return root


@pytest.fixture
def github_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``GITHUB_OUTPUT`` at a fresh file under ``tmp_path``."""
    path = tmp_path / "github_output.txt"
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path


@pytest.fixture
def clean_ref_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every ref variable the helpers consult."""
    for name in ("RELEASE_REF", "GITHUB_REF", "GITHUB_REF_NAME"):
        monkeypatch.delenv(name, raising=False)
