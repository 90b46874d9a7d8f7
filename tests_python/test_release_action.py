"""Lightweight checks for the release composite action and workflow."""

from __future__ import annotations

from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
ACTION_FILE = REPO_ROOT / ".github" / "actions" / "release" / "action.yml"
WORKFLOW_FILE = REPO_ROOT / ".github" / "workflows" / "publish.yml"


def test_action_declares_archive_outputs() -> None:
    """The composite action should expose the packaged archive details."""

    content = ACTION_FILE.read_text(encoding="utf-8")

    for name in ("archive_path", "asset_name", "checksum"):
        assert f"steps.run-package.outputs.{name}" in content


def test_action_installs_uv() -> None:
    """The composite action must ensure ``uv`` is available."""

    content = ACTION_FILE.read_text(encoding="utf-8")

    assert "uses: astral-sh/setup-uv@" in content
    assert "python-version: '3.11'" in content


def test_action_invokes_package_script() -> None:
    """The action should run the packaging script via ``uv run``."""

    content = ACTION_FILE.read_text(encoding="utf-8")

    assert "uv run" in content
    assert "scripts/package.py" in content


def test_workflow_verifies_tag_before_building() -> None:
    """The tag check step precedes ``cargo build`` in the publish workflow."""

    content = WORKFLOW_FILE.read_text(encoding="utf-8")

    assert "scripts/verify_tag.py" in content
    assert content.index("scripts/verify_tag.py") < content.index("cargo build")


def test_workflow_runs_intel_macos_job_on_intel_runner() -> None:
    """Archive labels come from ``uname``, so the x86_64 job needs an Intel host."""

    content = WORKFLOW_FILE.read_text(encoding="utf-8")

    assert "- os: macos-13\n            target: darwin-x86_64" in content
