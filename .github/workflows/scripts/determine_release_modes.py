#!/usr/bin/env python3
"""Derive the publish workflow's release modes from the triggering event.

Reads ``GITHUB_EVENT_NAME``, ``GITHUB_REF`` and the JSON payload at
``GITHUB_EVENT_PATH`` and writes ``dry_run``, ``should_publish`` and
``should_verify_tag`` to ``GITHUB_OUTPUT``.
"""

from __future__ import annotations

import json
import os
import sys
import typing as typ
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parent
MODULE_DIR = SCRIPTS_DIR.parent.parent / "actions" / "release" / "scripts"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

from release_common.errors import ReleaseError  # noqa: E402 - after sys.path mutation
from release_common.github_output import (  # noqa: E402
    annotate,
    write_github_output,
)
from release_common.modes import (  # noqa: E402
    ReleaseModes,
    determine_release_modes,
)

__all__ = ["ReleaseModes", "determine_release_modes", "main"]


def _load_event(path_text: str | None) -> dict[str, typ.Any]:
    if not path_text:
        return {}
    path = Path(path_text)
    if not path.is_file():
        return {}
    payload = json.loads(path.read_text(encoding="utf-8") or "{}")
    if not isinstance(payload, dict):
        message = f"Event payload at {path} is not a JSON object"
        raise ReleaseError(message)
    return payload


def main() -> int:
    """Compute release modes for the current run and export them."""
    try:
        event_name = os.environ["GITHUB_EVENT_NAME"]
        github_output = Path(os.environ["GITHUB_OUTPUT"])
    except KeyError as exc:
        annotate("error", "Configuration Error", f"Missing env {exc}")
        return 1

    try:
        event = _load_event(os.environ.get("GITHUB_EVENT_PATH"))
        modes = determine_release_modes(
            event_name, os.environ.get("GITHUB_REF", ""), event
        )
    except (json.JSONDecodeError, ReleaseError, TypeError, ValueError) as exc:
        annotate("error", "Release Mode Error", str(exc))
        return 1

    write_github_output(github_output, modes.as_outputs())
    return 0


if __name__ == "__main__":  # pragma: no cover - invoked by GitHub Actions
    raise SystemExit(main())
