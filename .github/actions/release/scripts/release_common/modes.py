"""Decide which release steps a workflow run should perform."""

from __future__ import annotations

import dataclasses
import typing as typ

from .environment import coerce_bool
from .refs import parse_ref

__all__ = ["ReleaseModes", "determine_release_modes"]

_DISPATCH_EVENTS = frozenset({"workflow_dispatch", "workflow_call"})


@dataclasses.dataclass(frozen=True, slots=True)
class ReleaseModes:
    """Flags consumed by the publish workflow."""

    dry_run: bool
    should_publish: bool
    should_verify_tag: bool

    def as_outputs(self) -> dict[str, str]:
        """Return the flags as lowercase workflow output strings."""
        return {
            field.name: str(getattr(self, field.name)).lower()
            for field in dataclasses.fields(self)
        }


def determine_release_modes(
    event_name: str, ref: str, event: typ.Mapping[str, typ.Any]
) -> ReleaseModes:
    """Return the release modes for ``event_name`` triggered at ``ref``.

    Pushes of ``vX.Y.Z`` tags publish and verify. Branch pushes such as
    ``main`` and tags that are not version tags only build. Manual dispatches
    honour the ``dry-run`` and ``publish`` inputs, and pull requests always
    run dry.

    Raises
    ------
    ValueError
        If ``event_name`` is not a supported trigger or an input is not a
        recognisable boolean.
    """
    is_release_tag = parse_ref(ref).is_version_tag

    if event_name == "push":
        return ReleaseModes(
            dry_run=False,
            should_publish=is_release_tag,
            should_verify_tag=is_release_tag,
        )
    if event_name == "pull_request":
        return ReleaseModes(dry_run=True, should_publish=False, should_verify_tag=False)
    if event_name in _DISPATCH_EVENTS:
        inputs = event.get("inputs") or {}
        dry_run = coerce_bool(inputs.get("dry-run", False))
        publish = coerce_bool(inputs.get("publish", False))
        return ReleaseModes(
            dry_run=dry_run,
            should_publish=publish and is_release_tag and not dry_run,
            should_verify_tag=is_release_tag,
        )
    message = f"Unsupported event '{event_name}'"
    raise ValueError(message)
