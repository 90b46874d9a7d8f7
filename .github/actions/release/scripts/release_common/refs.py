"""Parse the source-control ref that triggered a pipeline run."""

from __future__ import annotations

import dataclasses
import enum
import re

__all__ = [
    "RefKind",
    "ReleaseRef",
    "TAG_PATTERN",
    "parse_ref",
    "release_version",
]

TAG_PATTERN = re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+")

_TAG_PREFIX = "refs/tags/"
_BRANCH_PREFIX = "refs/heads/"


class RefKind(enum.Enum):
    """Classification of a triggering ref."""

    TAG = "tag"
    BRANCH = "branch"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True, slots=True)
class ReleaseRef:
    """Short ref name paired with its classification."""

    name: str
    kind: RefKind

    @property
    def is_version_tag(self) -> bool:
        """Return ``True`` when the ref is a tag that starts with ``vX.Y.Z``."""
        return self.kind is RefKind.TAG and TAG_PATTERN.match(self.name) is not None


def parse_ref(ref: str) -> ReleaseRef:
    """Classify ``ref`` and reduce fully-qualified refs to their short name.

    ``refs/heads/`` always denotes a branch, even when the branch name looks
    like a version. Bare names are tags only when they begin with ``vX.Y.Z``.

    Examples
    --------
    >>> parse_ref("refs/tags/v1.2.3")
    ReleaseRef(name='v1.2.3', kind=<RefKind.TAG: 'tag'>)
    >>> parse_ref("main").kind
    <RefKind.UNKNOWN: 'unknown'>
    """
    text = ref.strip()
    if text.startswith(_TAG_PREFIX):
        return ReleaseRef(text.removeprefix(_TAG_PREFIX), RefKind.TAG)
    if text.startswith(_BRANCH_PREFIX):
        return ReleaseRef(text.removeprefix(_BRANCH_PREFIX), RefKind.BRANCH)
    if TAG_PATTERN.match(text):
        return ReleaseRef(text, RefKind.TAG)
    return ReleaseRef(text, RefKind.UNKNOWN)


def release_version(ref: str) -> str | None:
    """Return the version carried by a release tag ref, or ``None``.

    Only the single leading ``v`` is removed; qualifiers are preserved.

    Examples
    --------
    >>> release_version("v2.0.0-beta")
    '2.0.0-beta'
    >>> release_version("main") is None
    True
    """
    parsed = parse_ref(ref)
    if not parsed.is_version_tag:
        return None
    return parsed.name.removeprefix("v")
