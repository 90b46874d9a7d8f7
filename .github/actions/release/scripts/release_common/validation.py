"""Release tag verification against the manifest version.

A tag-triggered build may only proceed when the tag (minus its ``v``) is
exactly the version declared by the package manifest. Branch pushes and refs
that do not look like version tags are not release builds and are skipped.

Usage
-----
Fail a pipeline step on mismatch::

    from release_common import ensure_version_matches

    ensure_version_matches("v1.2.3", "1.2.3")
"""

from __future__ import annotations

import enum

from .errors import VersionMismatchError
from .refs import RefKind, parse_ref

__all__ = ["ValidationResult", "ensure_version_matches", "validate"]

DEFAULT_BRANCH = "main"


class ValidationResult(enum.Enum):
    """Outcome of comparing a release ref with a manifest version."""

    MATCH = "match"
    MISMATCH = "mismatch"
    SKIPPED = "skipped"

    @property
    def should_proceed(self) -> bool:
        """Return ``True`` unless the pipeline must abort."""
        return self is not ValidationResult.MISMATCH


def validate(release_ref: str, manifest_version: str) -> ValidationResult:
    """Compare ``release_ref`` with ``manifest_version``.

    Parameters
    ----------
    release_ref : str
        Tag or branch that triggered the build. Fully-qualified refs such as
        ``refs/tags/v1.2.3`` are accepted.
    manifest_version : str
        Version declared by the package manifest.

    Returns
    -------
    ValidationResult
        ``SKIPPED`` for the default branch, branch refs and anything that does
        not begin with ``vX.Y.Z``; otherwise ``MATCH`` when the tag minus its
        leading ``v`` equals ``manifest_version`` exactly, else ``MISMATCH``.

    Examples
    --------
    >>> validate("v1.2.3", "1.2.3")
    <ValidationResult.MATCH: 'match'>
    >>> validate("v2.0.0-beta", "2.0.0")
    <ValidationResult.MISMATCH: 'mismatch'>
    >>> validate("main", "1.2.3")
    <ValidationResult.SKIPPED: 'skipped'>
    """
    parsed = parse_ref(release_ref)
    if parsed.name == DEFAULT_BRANCH or parsed.kind is RefKind.BRANCH:
        return ValidationResult.SKIPPED
    if not parsed.is_version_tag:
        return ValidationResult.SKIPPED
    tag_version = parsed.name.removeprefix("v")
    if tag_version == manifest_version:
        return ValidationResult.MATCH
    return ValidationResult.MISMATCH


def ensure_version_matches(
    release_ref: str, manifest_version: str, *, manifest: str = "manifest"
) -> ValidationResult:
    """Return the validation result, raising when the versions disagree.

    Raises
    ------
    VersionMismatchError
        When :func:`validate` reports ``MISMATCH``.
    """
    result = validate(release_ref, manifest_version)
    if result is ValidationResult.MISMATCH:
        tag_version = parse_ref(release_ref).name.removeprefix("v")
        raise VersionMismatchError(tag_version, manifest_version, manifest)
    return result
