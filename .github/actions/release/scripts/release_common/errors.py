"""Exception types raised by the release helpers."""

from __future__ import annotations

__all__ = ["ReleaseError", "VersionMismatchError"]


class ReleaseError(RuntimeError):
    """Raised when a release pipeline step cannot continue."""


class VersionMismatchError(ReleaseError):
    """Raised when a tag-triggered build disagrees with the manifest version.

    Parameters
    ----------
    tag_version : str
        Version carried by the release tag, without its ``v`` prefix.
    manifest_version : str
        Version declared by the package manifest.
    manifest : str, optional
        Label identifying the manifest in the error message.
    """

    def __init__(
        self, tag_version: str, manifest_version: str, manifest: str = "manifest"
    ) -> None:
        self.tag_version = tag_version
        self.manifest_version = manifest_version
        message = (
            f"{manifest} version {manifest_version!r} does not match release "
            f"tag version {tag_version!r} (expected {tag_version!r})"
        )
        super().__init__(message)
