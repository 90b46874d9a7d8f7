"""Release artefact naming.

Downstream release-asset matching relies on these names, so they follow the
published layout exactly::

    sqld-v1.2.3-linux-x86_64.tar.gz
    sqld-v1.2.3-Darwin-x86_64.zip
    sqld-v1.2.3-Darwin-arm64.zip
"""

from __future__ import annotations

import platform
import typing as typ

from .errors import ReleaseError

__all__ = [
    "ARCHIVE_FORMATS",
    "DEFAULT_ARCHIVE_NAME_TEMPLATE",
    "RELEASE_PLATFORMS",
    "artefact_name",
    "expected_release_assets",
    "host_platform",
    "render_template",
    "safe_ref_name",
]

ARCHIVE_FORMATS: tuple[str, ...] = ("tar.gz", "zip")
DEFAULT_ARCHIVE_NAME_TEMPLATE = "{bin_name}-{ref_name}-{platform}-{arch}"

# (platform, arch, archive format) published to the release draft.
RELEASE_PLATFORMS: tuple[tuple[str, str, str], ...] = (
    ("linux", "x86_64", "tar.gz"),
    ("Darwin", "x86_64", "zip"),
    ("Darwin", "arm64", "zip"),
)


def render_template(template: str, context: typ.Mapping[str, typ.Any]) -> str:
    """Return ``template`` formatted with ``context``."""
    try:
        return template.format(**context)
    except KeyError as exc:
        message = f"Invalid template key {exc} in '{template}'"
        raise ReleaseError(message) from exc


def safe_ref_name(ref_name: str) -> str:
    """Return ``ref_name`` usable as part of a single filename.

    Examples
    --------
    >>> safe_ref_name("v1.2.3")
    'v1.2.3'
    >>> safe_ref_name("feature/wal")
    'feature-wal'
    """
    return ref_name.strip().replace("/", "-")


def artefact_name(
    template: str, context: typ.Mapping[str, typ.Any], archive_format: str
) -> str:
    """Render the archive filename for ``context``.

    Parameters
    ----------
    template : str
        ``str.format`` template for the name without extension.
    context : Mapping[str, Any]
        Values for the template; ``ref_name`` is made filename-safe first.
    archive_format : str
        One of :data:`ARCHIVE_FORMATS`.

    Examples
    --------
    >>> artefact_name(
    ...     DEFAULT_ARCHIVE_NAME_TEMPLATE,
    ...     {"bin_name": "sqld", "ref_name": "v1.2.3",
    ...      "platform": "linux", "arch": "x86_64"},
    ...     "tar.gz",
    ... )
    'sqld-v1.2.3-linux-x86_64.tar.gz'
    """
    if archive_format not in ARCHIVE_FORMATS:
        message = f"Unsupported archive format: {archive_format}"
        raise ReleaseError(message)
    values = dict(context)
    if "ref_name" in values:
        values["ref_name"] = safe_ref_name(str(values["ref_name"]))
    stem = render_template(template, values)
    if not stem or "/" in stem or "\\" in stem:
        message = f"Archive name template rendered an invalid filename: {stem!r}"
        raise ReleaseError(message)
    return f"{stem}.{archive_format}"


def expected_release_assets(bin_name: str, ref_name: str) -> list[str]:
    """Return the asset names a tag release is expected to carry."""
    return [
        artefact_name(
            DEFAULT_ARCHIVE_NAME_TEMPLATE,
            {
                "bin_name": bin_name,
                "ref_name": ref_name,
                "platform": os_name,
                "arch": arch,
            },
            archive_format,
        )
        for os_name, arch, archive_format in RELEASE_PLATFORMS
    ]


def host_platform() -> tuple[str, str]:
    """Return the ``uname -s``/``uname -m`` pair for the running host."""
    return platform.system(), platform.machine()
