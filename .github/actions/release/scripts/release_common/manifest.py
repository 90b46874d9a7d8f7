"""Read package metadata from Cargo manifests and toolchain files."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import tomllib

from .errors import ReleaseError

__all__ = [
    "get_field",
    "package_version",
    "read_manifest",
    "read_toolchain_channel",
]


def read_manifest(path: Path) -> dict[str, typ.Any]:
    """
    Load and return the parsed manifest as a dictionary.

    Parameters
    ----------
    path : Path
        Path to the ``Cargo.toml`` file.

    Returns
    -------
    dict[str, Any]
        Parsed manifest fields keyed by section.

    Raises
    ------
    FileNotFoundError
        If the manifest file does not exist.
    tomllib.TOMLDecodeError
        If the manifest contains invalid TOML syntax.
    """
    if not path.is_file():
        message = f"Manifest {path} does not exist"
        raise FileNotFoundError(message)
    with path.open("rb") as handle:
        return tomllib.load(handle)


def get_field(manifest: dict[str, typ.Any], field: str) -> str:
    """
    Extract a package field from the manifest, raising if it is missing.

    Parameters
    ----------
    manifest : dict[str, Any]
        The parsed Cargo manifest dictionary.
    field : str
        The package field to extract, such as ``"name"`` or ``"version"``.

    Returns
    -------
    str
        The non-empty field value from the package section.

    Raises
    ------
    KeyError
        If the package table is missing or the field is absent or blank.

    Examples
    --------
    >>> manifest = {"package": {"name": "sqld", "version": "1.2.3"}}
    >>> get_field(manifest, "name")
    'sqld'
    """
    package = manifest.get("package") or {}
    if not isinstance(package, dict):
        message = "package table missing from manifest"
        raise KeyError(message)
    value = package.get(field, "")
    if not isinstance(value, str) or not value:
        message = f"package.{field} is missing"
        raise KeyError(message)
    return value


def package_version(path: Path, package: str | None = None) -> str:
    """Return ``[package].version`` from the manifest at ``path``.

    Parameters
    ----------
    path : Path
        Manifest to read.
    package : str, optional
        Expected ``[package].name``. A different name raises
        :class:`ReleaseError` so a misconfigured path cannot validate the
        wrong crate.

    Returns
    -------
    str
        The declared version. ``version.workspace = true`` is resolved from
        the nearest ancestor manifest that declares
        ``[workspace.package].version``.

    Raises
    ------
    FileNotFoundError
        If the manifest does not exist.
    KeyError
        If the package table or its version is missing.
    ReleaseError
        If the package name differs from ``package`` or an inherited version
        cannot be resolved.
    """
    manifest = read_manifest(path)
    if package is not None:
        name = get_field(manifest, "name")
        if name != package:
            message = f"Manifest {path} declares package {name!r}, not {package!r}"
            raise ReleaseError(message)

    raw = (manifest.get("package") or {}).get("version")
    if isinstance(raw, dict) and raw.get("workspace") is True:
        return _workspace_version(path)
    return get_field(manifest, "version")


def _workspace_version(member: Path) -> str:
    """Resolve an inherited version from the enclosing workspace manifest."""
    start = member.resolve().parent
    for directory in (start, *start.parents):
        candidate = directory / "Cargo.toml"
        if not candidate.is_file():
            continue
        workspace = read_manifest(candidate).get("workspace")
        if not isinstance(workspace, dict):
            continue
        version = (workspace.get("package") or {}).get("version")
        if isinstance(version, str) and version:
            return version
        message = f"Workspace manifest {candidate} does not declare package.version"
        raise ReleaseError(message)
    message = f"No workspace manifest found above {member} to inherit a version"
    raise ReleaseError(message)


def read_toolchain_channel(path: Path) -> str:
    """Return ``[toolchain].channel`` from a ``rust-toolchain.toml`` file.

    Examples
    --------
    >>> read_toolchain_channel(Path("rust-toolchain.toml"))  # doctest: +SKIP
    'nightly-2023-05-01'
    """
    data = read_manifest(path)
    toolchain = data.get("toolchain")
    channel = toolchain.get("channel") if isinstance(toolchain, dict) else None
    if not isinstance(channel, str) or not channel:
        message = "toolchain.channel is missing"
        raise KeyError(message)
    return channel
