"""Package a built binary into its platform-named release archive.

Usage
-----
From the CLI entry point::

    import os
    from pathlib import Path

    from release_common import load_config, package_release

    config = load_config(Path(".github/release-config.toml"), "linux-x86_64")
    result = package_release(config, "v1.2.3", Path(os.environ["GITHUB_OUTPUT"]))
    print(result.asset_name)
"""

from __future__ import annotations

import dataclasses
import hashlib
import shutil
import stat
import tarfile
import typing as typ
import zipfile
from pathlib import Path

from .errors import ReleaseError
from .github_output import write_github_output
from .naming import render_template

if typ.TYPE_CHECKING:
    from .config import ReleaseConfig

__all__ = ["PackageResult", "package_release", "write_archive", "write_checksum"]

_EXECUTABLE_MODE = 0o755


@dataclasses.dataclass(slots=True)
class PackageResult:
    """Outcome of :func:`package_release`."""

    archive_path: Path
    asset_name: str
    checksum: str
    binary_path: Path


def package_release(
    config: ReleaseConfig, ref_name: str, github_output: Path | None = None
) -> PackageResult:
    """Archive the built binary and export its location.

    Parameters
    ----------
    config : ReleaseConfig
        Resolved configuration for the current platform job.
    ref_name : str
        Short ref name (tag or branch) embedded in the archive name.
    github_output : Path, optional
        ``GITHUB_OUTPUT`` file receiving ``archive_path``, ``asset_name`` and
        ``checksum``. Nothing is written when omitted.

    Returns
    -------
    PackageResult
        Paths and digest of the written archive.

    Raises
    ------
    ReleaseError
        Raised when the binary is missing or the archive name is invalid.
    """
    context = config.as_template_context(ref_name)
    binary_path = _locate_binary(config.workspace, config.source, context)
    asset_name = config.archive_name(ref_name)

    dist_dir = config.dist_path()
    dist_dir.mkdir(parents=True, exist_ok=True)
    archive_path = dist_dir / asset_name
    write_archive(
        binary_path,
        archive_path,
        config.archive_format,
        arcname=f"{config.bin_name}{config.bin_ext}",
    )
    digest = write_checksum(archive_path, config.checksum_algorithm)
    print(f"Packaged '{binary_path.name}' -> '{asset_name}'")

    if github_output is not None:
        write_github_output(
            github_output,
            {
                "archive_path": archive_path.as_posix(),
                "asset_name": asset_name,
                "checksum": digest,
            },
        )
    return PackageResult(archive_path, asset_name, digest, binary_path)


def _locate_binary(
    workspace: Path, template: str, context: dict[str, typ.Any]
) -> Path:
    rendered = render_template(template, context)
    candidate = Path(rendered)
    binary = candidate if candidate.is_absolute() else workspace / candidate
    if not binary.is_file():
        message = f"Binary not found at {binary}"
        raise ReleaseError(message)
    return binary


def write_archive(
    source: Path, destination: Path, archive_format: str, *, arcname: str
) -> Path:
    """Write ``source`` into a single-member archive at ``destination``.

    The member sits at the archive root, named ``arcname``, with mode
    ``0755``. An existing ``destination`` is replaced.
    """
    if destination.exists():
        destination.unlink()
    if archive_format == "tar.gz":
        _write_tarball(source, destination, arcname)
    elif archive_format == "zip":
        _write_zip(source, destination, arcname)
    else:
        message = f"Unsupported archive format: {archive_format}"
        raise ReleaseError(message)
    return destination


def _write_tarball(source: Path, destination: Path, arcname: str) -> None:
    def _normalise(info: tarfile.TarInfo) -> tarfile.TarInfo:
        info.mode = _EXECUTABLE_MODE
        info.uid = info.gid = 0
        info.uname = info.gname = ""
        return info

    with tarfile.open(destination, "w:gz") as archive:
        archive.add(source, arcname=arcname, recursive=False, filter=_normalise)


def _write_zip(source: Path, destination: Path, arcname: str) -> None:
    info = zipfile.ZipInfo.from_file(source, arcname)
    info.external_attr = (stat.S_IFREG | _EXECUTABLE_MODE) << 16
    info.compress_type = zipfile.ZIP_DEFLATED
    with (
        zipfile.ZipFile(destination, "w") as archive,
        source.open("rb") as reader,
        archive.open(info, "w") as writer,
    ):
        shutil.copyfileobj(reader, writer)


def write_checksum(path: Path, algorithm: str) -> str:
    """Write the checksum sidecar for ``path`` using ``algorithm``.

    Parameters
    ----------
    path:
        Path to the file whose contents should be hashed.
    algorithm:
        Hashing algorithm name supported by :mod:`hashlib` (for example
        ``"sha256"``).

    Returns
    -------
    str
        Hex digest generated for ``path`` using ``algorithm``.
    """
    hasher = hashlib.new(algorithm)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            hasher.update(chunk)
    digest = hasher.hexdigest()
    checksum_path = path.with_name(f"{path.name}.{algorithm}")
    checksum_path.write_text(f"{digest}  {path.name}\n", encoding="utf-8")
    return digest
