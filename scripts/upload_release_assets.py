#!/usr/bin/env -S uv run python
# /// script
# requires-python = ">=3.11"
# dependencies = ["cyclopts>=3.24.0,<4.0.0", "plumbum"]
# ///

"""Upload packaged release archives to a GitHub release draft.

The script discovers ``<bin>-<tag>-*`` archives and their checksum sidecars in
a staging directory, validates their filenames and sizes, and uploads them
using the GitHub CLI. Expected platform archives that are missing are
reported but do not fail the upload unless ``--fail-on-unmatched`` is set.

Examples
--------
Upload archives to the ``v0.17.0`` release::

    upload_release_assets --release-tag v0.17.0 --bin-name sqld

Inspect the planned uploads without publishing anything::

    upload_release_assets --release-tag v0.17.0 --bin-name sqld --dry-run
"""

from __future__ import annotations

import dataclasses as dc
import os
import sys
import typing as typ
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
MODULE_DIR = REPO_ROOT / ".github" / "actions" / "release" / "scripts"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

from cyclopts import App, Parameter  # noqa: E402
from plumbum import local  # noqa: E402
from plumbum.commands import CommandNotFound, ProcessExecutionError  # noqa: E402
from release_common.environment import coerce_bool  # noqa: E402
from release_common.github_output import annotate  # noqa: E402
from release_common.naming import expected_release_assets, safe_ref_name  # noqa: E402
from release_common.refs import parse_ref  # noqa: E402

if typ.TYPE_CHECKING:
    from plumbum.commands.base import BaseCommand

ARCHIVE_SUFFIXES: tuple[str, ...] = (".tar.gz", ".zip")

app = App(help="Upload release archives to a GitHub release.")


class AssetError(RuntimeError):
    """Raised when the staged artefacts are invalid."""


@dc.dataclass(frozen=True)
class ReleaseAsset:
    """Artefact staged for upload to a GitHub release."""

    path: Path
    asset_name: str
    size: int


@dc.dataclass(frozen=True)
class RuntimeOptions:
    """Normalised inputs shared by the CLI and ``main``."""

    release_tag: str
    bin_name: str
    dist_dir: Path
    dry_run: bool
    fail_on_unmatched: bool
    create_draft: bool


def _is_candidate(path: Path, prefix: str) -> bool:
    name = path.name
    if not name.startswith(prefix):
        return False
    stem = name.removesuffix(".sha256")
    return stem.endswith(ARCHIVE_SUFFIXES)


def _iter_candidate_paths(dist_dir: Path, prefix: str) -> typ.Iterator[Path]:
    for path in sorted(dist_dir.rglob("*")):
        if path.is_file() and _is_candidate(path, prefix):
            yield path


def _require_non_empty(path: Path) -> int:
    size = path.stat().st_size
    if size <= 0:
        message = f"Artefact {path} is empty"
        raise AssetError(message)
    return size


def _register_asset(asset_name: str, path: Path, seen: dict[str, Path]) -> None:
    if previous := seen.get(asset_name):
        message = (
            "Asset name collision: "
            f"{asset_name} would upload both {previous} and {path}"
        )
        raise AssetError(message)
    seen[asset_name] = path


def _prepare_runtime_options(
    *,
    release_tag: str | None,
    bin_name: str | None,
    dist_dir: str | Path | None,
    dry_run: bool | str | None,
    fail_on_unmatched: bool = False,
    create_draft: bool = False,
    environ: typ.Mapping[str, str | None],
) -> RuntimeOptions:
    """Normalise CLI inputs and ``INPUT_*`` variables into runtime options."""
    resolved_release = release_tag or environ.get("INPUT_RELEASE_TAG")
    resolved_bin = bin_name or environ.get("INPUT_BIN_NAME")
    dist_source = dist_dir if dist_dir is not None else environ.get("INPUT_DIST_DIR")
    resolved_dist = Path(dist_source or "dist")

    dry_run_value = False if dry_run is None else coerce_bool(dry_run)
    if not dry_run_value and (env_flag := environ.get("INPUT_DRY_RUN")):
        dry_run_value = coerce_bool(env_flag)

    missing = [
        label
        for label, present in (
            ("--release-tag", resolved_release),
            ("--bin-name", resolved_bin),
        )
        if not present
    ]
    if missing:
        joined = ", ".join(missing)
        message = f"Missing required argument(s): {joined}"
        raise ValueError(message)

    return RuntimeOptions(
        release_tag=typ.cast(str, resolved_release),
        bin_name=typ.cast(str, resolved_bin),
        dist_dir=resolved_dist,
        dry_run=dry_run_value,
        fail_on_unmatched=fail_on_unmatched,
        create_draft=create_draft,
    )


def release_tag_name(release_tag: str) -> str:
    """Return the short tag name, refusing refs that are not ``vX.Y.Z`` tags.

    Examples
    --------
    >>> release_tag_name("refs/tags/v1.2.3")
    'v1.2.3'
    """
    parsed = parse_ref(release_tag)
    if not parsed.is_version_tag:
        message = f"Refusing to publish from non-version-tag ref {release_tag!r}"
        raise AssetError(message)
    return parsed.name


def discover_assets(
    dist_dir: Path, *, bin_name: str, ref_name: str
) -> list[ReleaseAsset]:
    """Return the archives and checksums that should be published.

    Parameters
    ----------
    dist_dir : Path
        Root directory that contains the packaged archives.
    bin_name : str
        Binary name that prefixes every asset.
    ref_name : str
        Tag embedded in every asset name.

    Returns
    -------
    list[ReleaseAsset]
        Ordered collection of artefacts ready to upload.

    Raises
    ------
    AssetError
        If no artefacts are found, an artefact is empty, or multiple files would
        upload with the same asset name.

    Examples
    --------
    >>> discover_assets(Path("dist"), bin_name="sqld", ref_name="v1.2.3")  # doctest: +SKIP
    [ReleaseAsset(path=PosixPath('dist/sqld-v1.2.3-linux-x86_64.tar.gz'), ...)]
    """
    if not dist_dir.exists():
        message = f"Artefact directory {dist_dir} does not exist"
        raise AssetError(message)

    prefix = f"{bin_name}-{safe_ref_name(ref_name)}-"
    assets: list[ReleaseAsset] = []
    seen: dict[str, Path] = {}

    for path in _iter_candidate_paths(dist_dir, prefix):
        size = _require_non_empty(path)
        _register_asset(path.name, path, seen)
        assets.append(ReleaseAsset(path=path, asset_name=path.name, size=size))

    if not assets:
        message = f"No artefacts discovered in {dist_dir}"
        raise AssetError(message)

    return assets


def missing_assets(
    assets: typ.Iterable[ReleaseAsset], *, bin_name: str, ref_name: str
) -> list[str]:
    """Return expected platform archives absent from ``assets``."""
    present = {asset.asset_name for asset in assets}
    return [
        name
        for name in expected_release_assets(bin_name, ref_name)
        if name not in present
    ]


def _render_summary(assets: typ.Iterable[ReleaseAsset]) -> str:
    lines = ["Planned uploads:"]
    lines.extend(
        f"  - {asset.asset_name} ({asset.size} bytes) -> {asset.path}"
        for asset in assets
    )
    return "\n".join(lines)


def _ensure_release(gh_cmd: BaseCommand, release_tag: str) -> None:
    """Create a draft release for ``release_tag`` unless one already exists."""
    retcode, _stdout, _stderr = gh_cmd["release", "view", release_tag].run(
        retcode=None
    )
    if retcode == 0:
        return
    print(f"Creating draft release {release_tag}")
    gh_cmd[
        "release",
        "create",
        release_tag,
        "--draft",
        "--verify-tag",
        "--title",
        release_tag,
    ]()


def upload_assets(
    *,
    release_tag: str,
    assets: typ.Iterable[ReleaseAsset],
    dry_run: bool = False,
    create_draft: bool = False,
) -> None:
    """Upload artefacts to GitHub using the ``gh`` CLI.

    Parameters
    ----------
    release_tag : str
        Git tag identifying the release that should receive the artefacts.
    assets : Iterable[ReleaseAsset]
        Iterable of artefacts to publish.
    dry_run : bool
        When ``True``, print the planned ``gh`` invocations without executing
        them.
    create_draft : bool
        When ``True``, create a draft release first if none exists.

    Raises
    ------
    ProcessExecutionError
        If ``gh`` returns a non-zero status while uploading.
    CommandNotFound
        If the ``gh`` executable is not available in ``PATH``.
    """
    if dry_run:
        if create_draft:
            print(f"[dry-run] gh release create {release_tag} --draft --verify-tag")
        for asset in assets:
            descriptor = f"{asset.path}#{asset.asset_name}"
            print(f"[dry-run] gh release upload {release_tag} {descriptor} --clobber")
        return

    gh_cmd = local["gh"]
    if create_draft:
        _ensure_release(gh_cmd, release_tag)
    for asset in assets:
        descriptor = f"{asset.path}#{asset.asset_name}"
        gh_cmd["release", "upload", release_tag, descriptor, "--clobber"]()


def main(
    *,
    release_tag: str,
    bin_name: str,
    dist_dir: Path = Path("dist"),
    dry_run: bool = False,
    fail_on_unmatched: bool = False,
    create_draft: bool = False,
) -> int:
    """Entry point shared by the CLI and tests.

    Returns
    -------
    int
        Exit code: ``0`` on success, ``1`` when discovery or upload fails.
    """
    try:
        tag = release_tag_name(release_tag)
        assets = discover_assets(dist_dir, bin_name=bin_name, ref_name=tag)
    except AssetError as exc:
        annotate("error", "Release upload", str(exc))
        return 1

    if missing := missing_assets(assets, bin_name=bin_name, ref_name=tag):
        joined = ", ".join(missing)
        if fail_on_unmatched:
            annotate("error", "Missing release assets", joined)
            return 1
        annotate("warning", "Missing release assets", joined)

    if dry_run:
        print(_render_summary(assets))

    try:
        upload_assets(
            release_tag=tag,
            assets=assets,
            dry_run=dry_run,
            create_draft=create_draft,
        )
    except (ProcessExecutionError, CommandNotFound) as exc:  # pragma: no cover
        annotate("error", "Release upload", str(exc))
        return 1

    return 0


@app.default
def cli(
    *,
    release_tag: typ.Annotated[str | None, Parameter(env_var="GITHUB_REF")] = None,
    bin_name: str | None = None,
    dist_dir: Path | None = None,
    dry_run: bool = False,
    fail_on_unmatched: bool = False,
    create_draft: bool = False,
) -> int:
    """Cyclopts-bound CLI entry point."""
    try:
        options = _prepare_runtime_options(
            release_tag=release_tag,
            bin_name=bin_name,
            dist_dir=dist_dir,
            dry_run=dry_run,
            fail_on_unmatched=fail_on_unmatched,
            create_draft=create_draft,
            environ=os.environ,
        )
    except (TypeError, ValueError) as exc:
        annotate("error", "Configuration Error", str(exc))
        return 1
    return main(
        release_tag=options.release_tag,
        bin_name=options.bin_name,
        dist_dir=options.dist_dir,
        dry_run=options.dry_run,
        fail_on_unmatched=options.fail_on_unmatched,
        create_draft=options.create_draft,
    )


if __name__ == "__main__":  # pragma: no cover - exercised via CLI
    raise SystemExit(app(sys.argv[1:]))
