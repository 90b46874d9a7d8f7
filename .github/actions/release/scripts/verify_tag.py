# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "cyclopts>=3.24.0,<4.0.0",
# ]
# ///

"""Verify that a release tag matches the version declared by the manifest.

Branch pushes (for example ``main``) and refs that do not begin with
``vX.Y.Z`` are skipped. On a mismatch the step fails before any artefact is
built or published.

Examples
--------
Run within a GitHub Actions step::

    export GITHUB_REF="refs/tags/v0.17.0"
    uv run .github/actions/release/scripts/verify_tag.py sqld/Cargo.toml \
        --package sqld
"""

from __future__ import annotations

import os
import sys
import typing as typ
from pathlib import Path

import tomllib
from release_common import (
    ReleaseError,
    ValidationResult,
    VersionMismatchError,
    ensure_version_matches,
    package_version,
    ref_from_environment,
    release_version,
)
from release_common.github_output import annotate, write_github_output

import cyclopts
from cyclopts import Parameter

app = cyclopts.App(help="Check a release tag against the manifest version.")


def _export(result: ValidationResult, tag_version: str, manifest_version: str) -> None:
    """Write the check outcome to ``GITHUB_OUTPUT`` when the runner provides it."""
    github_output = os.environ.get("GITHUB_OUTPUT")
    if not github_output:
        return
    write_github_output(
        Path(github_output),
        {
            "result": result.value,
            "failed_tag": "1" if result is ValidationResult.MISMATCH else "0",
            "tag_version": tag_version,
            "manifest_version": manifest_version,
        },
    )


@app.default
def main(
    manifest: typ.Annotated[
        Path, Parameter(env_var=("MANIFEST_PATH", "CARGO_TOML_PATH"))
    ] = Path("Cargo.toml"),
    *,
    ref: str | None = None,
    package: str | None = None,
    fail_on_mismatch: bool = True,
) -> ValidationResult:
    """Compare the triggering ref with ``manifest``'s package version.

    Parameters
    ----------
    manifest:
        Path to the ``Cargo.toml`` declaring the release version.
    ref:
        Tag or branch to check. Defaults to ``RELEASE_REF``, ``GITHUB_REF``
        or ``GITHUB_REF_NAME``.
    package:
        Expected package name inside ``manifest``.
    fail_on_mismatch:
        Exit with status 1 on a mismatch. When disabled the mismatch is only
        reported through ``failed_tag=1`` for a later step to act on.
    """
    try:
        release_ref = ref or ref_from_environment()
        manifest_version = package_version(manifest, package)
    except (FileNotFoundError, KeyError, ReleaseError, tomllib.TOMLDecodeError) as exc:
        annotate("error", "Configuration Error", str(exc))
        raise SystemExit(1) from exc

    tag_version = release_version(release_ref) or ""
    try:
        result = ensure_version_matches(
            release_ref, manifest_version, manifest=manifest.as_posix()
        )
    except VersionMismatchError as exc:
        _export(ValidationResult.MISMATCH, tag_version, manifest_version)
        if fail_on_mismatch:
            annotate("error", "Version mismatch", f"{exc}. Failing the release build.")
            raise SystemExit(1) from exc
        annotate("warning", "Version mismatch", str(exc))
        return ValidationResult.MISMATCH

    _export(result, tag_version, manifest_version)
    if result is ValidationResult.SKIPPED:
        annotate(
            "notice",
            "Tag check skipped",
            f"{release_ref} is not a release tag; skipping version check.",
        )
    else:
        print(
            f"Release tag {release_ref} matches {manifest.as_posix()} "
            f"version {manifest_version}.",
            file=sys.stderr,
        )
    return result


if __name__ == "__main__":
    app()
