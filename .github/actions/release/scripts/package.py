# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "cyclopts>=3.24.0,<4.0.0",
# ]
# ///

"""Package the release binary for one platform job.

Examples
--------
Package the Linux build after ``cargo build --release``::

    export GITHUB_WORKSPACE="$(pwd)"
    export GITHUB_OUTPUT="$(mktemp)"
    export GITHUB_REF="refs/tags/v0.17.0"
    uv run .github/actions/release/scripts/package.py \
        .github/release-config.toml linux-x86_64
"""

from __future__ import annotations

import sys
from pathlib import Path

import tomllib
from release_common import (
    ReleaseError,
    ensure_version_matches,
    load_config,
    package_release,
    package_version,
    parse_ref,
    ref_from_environment,
    require_env_path,
)
from release_common.github_output import annotate

import cyclopts

app = cyclopts.App(help="Archive the release binary using a TOML configuration.")


@app.default
def main(config_file: Path, target: str, *, ref: str | None = None) -> None:
    """Package the binary for ``target`` described by ``config_file``.

    Parameters
    ----------
    config_file:
        Path to the release TOML configuration file.
    target:
        Target key in the configuration file (for example ``"linux-x86_64"``).
    ref:
        Tag or branch embedded in the archive name. Defaults to
        ``RELEASE_REF``, ``GITHUB_REF`` or ``GITHUB_REF_NAME``.

    Notes
    -----
    Targets with ``verify_tag`` enabled re-check the release tag against the
    configured manifest first, so a mismatched tag never produces an archive.
    Enabling ``verify_tag`` without a ``manifest`` is a configuration error.
    """
    try:
        release_ref = ref or ref_from_environment()
        github_output = require_env_path("GITHUB_OUTPUT")
        config = load_config(config_file, target)
        if config.verify_tag:
            manifest_path = config.manifest_path()
            if manifest_path is None:
                message = (
                    f"Target {target} sets verify_tag but {config_file} "
                    "configures no manifest to read the version from"
                )
                raise ReleaseError(message)
            ensure_version_matches(
                release_ref,
                package_version(manifest_path, config.package),
                manifest=config.manifest,
            )
        result = package_release(config, parse_ref(release_ref).name, github_output)
    except (FileNotFoundError, KeyError, ReleaseError, tomllib.TOMLDecodeError) as exc:
        annotate("error", "Packaging failure", str(exc))
        raise SystemExit(1) from exc

    archive_rel = result.archive_path.relative_to(config.workspace)
    print(f"Wrote '{archive_rel}' ({result.checksum}).", file=sys.stderr)


if __name__ == "__main__":
    app()
