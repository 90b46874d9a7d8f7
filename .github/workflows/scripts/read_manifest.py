#!/usr/bin/env python3
"""Utility helpers for extracting fields from Cargo.toml."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import tomllib

SCRIPTS_DIR = Path(__file__).resolve().parent
MODULE_DIR = SCRIPTS_DIR.parent.parent / "actions" / "release" / "scripts"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

from release_common.errors import ReleaseError  # noqa: E402 - after sys.path mutation
from release_common.manifest import (  # noqa: E402
    get_field,
    package_version,
    read_manifest,
)

PARSER_DESCRIPTION = " ".join(
    [
        "Read selected fields from a Cargo.toml manifest and print them to",
        "stdout.",
    ]
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Return the parsed CLI arguments for manifest field extraction."""
    parser = argparse.ArgumentParser(description=PARSER_DESCRIPTION)
    parser.add_argument(
        "field", choices=("name", "version"), help="The manifest field to print."
    )
    parser.add_argument(
        "--manifest-path",
        default=None,
        help=(
            "Path to the Cargo.toml file. Defaults to the CARGO_TOML_PATH "
            "environment variable when set, otherwise Cargo.toml in the "
            "current working directory."
        ),
    )
    parser.add_argument(
        "--package",
        default=None,
        help="Fail unless the manifest declares this package name.",
    )
    return parser.parse_args(argv)


def read_field(path: Path, field: str, package: str | None = None) -> str:
    """Return ``field`` from the manifest at ``path``.

    ``version`` honours ``version.workspace = true`` inheritance.
    """
    if field == "version":
        return package_version(path, package)
    value = get_field(read_manifest(path), field)
    if package is not None and value != package:
        message = f"Manifest {path} declares package {value!r}, not {package!r}"
        raise ReleaseError(message)
    return value


def main(argv: list[str] | None = None) -> int:
    """Entry point for the manifest reader CLI."""
    args = parse_args(argv)
    manifest_path = args.manifest_path or os.environ.get(
        "CARGO_TOML_PATH", "Cargo.toml"
    )
    try:
        value = read_field(Path(manifest_path), args.field, args.package)
    except (
        KeyError,
        FileNotFoundError,
        ReleaseError,
        tomllib.TOMLDecodeError,
    ) as exc:
        print(exc, file=sys.stderr)
        return 1
    print(value, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
