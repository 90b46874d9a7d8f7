#!/usr/bin/env python3
"""Export the Rust toolchain channel pinned by ``rust-toolchain.toml``.

The channel is printed to stdout and, when ``GITHUB_ENV`` is set, exported as
``RUST_VER`` for the toolchain setup step.

Usage
-----
Invoke from a GitHub Actions workflow step::

    - name: Get Rust toolchain version from rust-toolchain.toml
      run: python .github/workflows/scripts/read_toolchain.py
"""

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

from release_common.github_output import (  # noqa: E402 - after sys.path mutation
    annotate,
    write_github_env,
)
from release_common.manifest import read_toolchain_channel  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--toolchain-file",
        default="rust-toolchain.toml",
        help="Path to the rust-toolchain.toml file.",
    )
    parser.add_argument(
        "--env-name",
        default="RUST_VER",
        help="Variable written to GITHUB_ENV.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Print the toolchain channel and export it to ``GITHUB_ENV``."""
    args = parse_args(argv)
    try:
        channel = read_toolchain_channel(Path(args.toolchain_file))
    except (KeyError, FileNotFoundError, tomllib.TOMLDecodeError) as exc:
        annotate("error", "Toolchain Error", str(exc))
        return 1

    if github_env := os.environ.get("GITHUB_ENV"):
        write_github_env(Path(github_env), {args.env_name: channel})
    print(channel, end="")
    return 0


if __name__ == "__main__":  # pragma: no cover - invoked by GitHub Actions
    raise SystemExit(main())
