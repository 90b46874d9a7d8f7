"""Shared helpers for the release test suites."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

__all__ = ["decode_output_file", "write_manifest", "write_workspace_inputs"]


def decode_output_file(path: Path) -> dict[str, str]:
    """Parse GitHub output records written with ``write_github_output``.

    Parameters
    ----------
    path : Path
        Path to the output file containing GitHub workflow output records.

    Returns
    -------
    dict[str, str]
        Mapping of output keys to their decoded string values.
    """

    lines = path.read_text(encoding="utf-8").splitlines()
    values: dict[str, str] = {}
    index = 0
    while index < len(lines):
        line = lines[index]
        if "<<" in line:
            key, delimiter = line.split("<<", 1)
            index += 1
            buffer: list[str] = []
            while index < len(lines) and lines[index] != delimiter:
                buffer.append(lines[index])
                index += 1
            values[key] = "\n".join(buffer)
            index += 1  # Skip the delimiter terminator.
            continue
        if "=" in line:
            key, value = line.split("=", 1)
            decoded = (
                value.replace("%0A", "\n")
                .replace("%0D", "\r")
                .replace("%25", "%")
            )
            values[key] = decoded
        index += 1
    return values


def write_manifest(
    root: Path, version: str = "1.2.3", name: str = "sqld", subdir: str = "sqld"
) -> Path:
    """Write a minimal ``Cargo.toml`` declaring ``name`` at ``version``."""
    manifest = root / subdir / "Cargo.toml"
    manifest.parent.mkdir(parents=True, exist_ok=True)
    manifest.write_text(
        dedent(
            f"""
            [package]
            name = "{name}"
            version = "{version}"
            """
        ),
        encoding="utf-8",
    )
    return manifest


def write_workspace_inputs(
    root: Path, *, version: str = "1.2.3", bin_ext: str = ""
) -> Path:
    """Populate ``root`` with a release build of ``sqld`` and its manifest.

    Returns
    -------
    Path
        Path to the built binary.
    """
    bin_path = root / "target" / "release" / f"sqld{bin_ext}"
    bin_path.parent.mkdir(parents=True, exist_ok=True)
    bin_path.write_bytes(b"\x7fELF-sqld")
    write_manifest(root, version)
    return bin_path
