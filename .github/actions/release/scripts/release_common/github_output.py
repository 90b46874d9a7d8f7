"""Helpers for writing GitHub Actions outputs and workflow commands."""

from __future__ import annotations

import sys
import typing as typ
import uuid
from collections.abc import Mapping, Sequence
from pathlib import Path

__all__ = [
    "annotate",
    "escape_data",
    "write_github_env",
    "write_github_output",
]

AnnotationLevel = typ.Literal["error", "warning", "notice"]


def escape_data(value: str) -> str:
    """Escape a workflow command message or output value.

    Examples
    --------
    >>> escape_data("50%\\ndone")
    '50%25%0Adone'
    """
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def annotate(
    level: AnnotationLevel,
    title: str,
    message: str,
    *,
    stream: typ.TextIO | None = None,
) -> None:
    """Print a GitHub workflow annotation such as ``::error title=...::``.

    Annotations go to stderr unless ``stream`` is provided.
    """
    target = sys.stderr if stream is None else stream
    print(
        f"::{level} title={_escape_property(title)}::{escape_data(message)}",
        file=target,
    )


def write_github_output(
    file: Path, values: Mapping[str, str | Sequence[str]]
) -> None:
    """Append ``values`` to the GitHub Actions output ``file``.

    Parameters
    ----------
    file : Path
        Target ``GITHUB_OUTPUT`` file that receives the exported values.
    values : Mapping[str, str | Sequence[str]]
        Mapping of output names to values. Every value uses the multi-line
        ``key<<delimiter`` protocol, so it reaches later steps verbatim;
        sequences are joined with newlines.

    Examples
    --------
    >>> github_output = Path("/tmp/github_output")
    >>> write_github_output(github_output, {"result": "match"})  # doctest: +SKIP
    >>> "result<<EOF_" in github_output.read_text()  # doctest: +SKIP
    True
    """
    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open("a", encoding="utf-8") as handle:
        for key, value in values.items():
            delimiter = f"EOF_{uuid.uuid4().hex}"
            handle.write(f"{key}<<{delimiter}\n")
            if isinstance(value, str):
                handle.write(value)
            else:
                handle.write("\n".join(value))
            handle.write(f"\n{delimiter}\n")


def write_github_env(file: Path, values: Mapping[str, str]) -> None:
    """Append ``NAME=value`` lines to the ``GITHUB_ENV`` file."""
    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open("a", encoding="utf-8") as handle:
        for key, value in values.items():
            if "\n" in value or "\r" in value:
                message = f"Environment value for {key} must be a single line"
                raise ValueError(message)
            handle.write(f"{key}={value}\n")
