"""Environment helpers shared by the release toolchain."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from .errors import ReleaseError

__all__ = ["REF_ENV_VARS", "coerce_bool", "ref_from_environment", "require_env_path"]

REF_ENV_VARS: tuple[str, ...] = ("RELEASE_REF", "GITHUB_REF", "GITHUB_REF_NAME")


def require_env_path(name: str) -> Path:
    """Return ``Path`` value for ``name`` or raise :class:`ReleaseError`.

    Parameters
    ----------
    name:
        Name of the environment variable to fetch.

    Raises
    ------
    ReleaseError
        Raised when the environment variable is unset or empty.
    """
    value = os.environ.get(name)
    if not value:
        message = f"Environment variable '{name}' is not set."
        raise ReleaseError(message)
    return Path(value)


def ref_from_environment(environ: typ.Mapping[str, str] | None = None) -> str:
    """Return the triggering ref from the first populated ``REF_ENV_VARS`` entry.

    Examples
    --------
    >>> ref_from_environment({"GITHUB_REF": "refs/tags/v1.2.3"})
    'refs/tags/v1.2.3'
    """
    env = os.environ if environ is None else environ
    for name in REF_ENV_VARS:
        if value := (env.get(name) or "").strip():
            return value
    joined = ", ".join(REF_ENV_VARS)
    message = f"No release ref found; set one of {joined}."
    raise ReleaseError(message)


def coerce_bool(value: object) -> bool:
    """Return ``value`` as a strict boolean.

    Examples
    --------
    >>> coerce_bool(" Yes ")
    True
    >>> coerce_bool("")
    False
    """
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        message = f"Cannot interpret {value!r} as a boolean"
        raise TypeError(message)
    normalised = value.strip().lower()
    if normalised in {"", "false", "0", "no", "off"}:
        return False
    if normalised in {"true", "1", "yes", "on"}:
        return True
    message = f"Cannot interpret {value!r} as a boolean"
    raise ValueError(message)
