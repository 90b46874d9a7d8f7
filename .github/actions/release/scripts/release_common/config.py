"""Configuration models and loader for the release helpers.

The release configuration is a TOML file with a ``[common]`` table shared by
every build and one ``[targets.<key>]`` table per platform job.

Usage
-----
Load the configuration for the Linux job::

    from pathlib import Path
    from release_common.config import load_config

    config = load_config(Path(".github/release-config.toml"), "linux-x86_64")
    print(config.archive_name("v1.2.3"))
"""

from __future__ import annotations

import dataclasses
import hashlib
import typing as typ
from pathlib import Path

import tomllib

from .environment import require_env_path
from .errors import ReleaseError
from .naming import (
    ARCHIVE_FORMATS,
    DEFAULT_ARCHIVE_NAME_TEMPLATE,
    artefact_name,
    host_platform,
    safe_ref_name,
)

__all__ = ["DEFAULT_SOURCE_TEMPLATE", "ReleaseConfig", "load_config"]

DEFAULT_SOURCE_TEMPLATE = "target/release/{bin_name}{bin_ext}"


@dataclasses.dataclass(slots=True)
class ReleaseConfig:
    """Concrete configuration produced by :func:`load_config`.

    Parameters
    ----------
    workspace : Path
        Repository root checked out by the GitHub Actions runner.
    bin_name : str
        Executable name shared across targets and used as the asset prefix.
    platform : str
        Operating system label embedded in asset names (``"linux"``,
        ``"Darwin"``).
    arch : str
        Architecture label embedded in asset names (``"x86_64"``).
    archive_format : str
        ``"tar.gz"`` or ``"zip"``.
    dist_dir : str, default="dist"
        Directory beneath :attr:`workspace` receiving archives.
    checksum_algorithm : str, default="sha256"
        Hashing algorithm used for checksum sidecars.
    source : str
        ``str.format`` template locating the built binary.
    bin_ext : str, default=""
        Suffix appended to the binary name (``".exe"`` on Windows).
    archive_name_template : str
        ``str.format`` template for the archive name without extension.
    manifest : str | None, optional
        Manifest path, relative to :attr:`workspace`, holding the version.
    package : str | None, optional
        Expected package name in :attr:`manifest`.
    verify_tag : bool, default=True
        Whether this target runs the release tag check.
    target_key : str | None, optional
        Name of the TOML ``[targets.*]`` entry used to build this config.
    """

    workspace: Path
    bin_name: str
    platform: str
    arch: str
    archive_format: str
    dist_dir: str = "dist"
    checksum_algorithm: str = "sha256"
    source: str = DEFAULT_SOURCE_TEMPLATE
    bin_ext: str = ""
    archive_name_template: str = DEFAULT_ARCHIVE_NAME_TEMPLATE
    manifest: str | None = None
    package: str | None = None
    verify_tag: bool = True
    target_key: str | None = None

    def dist_path(self) -> Path:
        """Return the absolute directory receiving archives."""
        return self.workspace / self.dist_dir

    def manifest_path(self) -> Path | None:
        """Return the absolute manifest path, if one is configured."""
        if self.manifest is None:
            return None
        return self.workspace / self.manifest

    def as_template_context(self, ref_name: str = "") -> dict[str, typ.Any]:
        """Return a mapping suitable for rendering ``str.format`` templates."""
        return {
            "workspace": self.workspace.as_posix(),
            "bin_name": self.bin_name,
            "bin_ext": self.bin_ext or "",
            "platform": self.platform,
            "arch": self.arch,
            "dist_dir": self.dist_dir,
            "ref_name": safe_ref_name(ref_name),
            "target_key": self.target_key or "",
        }

    def archive_name(self, ref_name: str) -> str:
        """Return the asset filename for a build of ``ref_name``."""
        return artefact_name(
            self.archive_name_template,
            self.as_template_context(ref_name),
            self.archive_format,
        )


def load_config(config_file: Path, target_key: str) -> ReleaseConfig:
    """Load release configuration from ``config_file`` for ``target_key``.

    Parameters
    ----------
    config_file : Path
        Path to the TOML configuration file.
    target_key : str
        Key identifying the ``[targets.*]`` section to merge with
        ``[common]``.

    Returns
    -------
    ReleaseConfig
        Merged configuration. ``platform`` and ``arch`` default to the host's
        ``uname`` values when the target leaves them out.

    Raises
    ------
    FileNotFoundError
        Raised when the configuration file is absent at ``config_file``.
    ReleaseError
        Raised when required keys are missing or values are invalid.
    """
    config_file = Path(config_file)
    if not config_file.is_file():
        message = f"Configuration file not found at {config_file}"
        raise FileNotFoundError(message)

    data = _load_toml(config_file)
    common, target_cfg = _extract_sections(data, config_file, target_key)
    _require_keys(common, {"bin_name"}, "common", config_file)
    _require_keys(target_cfg, {"format"}, f"targets.{target_key}", config_file)
    workspace = require_env_path("GITHUB_WORKSPACE")
    host_system, host_machine = host_platform()

    def pick(key: str, default: typ.Any = None) -> typ.Any:
        return target_cfg.get(key, common.get(key, default))

    return ReleaseConfig(
        workspace=workspace,
        bin_name=common["bin_name"],
        platform=target_cfg.get("platform") or host_system,
        arch=target_cfg.get("arch", host_machine),
        archive_format=_validate_format(target_cfg["format"], target_key),
        dist_dir=common.get("dist_dir", "dist"),
        checksum_algorithm=_validate_checksum(common.get("checksum_algorithm")),
        source=pick("source", DEFAULT_SOURCE_TEMPLATE),
        bin_ext=target_cfg.get("bin_ext", ""),
        archive_name_template=pick(
            "archive_name_template", DEFAULT_ARCHIVE_NAME_TEMPLATE
        ),
        manifest=common.get("manifest"),
        package=common.get("package"),
        verify_tag=_validate_flag(pick("verify_tag", True), "verify_tag"),
        target_key=target_key,
    )


def _load_toml(path: Path) -> dict[str, typ.Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_sections(
    data: dict[str, typ.Any], config_path: Path, target_key: str
) -> tuple[dict[str, typ.Any], dict[str, typ.Any]]:
    try:
        common = data["common"]
        target_cfg = data["targets"][target_key]
    except KeyError as exc:
        message = f"Missing configuration key in {config_path}: {exc}"
        raise ReleaseError(message) from exc
    return common, target_cfg


def _validate_format(value: object, target_key: str) -> str:
    if value not in ARCHIVE_FORMATS:
        allowed = ", ".join(ARCHIVE_FORMATS)
        message = (
            f"Unsupported archive format {value!r} for target {target_key}; "
            f"expected one of {allowed}"
        )
        raise ReleaseError(message)
    return typ.cast(str, value)


def _validate_flag(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        message = f"Configuration key {key} must be a boolean, got {value!r}"
        raise ReleaseError(message)
    return value


def _validate_checksum(name: str | None) -> str:
    algorithm = (name or "sha256").lower()
    supported = {item.lower() for item in hashlib.algorithms_guaranteed}
    if algorithm not in supported:
        message = f"Unsupported checksum algorithm: {algorithm}"
        raise ReleaseError(message)
    return algorithm


def _require_keys(
    section: dict[str, typ.Any], keys: set[str], label: str, config_path: Path
) -> None:
    """Ensure ``section`` defines ``keys``."""
    if missing := sorted(key for key in keys if key not in section):
        joined = ", ".join(missing)
        message = (
            "Missing required key(s) "
            f"{joined} in [{label}] section of {config_path}"
        )
        raise ReleaseError(message)
