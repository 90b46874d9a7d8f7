"""Public interface for the release helper package."""

from .config import ReleaseConfig, load_config
from .environment import coerce_bool, ref_from_environment, require_env_path
from .errors import ReleaseError, VersionMismatchError
from .manifest import package_version, read_manifest, read_toolchain_channel
from .modes import ReleaseModes, determine_release_modes
from .naming import artefact_name, expected_release_assets
from .packaging import PackageResult, package_release
from .refs import RefKind, ReleaseRef, parse_ref, release_version
from .validation import ValidationResult, ensure_version_matches, validate

__all__ = [
    "artefact_name",
    "coerce_bool",
    "determine_release_modes",
    "ensure_version_matches",
    "expected_release_assets",
    "load_config",
    "package_release",
    "package_version",
    "PackageResult",
    "parse_ref",
    "read_manifest",
    "read_toolchain_channel",
    "ref_from_environment",
    "RefKind",
    "ReleaseConfig",
    "ReleaseError",
    "ReleaseModes",
    "ReleaseRef",
    "release_version",
    "require_env_path",
    "validate",
    "ValidationResult",
    "VersionMismatchError",
]
