"""Configuration loader tests for the release helpers."""

from __future__ import annotations

from pathlib import Path
from types import ModuleType

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
REPO_CONFIG = REPO_ROOT / ".github" / "release-config.toml"


def write_config(workspace: Path, content: str) -> Path:
    """Write ``content`` to ``release-config.toml`` inside ``workspace``."""
    config_file = workspace / "release-config.toml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


def test_release_config_template_context(
    release_common: ModuleType, workspace: Path
) -> None:
    """The configuration exposes the values archive templates may use."""
    config = release_common.ReleaseConfig(
        workspace=workspace,
        bin_name="sqld",
        platform="linux",
        arch="x86_64",
        archive_format="tar.gz",
        target_key="linux-x86_64",
    )

    context = config.as_template_context("refs/heads/feature/x")

    assert context["workspace"] == workspace.as_posix()
    assert context["ref_name"] == "refs-heads-feature-x"
    assert context["target_key"] == "linux-x86_64"
    assert config.archive_name("v1.2.3") == "sqld-v1.2.3-linux-x86_64.tar.gz"
    assert config.dist_path() == workspace / "dist"
    assert config.manifest_path() is None


def test_load_config_merges_common_and_target(
    release_common: ModuleType, workspace: Path
) -> None:
    """``load_config`` merges common values with the requested target."""
    config_file = write_config(
        workspace,
        """\
[common]
bin_name = "sqld"
manifest = "sqld/Cargo.toml"
package = "sqld"
verify_tag = false

[targets.windows]
platform = "windows-latest"
arch = ""
format = "zip"
bin_ext = ".exe"
archive_name_template = "{bin_name}-{ref_name}-{platform}"
verify_tag = true
""",
    )

    config = release_common.load_config(config_file, "windows")

    assert config.workspace == workspace
    assert config.bin_name == "sqld"
    assert config.bin_ext == ".exe"
    assert config.archive_format == "zip"
    assert config.checksum_algorithm == "sha256"
    assert config.verify_tag is True
    assert config.manifest_path() == workspace / "sqld" / "Cargo.toml"
    assert config.archive_name("v1.2.3") == "sqld-v1.2.3-windows-latest.zip"


def test_load_config_defaults_platform_to_host(
    release_common: ModuleType,
    release_module: object,
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Targets without platform labels use the host's ``uname`` values."""
    config_module = release_module("config")
    monkeypatch.setattr(config_module, "host_platform", lambda: ("Darwin", "arm64"))
    config_file = write_config(
        workspace,
        """\
[common]
bin_name = "sqld"

[targets.host]
format = "zip"
""",
    )

    config = release_common.load_config(config_file, "host")

    assert (config.platform, config.arch) == ("Darwin", "arm64")
    assert config.archive_name("v1.2.3") == "sqld-v1.2.3-Darwin-arm64.zip"


@pytest.mark.parametrize(
    ("target_key", "host", "expected"),
    [
        ("linux-x86_64", ("Linux", "x86_64"), "sqld-v0.17.0-linux-x86_64.tar.gz"),
        ("darwin-x86_64", ("Darwin", "x86_64"), "sqld-v0.17.0-Darwin-x86_64.zip"),
        ("darwin-arm64", ("Darwin", "arm64"), "sqld-v0.17.0-Darwin-arm64.zip"),
        ("windows", ("Windows", "AMD64"), "sqld-v0.17.0-windows-latest.zip"),
    ],
)
def test_repository_config_names_match_release_assets(
    release_common: ModuleType,
    release_module: object,
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
    target_key: str,
    host: tuple[str, str],
    expected: str,
) -> None:
    """The checked-in configuration produces the published asset names."""
    monkeypatch.setattr(release_module("config"), "host_platform", lambda: host)

    config = release_common.load_config(REPO_CONFIG, target_key)

    assert config.archive_name("v0.17.0") == expected
    assert config.verify_tag is (target_key == "linux-x86_64")


def test_repository_config_names_macos_archives_after_runner(
    release_common: ModuleType,
    release_module: object,
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An arm64 runner is never labelled x86_64, whichever macOS job runs."""
    monkeypatch.setattr(
        release_module("config"), "host_platform", lambda: ("Darwin", "arm64")
    )

    names = {
        release_common.load_config(REPO_CONFIG, key).archive_name("v1.2.3")
        for key in ("darwin-x86_64", "darwin-arm64")
    }

    assert names == {"sqld-v1.2.3-Darwin-arm64.zip"}


def test_load_config_requires_workspace_env(
    release_common: ModuleType, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """``load_config`` fails when ``GITHUB_WORKSPACE`` is unset."""
    monkeypatch.delenv("GITHUB_WORKSPACE", raising=False)

    with pytest.raises(release_common.ReleaseError) as exc:
        release_common.load_config(REPO_CONFIG, "linux-x86_64")
    assert "Environment variable 'GITHUB_WORKSPACE' is not set" in str(exc.value)


def test_load_config_requires_file(
    release_common: ModuleType, workspace: Path
) -> None:
    """A missing configuration file raises ``FileNotFoundError``."""
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        release_common.load_config(workspace / "absent.toml", "linux-x86_64")


@pytest.mark.parametrize(
    ("content", "error_substring"),
    [
        pytest.param(
            '[common]\nbin_name = "sqld"\n',
            "Missing configuration key",
            id="missing-targets",
        ),
        pytest.param(
            '[common]\n[targets.linux-x86_64]\nformat = "zip"\n',
            "Missing required key(s) bin_name",
            id="missing-bin-name",
        ),
        pytest.param(
            '[common]\nbin_name = "sqld"\n[targets.linux-x86_64]\nplatform = "linux"\n',
            "Missing required key(s) format",
            id="missing-format",
        ),
        pytest.param(
            '[common]\nbin_name = "sqld"\n[targets.linux-x86_64]\nformat = "rar"\n',
            "Unsupported archive format 'rar'",
            id="bad-format",
        ),
        pytest.param(
            '[common]\nbin_name = "sqld"\nchecksum_algorithm = "crc32"\n'
            '[targets.linux-x86_64]\nformat = "zip"\n',
            "Unsupported checksum algorithm: crc32",
            id="bad-checksum",
        ),
        pytest.param(
            '[common]\nbin_name = "sqld"\nverify_tag = "yes"\n'
            '[targets.linux-x86_64]\nformat = "zip"\n',
            "verify_tag must be a boolean",
            id="bad-flag",
        ),
    ],
)
def test_load_config_rejects_invalid_files(
    release_common: ModuleType,
    workspace: Path,
    content: str,
    error_substring: str,
) -> None:
    """Invalid configuration surfaces a descriptive ``ReleaseError``."""
    config_file = write_config(workspace, content)

    with pytest.raises(release_common.ReleaseError) as exc:
        release_common.load_config(config_file, "linux-x86_64")
    assert error_substring in str(exc.value)
