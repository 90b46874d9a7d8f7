"""Tests for release artefact naming."""

from __future__ import annotations

from types import ModuleType

import pytest


@pytest.fixture
def naming(release_module: object) -> ModuleType:
    """Expose the naming helpers."""
    return release_module("naming")


@pytest.mark.parametrize(
    ("ref_name", "platform", "arch", "archive_format", "expected"),
    [
        ("v1.2.3", "linux", "x86_64", "tar.gz", "sqld-v1.2.3-linux-x86_64.tar.gz"),
        ("v1.2.3", "Darwin", "x86_64", "zip", "sqld-v1.2.3-Darwin-x86_64.zip"),
        ("v1.2.3", "Darwin", "arm64", "zip", "sqld-v1.2.3-Darwin-arm64.zip"),
        ("main", "linux", "x86_64", "tar.gz", "sqld-main-linux-x86_64.tar.gz"),
        ("feature/wal", "linux", "x86_64", "tar.gz", "sqld-feature-wal-linux-x86_64.tar.gz"),
    ],
)
def test_artefact_name_matches_release_layout(
    naming: ModuleType,
    ref_name: str,
    platform: str,
    arch: str,
    archive_format: str,
    expected: str,
) -> None:
    """Names embed the ref and platform identifiers."""
    context = {
        "bin_name": "sqld",
        "ref_name": ref_name,
        "platform": platform,
        "arch": arch,
    }
    assert (
        naming.artefact_name(
            naming.DEFAULT_ARCHIVE_NAME_TEMPLATE, context, archive_format
        )
        == expected
    )


def test_artefact_name_supports_custom_templates(naming: ModuleType) -> None:
    """The Windows job names archives after the runner label only."""
    context = {"bin_name": "sqld", "ref_name": "v1.2.3", "platform": "windows-latest"}
    assert (
        naming.artefact_name("{bin_name}-{ref_name}-{platform}", context, "zip")
        == "sqld-v1.2.3-windows-latest.zip"
    )


def test_artefact_name_rejects_unknown_format(
    naming: ModuleType, release_common: ModuleType
) -> None:
    """Only tarballs and zips are published."""
    with pytest.raises(release_common.ReleaseError, match="Unsupported archive"):
        naming.artefact_name("{bin_name}", {"bin_name": "sqld"}, "7z")


def test_artefact_name_reports_unknown_template_keys(
    naming: ModuleType, release_common: ModuleType
) -> None:
    """Template typos raise a descriptive error."""
    with pytest.raises(release_common.ReleaseError, match="Invalid template key"):
        naming.artefact_name("{bin_name}-{tag}", {"bin_name": "sqld"}, "zip")


def test_artefact_name_rejects_path_separators(
    naming: ModuleType, release_common: ModuleType
) -> None:
    """A template must render a bare filename."""
    with pytest.raises(release_common.ReleaseError, match="invalid filename"):
        naming.artefact_name("dist/{bin_name}", {"bin_name": "sqld"}, "zip")


def test_expected_release_assets(release_common: ModuleType) -> None:
    """The release draft expects one archive per published platform."""
    assert release_common.expected_release_assets("sqld", "v0.17.0") == [
        "sqld-v0.17.0-linux-x86_64.tar.gz",
        "sqld-v0.17.0-Darwin-x86_64.zip",
        "sqld-v0.17.0-Darwin-arm64.zip",
    ]


def test_host_platform_reports_uname_values(
    naming: ModuleType, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The host pair mirrors ``uname -s`` and ``uname -m``."""
    monkeypatch.setattr(naming.platform, "system", lambda: "Darwin")
    monkeypatch.setattr(naming.platform, "machine", lambda: "arm64")
    assert naming.host_platform() == ("Darwin", "arm64")
