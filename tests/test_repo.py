"""Tests for extracting dependencies from a local repo."""

from pathlib import Path

import pytest

from argocd_deps import datasource
from argocd_deps.config import ExtractConfig
from argocd_deps.exceptions import ArgoException, InputException
from argocd_deps.repo import extract_all_package_files, repo_root

TESTDATA = Path("tests/testdata/repo")


async def test_extract_all_package_files() -> None:
    """Test extracting dependencies from every manifest in a directory."""
    results = await extract_all_package_files(ExtractConfig(path=TESTDATA))

    assert [result.package_file for result in results] == [
        "apps/guestbook.yaml",
        "apps/infra/cert-manager.yml",
        "apps/podinfo.yaml",
    ]
    assert [
        [(dep.datasource, dep.dep_name, dep.current_value) for dep in result.deps]
        for result in results
    ] == [
        [
            (
                datasource.GIT_TAGS,
                "https://github.com/argoproj/argocd-example-apps",
                "v1.2.0",
            ),
            (datasource.DOCKER, "gcr.io/heptio-images/ks-guestbook-demo", "0.2"),
        ],
        [
            (datasource.HELM, "cert-manager", "v1.14.4"),
            (datasource.GIT_TAGS, "https://github.com/example/cluster-config", "main"),
        ],
        [
            (datasource.DOCKER, "ghcr.io/stefanprodan/charts/podinfo", "6.5.4"),
        ],
    ]


async def test_file_match() -> None:
    """Test limiting the scan with file patterns relative to the root."""
    config = ExtractConfig(path=TESTDATA, file_match=["apps/infra/*.yml"])
    results = await extract_all_package_files(config)
    assert [result.package_file for result in results] == [
        "apps/infra/cert-manager.yml"
    ]


async def test_ignore_dirs() -> None:
    """Test that ignored directories are not scanned."""
    results = await extract_all_package_files(
        ExtractConfig(path=TESTDATA, ignore_dirs=[])
    )
    assert "venv/ignored.yaml" in [result.package_file for result in results]


async def test_not_a_directory(tmp_path: Path) -> None:
    """Test an input path that does not exist."""
    with pytest.raises(InputException, match="Path is not a directory"):
        await extract_all_package_files(ExtractConfig(path=tmp_path / "missing"))


async def test_unreadable_file(tmp_path: Path) -> None:
    """Test that a file that is not utf-8 text fails the scan."""
    (tmp_path / "app.yaml").write_bytes(b"\xff\xfe\x00apiVersion")
    with pytest.raises(ArgoException, match="Failed to read file"):
        await extract_all_package_files(ExtractConfig(path=tmp_path))


def test_repo_root_outside_repo(tmp_path: Path) -> None:
    """Test that a path outside of a git repo is an input error."""
    with pytest.raises(InputException, match="Unable to find git repo"):
        repo_root(tmp_path)
