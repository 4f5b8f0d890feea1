"""Tests for the recursive installer."""

from pathlib import Path

import pytest

from fakes import FakeDownloadManager, FakeModrinthClient, make_version
from modinstall.exceptions import (
    APIError,
    DownloadNetworkError,
    IncompatibleVersionError,
    ModNotFoundError,
    NoDownloadableFileError,
)
from modinstall.models import FileInfo, ProjectConfig
from modinstall.repository import ModsFolder
from modinstall.services import DependencyResolver, InstallStatus


@pytest.fixture
def resolver(
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
    mods_folder: ModsFolder,
    project_config: ProjectConfig,
) -> DependencyResolver:
    return DependencyResolver(client, downloader, mods_folder, project_config)


async def test_installs_dependencies_before_target(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", requires=["P2"])])
    client.add_project("P2", "libutil")

    result = await resolver.install("coolmod")

    assert result.status == InstallStatus.INSTALLED
    assert result.version == "1.0.0"
    assert downloader.downloads == ["libutil-1.0.0.jar", "coolmod-1.0.0.jar"]
    assert [dep.project.slug for dep in result.dependencies] == ["libutil"]
    assert result.downloaded_files() == ["libutil-1.0.0.jar", "coolmod-1.0.0.jar"]


async def test_second_install_is_idempotent(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", requires=["P2"])])
    client.add_project("P2", "libutil")

    await resolver.install("coolmod")
    project_calls = list(client.project_calls)

    again = await resolver.install("coolmod")

    assert again.status == InstallStatus.ALREADY_INSTALLED
    assert again.dependencies == []
    assert downloader.downloads.count("coolmod-1.0.0.jar") == 1
    # 已存在的文件不再递归处理依赖
    assert client.project_calls == project_calls


async def test_no_search_hits_raises_not_found(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
    mods_dir: Path,
) -> None:
    client.add_project("P1", "coolmod")

    with pytest.raises(ModNotFoundError):
        await resolver.install("doesnotexist")

    assert downloader.downloads == []
    assert list(mods_dir.iterdir()) == []


async def test_no_compatible_version_raises_incompatible(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("P1", "coolmod", versions=[])

    with pytest.raises(IncompatibleVersionError):
        await resolver.install("coolmod")

    assert downloader.downloads == []


async def test_version_without_files_raises(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", files=[])])

    with pytest.raises(NoDownloadableFileError):
        await resolver.install("coolmod")

    assert downloader.downloads == []


async def test_prefers_primary_file(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    files = [
        FileInfo(url="https://cdn.example.com/a", filename="coolmod-sources.jar", size=1),
        FileInfo(url="https://cdn.example.com/b", filename="coolmod.jar", size=1, primary=True),
    ]
    client.add_project("P1", "coolmod", [make_version("coolmod", files=files)])

    await resolver.install("coolmod")

    assert downloader.downloads == ["coolmod.jar"]


async def test_falls_back_to_first_file(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    files = [
        FileInfo(url="https://cdn.example.com/a", filename="first.jar", size=1),
        FileInfo(url="https://cdn.example.com/b", filename="second.jar", size=1),
    ]
    client.add_project("P1", "coolmod", [make_version("coolmod", files=files)])

    await resolver.install("coolmod")

    assert downloader.downloads == ["first.jar"]


async def test_uses_first_version(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project(
        "P1",
        "coolmod",
        [make_version("coolmod", version="2.0.0"), make_version("coolmod", version="1.0.0")],
    )

    result = await resolver.install("coolmod")

    assert result.version == "2.0.0"
    assert downloader.downloads == ["coolmod-2.0.0.jar"]


async def test_cyclic_dependencies_terminate(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("PA", "alpha", [make_version("alpha", requires=["PB"])])
    client.add_project("PB", "beta", [make_version("beta", requires=["PA"])])

    await resolver.install("alpha")

    assert downloader.downloads == ["beta-1.0.0.jar", "alpha-1.0.0.jar"]
    assert client.project_calls == ["PB"]


async def test_shared_dependency_resolved_once(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("PA", "alpha", [make_version("alpha", requires=["PB", "PC"])])
    client.add_project("PB", "beta", [make_version("beta", requires=["PC"])])
    client.add_project("PC", "gamma")

    await resolver.install("alpha")

    assert downloader.downloads == ["gamma-1.0.0.jar", "beta-1.0.0.jar", "alpha-1.0.0.jar"]
    assert client.project_calls.count("PC") == 1


async def test_optional_dependencies_are_skipped(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", optional=["P2"])])
    client.add_project("P2", "extras")

    await resolver.install("coolmod")

    assert downloader.downloads == ["coolmod-1.0.0.jar"]
    assert client.project_calls == []


async def test_dependency_failures_are_downgraded(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    client.add_project(
        "P1",
        "coolmod",
        [make_version("coolmod", requires=["MISSING", "BROKEN", "OLD", "P2"])],
    )
    client.add_project("BROKEN", "brokenlib")
    client.failing_projects.add("BROKEN")
    client.add_project("OLD", "oldlib", versions=[])
    client.add_project("P2", "libutil")

    result = await resolver.install("coolmod")

    assert result.status == InstallStatus.INSTALLED
    assert len(result.warnings) == 3
    assert downloader.downloads == ["libutil-1.0.0.jar", "coolmod-1.0.0.jar"]


async def test_already_installed_dependency_is_not_downloaded(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
    mods_dir: Path,
) -> None:
    (mods_dir / "libutil-1.0.0.jar").write_bytes(b"jar")
    client.add_project("P1", "coolmod", [make_version("coolmod", requires=["P2"])])
    client.add_project("P2", "libutil")

    result = await resolver.install("coolmod")

    assert downloader.downloads == ["coolmod-1.0.0.jar"]
    assert result.dependencies[0].status == InstallStatus.ALREADY_INSTALLED


async def test_network_failure_on_target_aborts(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
) -> None:
    async def failing_search(*args, **kwargs):
        raise APIError("connection refused")

    client.search = failing_search

    with pytest.raises(APIError):
        await resolver.install("coolmod")

    assert downloader.downloads == []


async def test_target_download_failure_aborts(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
    mods_dir: Path,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", requires=["P2"])])
    client.add_project("P2", "libutil")
    downloader.failing.add("coolmod-1.0.0.jar")

    with pytest.raises(DownloadNetworkError):
        await resolver.install("coolmod")

    assert not (mods_dir / "coolmod-1.0.0.jar").exists()
    # 依赖在目标之前下载，已完成的依赖保留
    assert sorted(p.name for p in mods_dir.iterdir()) == ["libutil-1.0.0.jar"]


async def test_dependency_download_failure_is_a_warning(
    resolver: DependencyResolver,
    client: FakeModrinthClient,
    downloader: FakeDownloadManager,
    mods_dir: Path,
) -> None:
    client.add_project("P1", "coolmod", [make_version("coolmod", requires=["P2"])])
    client.add_project("P2", "libutil")
    downloader.failing.add("libutil-1.0.0.jar")

    result = await resolver.install("coolmod")

    assert result.status == InstallStatus.INSTALLED
    assert len(result.warnings) == 1
    assert result.dependencies == []
    assert downloader.downloads == ["coolmod-1.0.0.jar"]
    assert sorted(p.name for p in mods_dir.iterdir()) == ["coolmod-1.0.0.jar"]
