"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from loguru import logger

from fakes import FakeDownloadManager, FakeModrinthClient
from modinstall.models import ModLoader, ProjectConfig
from modinstall.repository import ModsFolder


@pytest.fixture(autouse=True)
def reset_logger():
    """每个测试结束后移除日志处理器（CLI 测试会把 sink 指向临时输出）"""
    yield
    logger.remove()


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    path = tmp_path / "run" / "mods"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def mods_folder(mods_dir: Path) -> ModsFolder:
    return ModsFolder(mods_dir)


@pytest.fixture
def project_config(tmp_path: Path, mods_dir: Path) -> ProjectConfig:
    return ProjectConfig(
        root=tmp_path,
        minecraft_version="1.20.1",
        mod_loader=ModLoader.FABRIC,
        mods_dir=mods_dir,
    )


@pytest.fixture
def client() -> FakeModrinthClient:
    return FakeModrinthClient()


@pytest.fixture
def downloader() -> FakeDownloadManager:
    return FakeDownloadManager()

