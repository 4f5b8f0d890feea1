"""
项目探测

从当前目录向上查找 gradle.properties，确定 Minecraft 版本、模组加载器和模组目录。
项目根目录下的 modinstall.toml 可以覆盖探测结果。
"""

import os
import re
from pathlib import Path
from typing import Dict, Optional, Union

import toml
from loguru import logger

from modinstall.exceptions import ConfigError, ProjectNotFoundError
from modinstall.models import ModLoader, ProjectConfig

GRADLE_PROPERTIES = "gradle.properties"
OVERRIDE_FILE = "modinstall.toml"

_PROPERTY_SEPARATOR = re.compile(r"\s*[=:]\s*|\s+")


def find_project_root(start: Union[str, Path, None] = None) -> Optional[Path]:
    """向上查找包含 gradle.properties 的目录"""
    current = Path(start or os.getcwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / GRADLE_PROPERTIES).is_file():
            return directory
    return None


def load_properties(path: Path) -> Dict[str, str]:
    """读取 Java properties 文件（只处理单行键值）"""
    properties = {}
    for raw in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        if not line or line.startswith(("#", "!")):
            continue
        parts = _PROPERTY_SEPARATOR.split(line, maxsplit=1)
        key = parts[0]
        value = parts[1].strip() if len(parts) > 1 else ""
        properties[key] = value
    return properties


def detect_loader(properties: Dict[str, str], root: Path) -> ModLoader:
    """根据 gradle.properties 和项目目录结构判断模组加载器"""
    if (
        "neoforge_version" in properties
        or "neo_version" in properties
        or (root / "NeoForge").exists()
    ):
        return ModLoader.NEOFORGE

    if (
        "fabric_version" in properties
        or "fabric_loader_version" in properties
        or (root / "Fabric").exists()
    ):
        return ModLoader.FABRIC

    if "forge_version" in properties or (root / "Forge").exists():
        return ModLoader.FORGE

    if "quilt_version" in properties:
        return ModLoader.QUILT

    return ModLoader.FORGE


def load_overrides(root: Path) -> dict:
    """读取 modinstall.toml（不存在时返回空字典）"""
    path = root / OVERRIDE_FILE
    if not path.is_file():
        return {}
    try:
        return toml.load(str(path))
    except toml.TomlDecodeError as e:
        raise ConfigError(f"{OVERRIDE_FILE} 解析失败: {e}", context={"path": str(path)})


def detect_project(
    start: Union[str, Path, None] = None,
    minecraft_version: Optional[str] = None,
    mod_loader: Optional[str] = None,
    mods_dir: Optional[str] = None,
) -> ProjectConfig:
    """
    探测项目配置

    优先级：参数 > modinstall.toml > gradle.properties

    Raises:
        ProjectNotFoundError: 找不到 gradle.properties
        ConfigError: 无法确定 Minecraft 版本或加载器无效
    """
    root = find_project_root(start)
    if root is None:
        raise ProjectNotFoundError(
            "找不到 gradle.properties，请在 Minecraft 模组项目目录中运行"
        )

    properties = load_properties(root / GRADLE_PROPERTIES)
    overrides = load_overrides(root)

    version = (
        minecraft_version
        or overrides.get("minecraft_version")
        or properties.get("minecraft_version")
        or properties.get("mc_version")
    )
    if not version:
        raise ConfigError(
            "无法从 gradle.properties 读取 minecraft_version",
            context={"root": str(root)},
        )

    loader_name = mod_loader or overrides.get("loader")
    try:
        loader = (
            ModLoader.from_str(loader_name)
            if loader_name
            else detect_loader(properties, root)
        )
    except ValueError:
        raise ConfigError(
            f"不支持的模组加载器: {loader_name}",
            context={"supported": [item.value for item in ModLoader]},
        )

    folder = Path(mods_dir or overrides.get("mods_dir") or root / "run" / "mods")
    if not folder.is_absolute():
        folder = root / folder
    os.makedirs(folder, exist_ok=True)

    config = ProjectConfig(
        root=root,
        minecraft_version=str(version),
        mod_loader=loader,
        mods_dir=folder,
    )
    logger.debug(f"项目配置: {config.to_dict()}")
    return config
