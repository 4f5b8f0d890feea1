"""
配置数据模型

定义模组加载器与项目配置。
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict


class ModLoader(Enum):
    """模组加载器"""

    FORGE = "forge"
    NEOFORGE = "neoforge"
    FABRIC = "fabric"
    QUILT = "quilt"

    @classmethod
    def from_str(cls, value: str) -> "ModLoader":
        return cls(value.strip().lower())


@dataclass
class ProjectConfig:
    """
    模组开发项目配置

    由 gradle.properties（以及可选的 modinstall.toml）探测得到，
    决定了所有注册中心查询使用的加载器与游戏版本过滤条件。
    """

    root: Path
    minecraft_version: str
    mod_loader: ModLoader
    mods_dir: Path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "minecraft_version": self.minecraft_version,
            "mod_loader": self.mod_loader.value,
            "mods_dir": str(self.mods_dir),
        }
