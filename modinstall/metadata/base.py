"""
模组清单基类

定义清单解析结果与清单格式接口。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Iterable, Optional

# 游戏本体与加载器本身，不参与依赖图计算
PLATFORM_IDS: FrozenSet[str] = frozenset(
    {"minecraft", "java", "fabricloader", "forge", "neoforge"}
)


def is_platform_id(mod_id: str) -> bool:
    return mod_id in PLATFORM_IDS


@dataclass(frozen=True)
class ManifestMetadata:
    """
    从模组文件中读取的元数据。

    mod_id 为 None 表示无法识别该文件（"unknown"），
    这样的文件永远不会被当作可删除的孤立依赖。
    """

    mod_id: Optional[str] = None
    dependencies: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def unknown(cls) -> "ManifestMetadata":
        return cls()

    @property
    def known(self) -> bool:
        return self.mod_id is not None

    @classmethod
    def build(
        cls, mod_id: Optional[str], dependencies: Iterable[str]
    ) -> "ManifestMetadata":
        return cls(
            mod_id=mod_id,
            dependencies=frozenset(
                dep for dep in dependencies if dep and not is_platform_id(dep)
            ),
        )


class ManifestSchema(ABC):
    """清单格式基类，每种格式负责自己的文本扫描逻辑"""

    #: 清单格式名称（用于日志）
    name: str = ""

    #: 压缩包内的清单路径，按优先级排列
    entry_names: tuple = ()

    def find_entry(self, names: AbstractSet[str]) -> Optional[str]:
        """在压缩包条目中查找该格式的清单文件"""
        for entry in self.entry_names:
            if entry in names:
                return entry
        return None

    @abstractmethod
    def parse(self, text: str) -> ManifestMetadata:
        """
        解析清单文本

        Raises:
            ManifestParseError: 清单内容不合法
        """
        pass
