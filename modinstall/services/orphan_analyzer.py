"""
孤立依赖分析服务

统计已安装模组之间的依赖引用次数，找出不再被任何模组需要的依赖。
用于单个模组的删除（连带删除一层孤立依赖）和整个目录的清理。
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from loguru import logger

from modinstall.exceptions import AmbiguousMatchError, ModNotFoundError
from modinstall.metadata import ManifestMetadata, MetadataExtractor
from modinstall.models import InstalledArtifact
from modinstall.repository import ModsFolder

# 常见依赖库的名称片段
LIBRARY_HINTS = (
    "lib",
    "api",
    "core",
    "config",
    "cloth",
    "balm",
    "bookshelf",
    "architectury",
)


def is_likely_library(mod_id: str, filename: str) -> bool:
    """根据模组 ID 和文件名判断是否像是依赖库"""
    text = (mod_id + filename).lower()
    return any(hint in text for hint in LIBRARY_HINTS)


@dataclass
class RemovalResult:
    """删除结果"""

    target: InstalledArtifact
    orphans: List[InstalledArtifact] = field(default_factory=list)

    @property
    def removed(self) -> List[InstalledArtifact]:
        return [self.target, *self.orphans]


class OrphanAnalyzer:
    """孤立依赖分析器"""

    def __init__(
        self,
        mods_folder: ModsFolder,
        extractor: Optional[MetadataExtractor] = None,
    ):
        self.mods_folder = mods_folder
        self.extractor = extractor or MetadataExtractor()

    def read_metadata(
        self, artifacts: Iterable[InstalledArtifact]
    ) -> Dict[InstalledArtifact, ManifestMetadata]:
        """读取每个文件的清单（每次都重新读取磁盘）"""
        return {artifact: self.extractor.extract(artifact.path) for artifact in artifacts}

    @staticmethod
    def usage_counts(metadata: Iterable[ManifestMetadata]) -> Counter:
        """统计每个模组 ID 被多少个已安装模组声明为必需依赖"""
        counts: Counter = Counter()
        for meta in metadata:
            counts.update(meta.dependencies)
        return counts

    def find_unused_libraries(self) -> List[InstalledArtifact]:
        """
        查找可以清理的依赖库

        候选条件：能识别模组 ID、没有任何已安装模组依赖它、且看起来像依赖库。
        无法识别 ID 的文件和看起来像独立模组的文件永远不会被列入。
        """
        metadata = self.read_metadata(self.mods_folder.list_jars())
        counts = self.usage_counts(metadata.values())

        candidates = []
        for artifact, meta in metadata.items():
            if not meta.known:
                continue
            if counts[meta.mod_id] > 0:
                continue
            if not is_likely_library(meta.mod_id, artifact.filename):
                logger.debug(f"{artifact.filename} 未被依赖，但不像依赖库，保留")
                continue
            candidates.append(artifact)

        return candidates

    def clean(self, dry_run: bool = False) -> List[InstalledArtifact]:
        """
        清理未被使用的依赖库

        Args:
            dry_run: 只列出候选文件，不删除

        Returns:
            被删除（或将被删除）的文件列表
        """
        logger.info("正在分析已安装模组的依赖关系...")
        candidates = self.find_unused_libraries()

        if not candidates:
            logger.success("没有发现未使用的依赖库")
            return []

        logger.warning(f"发现 {len(candidates)} 个可能未使用的依赖库:")
        for artifact in candidates:
            logger.warning(f"  - {artifact.filename}")

        if dry_run:
            return candidates

        logger.info("正在删除...")
        self._delete_all(candidates)
        return candidates

    def remove(self, name: str) -> RemovalResult:
        """
        删除单个模组，并连带删除只被它使用的依赖（只处理一层）

        Args:
            name: 文件名片段（不区分大小写）

        Raises:
            ModNotFoundError: 没有匹配的文件
            AmbiguousMatchError: 匹配到多个文件
        """
        matches = self.mods_folder.find(name)
        if not matches:
            raise ModNotFoundError(
                f"没有找到匹配 '{name}' 的模组", context={"query": name}
            )
        if len(matches) > 1:
            raise AmbiguousMatchError(
                f"找到多个匹配 '{name}' 的模组，请指定更精确的名称",
                matches=[artifact.filename for artifact in matches],
                context={"query": name},
            )

        target = matches[0]
        result = RemovalResult(target=target)

        dependencies = self.extractor.extract(target.path).dependencies
        if dependencies:
            logger.info("正在检查不再使用的依赖...")
            result.orphans = self._find_orphans(target, dependencies)

        self._delete_all(result.removed)

        if result.orphans:
            logger.info(f"已删除 {len(result.orphans)} 个不再使用的依赖")
        return result

    def _find_orphans(
        self, target: InstalledArtifact, dependencies: Iterable[str]
    ) -> List[InstalledArtifact]:
        others = [a for a in self.mods_folder.list_files() if a.path != target.path]
        other_metadata = self.read_metadata(a for a in others if a.is_jar)
        still_used = self.usage_counts(other_metadata.values())

        orphans: List[InstalledArtifact] = []
        for dep_id in sorted(dependencies):
            if still_used[dep_id] > 0:
                logger.debug(f"依赖 {dep_id} 仍被其他模组使用，保留")
                continue

            # 按文件名匹配依赖对应的 jar
            simple_id = dep_id.lower().replace("_", "-")
            match = next(
                (a for a in others if simple_id in a.filename.lower()), None
            )
            if match is not None and match not in orphans:
                orphans.append(match)

        return orphans

    def _delete_all(self, artifacts: Iterable[InstalledArtifact]):
        """按顺序删除，中途失败不会回滚已删除的文件"""
        for artifact in artifacts:
            self.mods_folder.delete(artifact)
            logger.success(f"已删除: {artifact.filename}")
