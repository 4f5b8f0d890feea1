"""
Forge / NeoForge 清单解析

逐行扫描 mods.toml。依赖以 [[dependencies.<modid>]] 块的形式出现，
每个块中的 modId 与必需标记先暂存，遇到下一个块头或文件结束时再提交。
"""

import re
from typing import List, Optional, Set

from modinstall.metadata.base import ManifestMetadata, ManifestSchema, is_platform_id

MOD_ID_PATTERN = re.compile(r"""^modId\s*=\s*["']([^"']+)["']""")
MANDATORY_PATTERN = re.compile(r"^mandatory\s*=\s*true\b", re.IGNORECASE)
REQUIRED_TYPE_PATTERN = re.compile(r"""^type\s*=\s*["']required["']""", re.IGNORECASE)


class _DependencyScanner:
    """mods.toml 依赖块状态机"""

    def __init__(self):
        self.mod_id: Optional[str] = None
        self.dependencies: Set[str] = set()
        self._in_dependency_block = False
        self._pending_id: Optional[str] = None
        self._pending_required = False

    def feed(self, line: str):
        if line.startswith("["):
            self._flush()
            self._in_dependency_block = line.startswith("[[dependencies")
            return

        match = MOD_ID_PATTERN.match(line)
        if match:
            if self._in_dependency_block:
                self._pending_id = match.group(1)
            elif self.mod_id is None:
                self.mod_id = match.group(1)
            return

        if not self._in_dependency_block:
            return

        if MANDATORY_PATTERN.match(line) or REQUIRED_TYPE_PATTERN.match(line):
            self._pending_required = True

    def finish(self) -> ManifestMetadata:
        # 最后一个依赖块没有后续块头
        self._flush()
        return ManifestMetadata.build(self.mod_id, self.dependencies)

    def _flush(self):
        if (
            self._pending_id is not None
            and self._pending_required
            and not is_platform_id(self._pending_id)
        ):
            self.dependencies.add(self._pending_id)
        self._pending_id = None
        self._pending_required = False


class ForgeManifest(ManifestSchema):
    """META-INF/mods.toml 与 META-INF/neoforge.mods.toml 清单"""

    name = "forge"
    entry_names = ("META-INF/mods.toml", "META-INF/neoforge.mods.toml")

    def parse(self, text: str) -> ManifestMetadata:
        scanner = _DependencyScanner()
        for line in self._significant_lines(text):
            scanner.feed(line)
        return scanner.finish()

    @staticmethod
    def _significant_lines(text: str) -> List[str]:
        lines = []
        for raw in text.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            lines.append(line)
        return lines
