"""
Fabric 清单解析

读取 fabric.mod.json 中的 id 与 depends。
"""

import json

from modinstall.exceptions import ManifestParseError
from modinstall.metadata.base import ManifestMetadata, ManifestSchema


class FabricManifest(ManifestSchema):
    """fabric.mod.json 清单"""

    name = "fabric"
    entry_names = ("fabric.mod.json",)

    def parse(self, text: str) -> ManifestMetadata:
        try:
            # 部分模组的 description 中带有未转义的换行符
            data = json.loads(text, strict=False)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"fabric.mod.json 不是合法的 JSON: {e}")

        if not isinstance(data, dict):
            raise ManifestParseError("fabric.mod.json 顶层必须是对象")

        mod_id = data.get("id")
        if not isinstance(mod_id, str) or not mod_id:
            raise ManifestParseError("fabric.mod.json 缺少 id 字段")

        depends = data.get("depends") or {}
        if not isinstance(depends, dict):
            raise ManifestParseError(
                "fabric.mod.json 的 depends 必须是对象",
                context={"mod_id": mod_id},
            )

        # depends 的每个键都是必需依赖，版本范围不参与计算
        return ManifestMetadata.build(mod_id, depends.keys())
