"""
ModScout 数据模型包

包含目录模型、解析结果模型与模组列表模型。
"""

from modscout.models.catalog import (
    CatalogSource,
    ReleaseChannel,
    ModLoader,
    KNOWN_LOADERS,
    NormalizedMod,
    NormalizedFile,
    split_curseforge_tags,
)
from modscout.models.resolution import (
    ResolutionStatus,
    ResolutionOutcome,
    ResolveContext,
)
from modscout.models.modlist import ParsedModList

__all__ = [
    # 目录模型
    "CatalogSource",
    "ReleaseChannel",
    "ModLoader",
    "KNOWN_LOADERS",
    "NormalizedMod",
    "NormalizedFile",
    "split_curseforge_tags",
    # 解析结果
    "ResolutionStatus",
    "ResolutionOutcome",
    "ResolveContext",
    # 模组列表
    "ParsedModList",
]
