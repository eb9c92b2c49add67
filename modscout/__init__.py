"""
ModScout

在 Modrinth 与 CurseForge 两个目录中为指定的 Minecraft 版本和加载器
查找最合适的模组文件。
"""

__version__ = "0.1.0"

from modscout.models import (
    NormalizedMod,
    NormalizedFile,
    ParsedModList,
    ResolutionOutcome,
    ResolutionStatus,
    ResolveContext,
)
from modscout.orchestrator import ModScoutOrchestrator
from modscout.modlist import parse_mod_list_file
from modscout.services import BatchImporter, pick_best_file, sort_versions

__all__ = [
    "__version__",
    "NormalizedMod",
    "NormalizedFile",
    "ParsedModList",
    "ResolutionOutcome",
    "ResolutionStatus",
    "ResolveContext",
    "ModScoutOrchestrator",
    "parse_mod_list_file",
    "BatchImporter",
    "pick_best_file",
    "sort_versions",
]
