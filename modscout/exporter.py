"""
模组列表导出

生成供下载工具/界面使用的导出文档，格式可被 modlist 解析器重新读入。
"""

import json
from typing import Iterable, List, Optional, Tuple

import aiofiles

from modscout.models import (
    NormalizedFile,
    NormalizedMod,
    ResolutionOutcome,
    ResolutionStatus,
)

ExportEntry = Tuple[NormalizedMod, Optional[NormalizedFile]]


def default_export_filename(game_version: str, loader: str) -> str:
    return f"modlist-{game_version}-{loader}.json"


def entries_from_outcomes(outcomes: Iterable[ResolutionOutcome]) -> List[ExportEntry]:
    """从解析结果中取出找到的模组（及其文件）"""
    return [
        (o.mod, o.file) for o in outcomes if o.status is ResolutionStatus.FOUND
    ]


def build_export_document(
    entries: Iterable[ExportEntry], game_version: str, loader: str
) -> dict:
    """
    构建导出文档

    Args:
        entries: (模组, 选中的文件或 None)
        game_version: 目标游戏版本
        loader: 目标加载器

    Returns:
        {gameVersion, loader, mods: [...]}
    """
    mods = []
    for mod, file in entries:
        mods.append(
            {
                "title": mod.title,
                "source": mod.source.value,
                "slug": mod.slug,
                "file": (
                    {"name": file.name, "filename": file.filename, "url": file.url}
                    if file is not None
                    else None
                ),
                "url": mod.page_url,
            }
        )
    return {"gameVersion": game_version, "loader": loader, "mods": mods}


async def write_export(path: str, document: dict) -> str:
    """将导出文档写入 JSON 文件"""
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(json.dumps(document, indent=2, ensure_ascii=False))
    return path
