"""
版本匹配服务

实现严格的文件选择（游戏版本精确匹配、加载器软匹配、发布渠道优先级）
以及 Minecraft 版本号排序。
"""

from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence

from modscout.models import NormalizedFile, ReleaseChannel


def matches_version(file: NormalizedFile, game_version: str) -> bool:
    """文件是否支持目标游戏版本（严格字符串相等，不做语义版本推断）"""
    if not game_version:
        return True
    return game_version in file.game_versions


def matches_loader(file: NormalizedFile, loader: str) -> bool:
    """文件是否支持目标加载器（不区分大小写）"""
    if not loader:
        return True
    return loader.lower() in (tag.lower() for tag in file.loaders)


def pick_best_file(
    files: Sequence[NormalizedFile],
    game_version: str,
    loader: str,
) -> Optional[NormalizedFile]:
    """
    选择与版本和加载器最匹配的文件

    1. 版本必须精确匹配，没有匹配时直接返回 None
    2. 加载器是软偏好：过滤后为空则保留版本过滤的结果
    3. release 优先于 beta，再退回到第一个文件；同级取目录返回顺序中的第一个

    Args:
        files: 目录返回顺序的文件列表
        game_version: 目标游戏版本，空表示不限
        loader: 目标加载器，空表示不限

    Returns:
        最佳文件或 None
    """
    candidates = [f for f in files if matches_version(f, game_version)]

    if loader and candidates:
        by_loader = [f for f in candidates if matches_loader(f, loader)]
        if by_loader:
            candidates = by_loader

    if not candidates:
        return None

    for channel in (ReleaseChannel.RELEASE, ReleaseChannel.BETA):
        for file in candidates:
            if file.release_type is channel:
                return file
    return candidates[0]


def _segment(value: str) -> int:
    # 只接受纯 ASCII 数字段
    return int(value) if value.isascii() and value.isdigit() else 0


def compare_versions(a: str, b: str) -> int:
    """
    逐段比较点分版本号

    缺失的段和无法解析的段都按 0 处理，因此 "1.20" 与 "1.20.0" 相等。

    Returns:
        a < b 返回负数，相等返回 0，a > b 返回正数
    """
    pa = [_segment(s) for s in a.split(".")]
    pb = [_segment(s) for s in b.split(".")]
    for i in range(max(len(pa), len(pb))):
        va = pa[i] if i < len(pa) else 0
        vb = pb[i] if i < len(pb) else 0
        if va != vb:
            return va - vb
    return 0


def sort_versions(versions: Iterable[str]) -> List[str]:
    """按版本号降序排序（新版本在前，稳定排序）"""
    return sorted(versions, key=cmp_to_key(compare_versions), reverse=True)


def merge_available_versions(*version_lists: Iterable[str]) -> List[str]:
    """合并多个版本列表，去重后重新降序排序"""
    merged = {}
    for versions in version_lists:
        for version in versions:
            merged.setdefault(version, None)
    return sort_versions(merged)


def extract_available_versions(files: Iterable[NormalizedFile]) -> List[str]:
    """提取所有文件支持的游戏版本（去重后降序）"""
    return merge_available_versions(*(file.game_versions for file in files))
