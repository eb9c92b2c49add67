"""
单目录解析服务

在一个目录中完成：直接查找 -> 变体搜索 -> 文件选择 -> 版本不匹配诊断。
"""

from typing import Optional, Sequence

from loguru import logger

from modscout.api.base import CatalogAdapter
from modscout.exceptions import TRANSPORT_ERRORS
from modscout.models import NormalizedMod, ResolutionOutcome, ResolveContext
from modscout.services.variations import generate_search_variations
from modscout.services.version_matcher import (
    extract_available_versions,
    pick_best_file,
)


def select_search_match(
    mods: Sequence[NormalizedMod], query: str, variation: str
) -> NormalizedMod:
    """
    从一页搜索结果中选出模组

    slug 或标题与原始查询相同（不区分大小写），或 slug 与当前变体相同时
    视为精确匹配；否则取排名第一的结果。
    """
    query_lower = query.lower()
    slug_forms = {variation.lower(), "-".join(variation.split()).lower()}
    for mod in mods:
        slug = mod.slug.lower()
        if slug == query_lower or mod.title.lower() == query_lower or slug in slug_forms:
            return mod
    return mods[0]


class CatalogResolver:
    """单目录解析器"""

    def __init__(self, adapter: CatalogAdapter):
        self.adapter = adapter

    @property
    def catalog_name(self) -> str:
        return self.adapter.display_name

    async def resolve(
        self, query: str, context: ResolveContext
    ) -> Optional[ResolutionOutcome]:
        """
        解析模组

        Args:
            query: 模组名称或 slug
            context: 目标版本、加载器、是否自动选文件

        Returns:
            ResolutionOutcome（found / version_mismatch），该目录中找不到时返回 None
        """
        query = query.strip()
        if not query:
            return None

        mod = await self.find_mod(query, context)
        if mod is None:
            logger.debug(f"[{self.catalog_name}] 未找到 '{query}'")
            return None

        logger.debug(f"[{self.catalog_name}] '{query}' -> {mod.title} ({mod.id})")
        return await self._validate(query, mod, context)

    async def find_mod(
        self, query: str, context: ResolveContext
    ) -> Optional[NormalizedMod]:
        """先直接查找，再按变体搜索"""
        mod = await self._lookup_direct(query)
        if mod is None:
            mod = await self._search_variations(query, context)
        return mod

    async def _lookup_direct(self, query: str) -> Optional[NormalizedMod]:
        for identifier in self.adapter.slug_candidates(query):
            try:
                mod = await self.adapter.lookup_by_slug_or_id(identifier)
            except TRANSPORT_ERRORS as e:
                logger.warning(f"[{self.catalog_name}] 直接查找 '{identifier}' 失败: {e}")
                continue
            if mod is not None:
                return mod
        return None

    async def _search_variations(
        self, query: str, context: ResolveContext
    ) -> Optional[NormalizedMod]:
        filter_sets = [(context.game_version, context.loader)]
        if self.adapter.relax_search_filters and (context.game_version or context.loader):
            filter_sets.append(("", ""))

        for variation in generate_search_variations(query):
            try:
                for game_version, loader in filter_sets:
                    page = await self.adapter.search(variation, game_version, loader)
                    if page.mods:
                        return select_search_match(page.mods, query, variation)
            except TRANSPORT_ERRORS as e:
                # 单个变体失败不影响后续变体
                logger.warning(f"[{self.catalog_name}] 搜索 '{variation}' 失败: {e}")
                continue
        return None

    async def _validate(
        self, query: str, mod: NormalizedMod, context: ResolveContext
    ) -> ResolutionOutcome:
        game_version = context.game_version
        loader = context.loader

        if not context.auto_pick:
            return ResolutionOutcome.found(query, mod, target_version=game_version)

        if not game_version:
            # 未指定版本，选择最新的文件
            try:
                files = await self.adapter.list_files(mod.id, "", loader)
            except TRANSPORT_ERRORS as e:
                logger.warning(f"[{self.catalog_name}] 获取 {mod.title} 的文件失败: {e}")
                return ResolutionOutcome.found(query, mod)
            return ResolutionOutcome.found(query, mod, pick_best_file(files, "", loader))

        try:
            files = await self.adapter.list_files(mod.id, game_version, loader)
            file = pick_best_file(files, game_version, loader)

            if file is None and loader:
                files = await self.adapter.list_files(mod.id, game_version, "")
                file = pick_best_file(files, game_version, "")

            if file is not None:
                return ResolutionOutcome.found(
                    query, mod, file, target_version=game_version
                )

            all_files = await self.adapter.list_files(mod.id)
        except TRANSPORT_ERRORS as e:
            # 模组已确定，兼容性数据尽力而为
            logger.warning(f"[{self.catalog_name}] 校验 {mod.title} 的文件失败: {e}")
            return ResolutionOutcome.found(query, mod, target_version=game_version)

        available = extract_available_versions(all_files)
        if not available:
            return ResolutionOutcome.found(
                query,
                mod,
                target_version=game_version,
                message=f"模组已在 {self.catalog_name} 上找到，但没有任何可下载的文件",
            )

        logger.info(
            f"[{self.catalog_name}] {mod.title} 没有 MC {game_version} 的文件，"
            f"可用版本: {', '.join(available[:8])}"
        )
        return ResolutionOutcome.version_mismatch(
            query,
            mod,
            available,
            target_version=game_version,
            message=f"模组已在 {self.catalog_name} 上找到，但没有适用于 MC {game_version} 的文件",
        )
