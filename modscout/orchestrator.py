"""
多目录协调器

依次在 Modrinth 与 CurseForge 中解析模组，合并两边的诊断信息，
返回唯一的解析结果。
"""

from typing import Callable, Optional

import aiohttp
from loguru import logger

from modscout.api import CatalogAdapter, CurseForgeAdapter, ModrinthAdapter
from modscout.api.base import DEFAULT_USER_AGENT
from modscout.models import ResolutionOutcome, ResolutionStatus, ResolveContext
from modscout.services.catalog_resolver import CatalogResolver
from modscout.services.version_matcher import merge_available_versions

SecondaryFactory = Callable[[str], CatalogAdapter]

NOT_FOUND_BOTH = "在 Modrinth 和 CurseForge 上均未找到该模组"
NOT_FOUND_PRIMARY_ONLY = (
    "在 Modrinth 上未找到该模组。添加 CurseForge API Key 以启用 CurseForge 扩展搜索"
)


def _is_mismatch(outcome: Optional[ResolutionOutcome]) -> bool:
    return outcome is not None and outcome.status is ResolutionStatus.VERSION_MISMATCH


def _is_found(outcome: Optional[ResolutionOutcome]) -> bool:
    return outcome is not None and outcome.status is ResolutionStatus.FOUND


def merge_outcomes(
    query: str,
    context: ResolveContext,
    primary: Optional[ResolutionOutcome],
    secondary: Optional[ResolutionOutcome],
) -> ResolutionOutcome:
    """
    合并两个目录的解析结果

    优先级：次目录带文件的结果 > 两边都版本不匹配（合并可用版本）
    > 单边版本不匹配 > 找到模组但没有文件 > 未找到。

    Args:
        query: 原始查询
        context: 解析上下文
        primary: 主目录结果（None 表示未找到）
        secondary: 次目录结果（None 表示未找到或未查询）
    """
    if _is_found(secondary) and secondary.has_file:
        return secondary

    if _is_mismatch(primary) and _is_mismatch(secondary):
        versions = merge_available_versions(
            primary.available_versions, secondary.available_versions
        )
        shown = ", ".join(versions[:8]) + ("..." if len(versions) > 8 else "")
        return ResolutionOutcome.version_mismatch(
            query,
            primary.mod,
            versions,
            target_version=context.game_version,
            message=(
                f"模组已在 Modrinth 和 CurseForge 上找到，但没有适用于 MC "
                f"{context.game_version} 的文件。可用版本: {shown}"
            ),
        )

    for outcome in (primary, secondary):
        if _is_mismatch(outcome):
            return outcome

    for outcome in (primary, secondary):
        if _is_found(outcome):
            return outcome

    return ResolutionOutcome.not_found(
        query,
        NOT_FOUND_BOTH if context.has_secondary_credential else NOT_FOUND_PRIMARY_ONLY,
    )


class ModScoutOrchestrator:
    """
    ModScout 主协调器

    主目录总是先查询；只有主目录没有给出文件、且上下文带有
    CurseForge API Key 时才查询次目录。两个目录从不并行请求。
    """

    def __init__(
        self,
        primary: Optional[CatalogAdapter] = None,
        secondary_factory: Optional[SecondaryFactory] = None,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        modrinth_url: Optional[str] = None,
        curseforge_url: Optional[str] = None,
    ):
        """
        Args:
            primary: 主目录适配器，默认 ModrinthAdapter
            secondary_factory: 根据 API Key 创建次目录适配器，默认 CurseForgeAdapter
            session: 共享的 aiohttp session；为 None 时适配器各自按需创建
            user_agent: 请求使用的 User-Agent
            modrinth_url: Modrinth API 地址
            curseforge_url: CurseForge API 地址
        """
        self.primary = primary or ModrinthAdapter(
            session=session, base_url=modrinth_url, user_agent=user_agent
        )
        self._secondary_factory = secondary_factory or (
            lambda api_key: CurseForgeAdapter(
                api_key,
                session=session,
                base_url=curseforge_url,
                user_agent=user_agent,
            )
        )

    async def resolve(self, query: str, context: ResolveContext) -> ResolutionOutcome:
        """
        解析单个模组查询，从不抛出异常

        Args:
            query: 模组名称或 slug
            context: 解析上下文

        Returns:
            统一的解析结果
        """
        try:
            primary = await CatalogResolver(self.primary).resolve(query, context)
            if _is_found(primary) and primary.has_file:
                return primary

            secondary = None
            if context.has_secondary_credential:
                adapter = self._secondary_factory(context.curseforge_api_key)
                try:
                    secondary = await CatalogResolver(adapter).resolve(query, context)
                finally:
                    await adapter.close()

            return merge_outcomes(query.strip(), context, primary, secondary)
        except Exception as e:
            logger.exception(f"解析 '{query}' 时发生未处理的错误: {e}")
            return ResolutionOutcome.error(query.strip(), str(e) or e.__class__.__name__)

    async def close(self):
        """关闭协调器"""
        await self.primary.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
