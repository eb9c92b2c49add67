"""
目录适配器抽象

两个目录的线上格式不同，但都通过 CatalogAdapter 暴露相同的接口。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

import aiohttp
from loguru import logger

from modscout.exceptions import api_error_for_status
from modscout.models import CatalogSource, NormalizedFile, NormalizedMod

DEFAULT_USER_AGENT = "ModScout/0.1.0"
SEARCH_PAGE_SIZE = 20
FILES_PAGE_SIZE = 50


@dataclass(frozen=True)
class SearchPage:
    """一页搜索结果"""

    mods: Tuple[NormalizedMod, ...]
    total: int


class CatalogAdapter(ABC):
    source: CatalogSource
    # 模糊搜索无结果时是否去掉版本/加载器过滤再试一次
    relax_search_filters: bool = False

    @property
    def display_name(self) -> str:
        return self.source.display_name

    @abstractmethod
    async def search(
        self,
        query: str,
        game_version: str = "",
        loader: str = "",
        offset: int = 0,
    ) -> SearchPage:
        """
        搜索模组。空的 game_version/loader 表示不过滤。
        """
        pass

    @abstractmethod
    async def lookup_by_slug_or_id(self, identifier: str) -> Optional[NormalizedMod]:
        """
        通过 slug 或 ID 直接获取模组，不存在时返回 None。
        """
        pass

    @abstractmethod
    async def list_files(
        self,
        mod_id: str,
        game_version: str = "",
        loader: str = "",
    ) -> List[NormalizedFile]:
        """
        获取模组的文件列表（目录返回的顺序）。
        """
        pass

    async def search_by_slug(self, slug: str) -> Optional[NormalizedMod]:
        """精确 slug 匹配；slug 即标识符的目录直接走 lookup_by_slug_or_id"""
        return await self.lookup_by_slug_or_id(slug)

    def slug_candidates(self, query: str) -> List[str]:
        """直接查找阶段要尝试的标识符"""
        return [query]

    async def close(self):
        pass


class HTTPCatalogAdapter(CatalogAdapter):
    """基于 aiohttp 的目录适配器基类"""

    base_url: str

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._session = session
        self._owned_session = session is None
        self.user_agent = user_agent
        if base_url:
            self.base_url = base_url.rstrip("/")

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    def _headers(self) -> dict:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    async def _request(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        allow_missing: bool = False,
    ):
        """
        发送 GET 请求

        Args:
            endpoint: 相对于 base_url 的路径
            params: 查询参数
            allow_missing: 为 True 时 404 返回 None 而不是抛出异常

        Returns:
            解析后的 JSON，或 None（资源不存在）
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"[{self.display_name}] GET {url} {params or ''}")
        async with self.session.get(
            url, params=params, headers=self._headers()
        ) as response:
            if response.status == 200:
                return await response.json()
            if response.status == 404 and allow_missing:
                return None
            raise api_error_for_status(
                response.status,
                f"{self.display_name} API 请求失败 (状态码: {response.status})",
                url=str(response.url),
            )

    async def close(self):
        """关闭适配器"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
