from typing import List, Optional

import aiohttp

from modscout.api.base import (
    DEFAULT_USER_AGENT,
    FILES_PAGE_SIZE,
    SEARCH_PAGE_SIZE,
    HTTPCatalogAdapter,
    SearchPage,
)
from modscout.exceptions import ConfigError
from modscout.models import CatalogSource, NormalizedFile, NormalizedMod

CURSEFORGE_BASE_URL = "https://api.curseforge.com/v1"
GAME_ID_MINECRAFT = 432
CLASS_ID_MODS = 6
SORT_FIELD_POPULARITY = 2

# CurseForge modLoaderType
LOADER_TYPES = {
    "forge": 1,
    "fabric": 4,
    "quilt": 5,
    "neoforge": 6,
}


def loader_to_type(loader: str) -> Optional[int]:
    """加载器名 -> CurseForge modLoaderType，未知加载器返回 None"""
    return LOADER_TYPES.get(loader.lower()) if loader else None


class CurseForgeAdapter(HTTPCatalogAdapter):
    """
    次目录：CurseForge。

    需要调用方提供 API Key，以 x-api-key 请求头发送。
    文件的 gameVersions 字段同时包含加载器和游戏版本，转换时拆分。
    """

    source = CatalogSource.CURSEFORGE
    base_url = CURSEFORGE_BASE_URL
    relax_search_filters = True

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        if not api_key:
            raise ConfigError("CurseForge API Key 不能为空")
        super().__init__(session=session, base_url=base_url, user_agent=user_agent)
        self.api_key = api_key

    def _headers(self) -> dict:
        headers = super()._headers()
        headers["x-api-key"] = self.api_key
        return headers

    async def search(
        self,
        query: str,
        game_version: str = "",
        loader: str = "",
        offset: int = 0,
    ) -> SearchPage:
        params = {
            "gameId": str(GAME_ID_MINECRAFT),
            "searchFilter": query,
            "pageSize": str(SEARCH_PAGE_SIZE),
            "index": str(offset),
            "classId": str(CLASS_ID_MODS),
            "sortField": str(SORT_FIELD_POPULARITY),
            "sortOrder": "desc",
        }
        if game_version:
            params["gameVersion"] = game_version
        loader_type = loader_to_type(loader)
        if loader_type is not None:
            params["modLoaderType"] = str(loader_type)

        data = await self._request("/mods/search", params)
        return SearchPage(
            mods=tuple(NormalizedMod.from_curseforge(m) for m in data["data"]),
            total=(data.get("pagination") or {}).get("totalCount", 0),
        )

    async def search_by_slug(self, slug: str) -> Optional[NormalizedMod]:
        params = {
            "gameId": str(GAME_ID_MINECRAFT),
            "slug": slug,
            "classId": str(CLASS_ID_MODS),
        }
        data = await self._request("/mods/search", params)
        mods = data.get("data") or []
        if not mods:
            return None
        exact = next(
            (m for m in mods if (m.get("slug") or "").lower() == slug.lower()), None
        )
        return NormalizedMod.from_curseforge(exact or mods[0])

    async def lookup_by_slug_or_id(self, identifier: str) -> Optional[NormalizedMod]:
        # 整合包清单里的 projectID 是数字
        if identifier.isdigit():
            data = await self._request(f"/mods/{identifier}", allow_missing=True)
            if not data or not data.get("data"):
                return None
            return NormalizedMod.from_curseforge(data["data"])
        return await self.search_by_slug(identifier)

    def slug_candidates(self, query: str) -> List[str]:
        candidates = [query, "-".join(query.split()), query.replace("_", "-")]
        return list(dict.fromkeys(c for c in candidates if c))

    async def list_files(
        self,
        mod_id: str,
        game_version: str = "",
        loader: str = "",
    ) -> List[NormalizedFile]:
        params = {"pageSize": str(FILES_PAGE_SIZE)}
        if game_version:
            params["gameVersion"] = game_version
        loader_type = loader_to_type(loader)
        if loader_type is not None:
            params["modLoaderType"] = str(loader_type)

        data = await self._request(f"/mods/{mod_id}/files", params)
        return [NormalizedFile.from_curseforge_file(f) for f in data.get("data") or []]
