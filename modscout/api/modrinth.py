import json
from typing import List, Optional
from urllib.parse import quote

from modscout.api.base import HTTPCatalogAdapter, SearchPage, SEARCH_PAGE_SIZE
from modscout.models import CatalogSource, NormalizedFile, NormalizedMod

MODRINTH_BASE_URL = "https://api.modrinth.com/v2"


class ModrinthAdapter(HTTPCatalogAdapter):
    """主目录：Modrinth。无需 API Key，slug 即可作为项目标识符。"""

    source = CatalogSource.MODRINTH
    base_url = MODRINTH_BASE_URL

    async def search(
        self,
        query: str,
        game_version: str = "",
        loader: str = "",
        offset: int = 0,
    ) -> SearchPage:
        facets = [["project_type:mod"]]
        if game_version:
            facets.append([f"versions:{game_version}"])
        if loader:
            facets.append([f"categories:{loader}"])

        params = {
            "query": query,
            "limit": str(SEARCH_PAGE_SIZE),
            "offset": str(offset),
            "facets": json.dumps(facets),
        }
        data = await self._request("/search", params)
        return SearchPage(
            mods=tuple(NormalizedMod.from_modrinth_hit(hit) for hit in data["hits"]),
            total=data.get("total_hits", 0),
        )

    async def lookup_by_slug_or_id(self, identifier: str) -> Optional[NormalizedMod]:
        project = await self._request(
            f"/project/{quote(identifier, safe='')}", allow_missing=True
        )
        if project is None:
            return None
        return NormalizedMod.from_modrinth_project(project)

    async def list_files(
        self,
        mod_id: str,
        game_version: str = "",
        loader: str = "",
    ) -> List[NormalizedFile]:
        # 版本接口不分页，返回完整的历史
        params = {}
        if loader:
            params["loaders"] = json.dumps([loader])
        if game_version:
            params["game_versions"] = json.dumps([game_version])

        versions = await self._request(
            f"/project/{quote(mod_id, safe='')}/version", params or None
        )
        return [NormalizedFile.from_modrinth_version(v) for v in versions or []]
