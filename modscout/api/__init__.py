"""
目录适配器

Modrinth（主目录）与 CurseForge（次目录）。
"""

from modscout.api.base import CatalogAdapter, HTTPCatalogAdapter, SearchPage
from modscout.api.modrinth import ModrinthAdapter
from modscout.api.curseforge import CurseForgeAdapter

__all__ = [
    "CatalogAdapter",
    "HTTPCatalogAdapter",
    "SearchPage",
    "ModrinthAdapter",
    "CurseForgeAdapter",
]
