"""
目录数据模型

两个模组目录（Modrinth / CurseForge）的响应被统一转换为
NormalizedMod 与 NormalizedFile。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class CatalogSource(Enum):
    """模组目录来源"""

    MODRINTH = "modrinth"
    CURSEFORGE = "curseforge"

    @property
    def display_name(self) -> str:
        return {"modrinth": "Modrinth", "curseforge": "CurseForge"}[self.value]


class ReleaseChannel(Enum):
    """发布渠道"""

    RELEASE = "release"
    BETA = "beta"
    ALPHA = "alpha"


class ModLoader(Enum):
    """已知的模组加载器"""

    FORGE = "forge"
    FABRIC = "fabric"
    QUILT = "quilt"
    NEOFORGE = "neoforge"


KNOWN_LOADERS = frozenset(loader.value for loader in ModLoader)

# CurseForge 的 releaseType 枚举
CURSEFORGE_RELEASE_TYPES = {
    1: ReleaseChannel.RELEASE,
    2: ReleaseChannel.BETA,
    3: ReleaseChannel.ALPHA,
}


def split_curseforge_tags(tags: Iterable[str]) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """
    拆分 CurseForge 文件的 gameVersions 字段

    CurseForge 把加载器名和游戏版本混在同一个列表里。
    属于已知加载器的标签视为加载器（转为小写），其余视为游戏版本。

    Returns:
        (game_versions, loaders)
    """
    game_versions: List[str] = []
    loaders: List[str] = []
    for tag in tags:
        if tag.lower() in KNOWN_LOADERS:
            loaders.append(tag.lower())
        else:
            game_versions.append(tag)
    return tuple(game_versions), tuple(loaders)


@dataclass(frozen=True)
class NormalizedMod:
    """
    统一的模组项目信息。

    身份键为 (source, id)。
    """

    id: str
    source: CatalogSource
    title: str
    description: str = ""
    icon_url: str = ""
    downloads: int = 0
    author: str = "Unknown"
    slug: str = ""
    categories: Tuple[str, ...] = ()
    curseforge_id: Optional[int] = None

    @property
    def key(self) -> Tuple[CatalogSource, str]:
        return self.source, self.id

    @property
    def page_url(self) -> str:
        """模组在目录网站上的页面地址"""
        if self.source is CatalogSource.MODRINTH:
            return f"https://modrinth.com/mod/{self.slug}"
        return f"https://www.curseforge.com/minecraft/mc-mods/{self.slug}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source.value,
            "title": self.title,
            "slug": self.slug,
            "author": self.author,
            "downloads": self.downloads,
            "url": self.page_url,
        }

    @classmethod
    def from_modrinth_hit(cls, hit: dict) -> "NormalizedMod":
        """将 Modrinth 搜索结果转换为 NormalizedMod"""
        return cls(
            id=hit["project_id"],
            source=CatalogSource.MODRINTH,
            title=hit.get("title", ""),
            description=hit.get("description") or "",
            icon_url=hit.get("icon_url") or "",
            downloads=hit.get("downloads") or 0,
            author=hit.get("author") or "Unknown",
            slug=hit.get("slug", ""),
            categories=tuple(hit.get("categories") or ()),
        )

    @classmethod
    def from_modrinth_project(cls, project: dict) -> "NormalizedMod":
        """将 Modrinth 项目详情转换为 NormalizedMod"""
        return cls(
            id=project["id"],
            source=CatalogSource.MODRINTH,
            title=project.get("title", ""),
            description=project.get("description") or "",
            icon_url=project.get("icon_url") or "",
            downloads=project.get("downloads") or 0,
            author=project.get("team") or "Unknown",
            slug=project.get("slug", ""),
            categories=tuple(project.get("categories") or ()),
        )

    @classmethod
    def from_curseforge(cls, data: dict) -> "NormalizedMod":
        """将 CurseForge 模组数据转换为 NormalizedMod"""
        authors = data.get("authors") or []
        return cls(
            id=str(data["id"]),
            source=CatalogSource.CURSEFORGE,
            title=data.get("name", ""),
            description=data.get("summary") or "",
            icon_url=(data.get("logo") or {}).get("url") or "",
            downloads=data.get("downloadCount") or 0,
            author=authors[0].get("name", "Unknown") if authors else "Unknown",
            slug=data.get("slug", ""),
            categories=tuple(c.get("name", "") for c in data.get("categories") or []),
            curseforge_id=data["id"],
        )


@dataclass(frozen=True)
class NormalizedFile:
    """统一的可下载文件信息"""

    id: str
    name: str
    filename: str
    url: str
    size: int
    game_versions: Tuple[str, ...]
    loaders: Tuple[str, ...]
    downloads: int = 0
    date_published: str = ""
    release_type: ReleaseChannel = ReleaseChannel.RELEASE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "filename": self.filename,
            "url": self.url,
            "size": self.size,
            "gameVersions": list(self.game_versions),
            "loaders": list(self.loaders),
            "releaseType": self.release_type.value,
        }

    @classmethod
    def from_modrinth_version(cls, version: dict) -> "NormalizedFile":
        """
        将 Modrinth 版本记录转换为 NormalizedFile。

        优先使用 primary 文件，否则取第一个文件。
        """
        files = version.get("files") or []
        file = next((f for f in files if f.get("primary")), files[0] if files else {})
        try:
            release_type = ReleaseChannel(version.get("version_type"))
        except ValueError:
            release_type = ReleaseChannel.ALPHA
        return cls(
            id=version["id"],
            name=version.get("name", ""),
            filename=file.get("filename", ""),
            url=file.get("url", ""),
            size=file.get("size", 0),
            game_versions=tuple(version.get("game_versions") or ()),
            loaders=tuple(version.get("loaders") or ()),
            downloads=version.get("downloads") or 0,
            date_published=version.get("date_published", ""),
            release_type=release_type,
        )

    @classmethod
    def from_curseforge_file(cls, data: dict) -> "NormalizedFile":
        """将 CurseForge 文件记录转换为 NormalizedFile"""
        game_versions, loaders = split_curseforge_tags(data.get("gameVersions") or [])
        return cls(
            id=str(data["id"]),
            name=data.get("displayName", ""),
            filename=data.get("fileName", ""),
            url=data.get("downloadUrl") or "",
            size=data.get("fileLength", 0),
            game_versions=game_versions,
            loaders=loaders,
            downloads=data.get("downloadCount") or 0,
            date_published=data.get("fileDate") or data.get("dateCreated", ""),
            release_type=CURSEFORGE_RELEASE_TYPES.get(
                data.get("releaseType"), ReleaseChannel.RELEASE
            ),
        )
