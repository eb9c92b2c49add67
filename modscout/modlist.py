"""
模组列表解析

把上传或粘贴的模组列表（纯文本、多种 JSON、CSV）转换为查询字符串，
并尽可能检测游戏版本与加载器。
"""

import json
import re
from pathlib import PurePosixPath
from typing import Any, Callable, List, Optional, Sequence, Tuple

from modscout.exceptions import ParseError
from modscout.models import ParsedModList

BULLET = re.compile(r"^[-*•](\s+|$)")
ARCHIVE_DIR = re.compile(r"^[^/]+/")
ARCHIVE_EXT = re.compile(r"\.(jar|zip)$", re.IGNORECASE)
VERSION_SUFFIX = re.compile(r"-[\d.]+.*$")
QUOTES = re.compile(r"^[\"']|[\"']$")

# 按特异性排列："neoforge" 同时包含 "forge"
MANIFEST_LOADERS = ("neoforge", "quilt", "fabric", "forge")
INDEX_LOADER_KEYS = (
    ("quilt-loader", "quilt"),
    ("neoforge", "neoforge"),
    ("forge", "forge"),
    ("fabric-loader", "fabric"),
)


def _clean(items: Sequence[str]) -> Tuple[str, ...]:
    return tuple(s for s in (item.strip() for item in items) if s)


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _decode_export(data: Any) -> Optional[ParsedModList]:
    """ModScout 自己的导出格式 {mods: [str | {slug, title}]}"""
    if not isinstance(data, dict) or not isinstance(data.get("mods"), list):
        return None
    mods = data["mods"]
    if all(isinstance(m, str) for m in mods):
        label = "JSON mod list"
        names = mods
    elif all(isinstance(m, dict) and ("slug" in m or "title" in m) for m in mods):
        label = "ModScout Export"
        names = [str(m.get("slug") or m.get("title") or "") for m in mods]
    else:
        return None
    return ParsedModList(
        format_label=label,
        mods=_clean(names),
        game_version=_optional_str(data.get("gameVersion")),
        loader=_optional_str(data.get("loader")),
    )


def _decode_manifest(data: Any) -> Optional[ParsedModList]:
    """CurseForge 整合包 manifest.json"""
    if not isinstance(data, dict) or not isinstance(data.get("minecraft"), dict):
        return None
    files = data.get("files")
    if not isinstance(files, list) or not all(
        isinstance(f, dict) and "projectID" in f for f in files
    ):
        return None

    minecraft = data["minecraft"]
    loader_id = ""
    mod_loaders = minecraft.get("modLoaders") or []
    if mod_loaders and isinstance(mod_loaders[0], dict):
        loader_id = str(mod_loaders[0].get("id") or "").lower()
    loader = next((name for name in MANIFEST_LOADERS if name in loader_id), None)

    return ParsedModList(
        format_label="CurseForge Manifest",
        mods=_clean([str(f["projectID"] or "") for f in files]),
        game_version=_optional_str(minecraft.get("version")),
        loader=loader,
    )


def mod_name_from_path(path: str) -> str:
    """'mods/sodium-0.5.8.jar' -> 'sodium'，也去掉 .zip（资源包、光影包）"""
    name = ARCHIVE_DIR.sub("", path)
    name = ARCHIVE_EXT.sub("", name)
    return VERSION_SUFFIX.sub("", name)


def _decode_index(data: Any) -> Optional[ParsedModList]:
    """Modrinth 整合包 modrinth.index.json"""
    if not isinstance(data, dict) or not isinstance(data.get("dependencies"), dict):
        return None
    files = data.get("files")
    if not isinstance(files, list) or not all(
        isinstance(f, dict) and "path" in f for f in files
    ):
        return None

    dependencies = data["dependencies"]
    loader = next(
        (name for key, name in INDEX_LOADER_KEYS if dependencies.get(key)), None
    )
    return ParsedModList(
        format_label="Modrinth Index",
        mods=_clean([mod_name_from_path(str(f["path"] or "")) for f in files]),
        game_version=_optional_str(dependencies.get("minecraft")),
        loader=loader,
    )


def _decode_array(data: Any) -> Optional[ParsedModList]:
    """字符串数组或 {slug|name} 对象数组（ferium / packwiz 风格）"""
    if not isinstance(data, list):
        return None
    names: List[str] = []
    for item in data:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, dict):
            names.append(str(item.get("slug") or item.get("name") or ""))
        else:
            return None
    return ParsedModList(format_label="JSON Array", mods=_clean(names))


# 按优先级尝试，第一个匹配的格式生效
JSON_DECODERS: Tuple[Callable[[Any], Optional[ParsedModList]], ...] = (
    _decode_export,
    _decode_manifest,
    _decode_index,
    _decode_array,
)


def parse_json_list(content: str) -> ParsedModList:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"JSON 解析失败: {e.msg}", context={"line": e.lineno})

    for decode in JSON_DECODERS:
        parsed = decode(data)
        if parsed is not None:
            return parsed
    raise ParseError("未知的 JSON 格式")


def parse_csv_list(content: str) -> ParsedModList:
    lines = [line.strip() for line in content.splitlines()]
    lines = [line for line in lines if line]
    if lines and ("," in lines[0] or "mod" in lines[0].lower()):
        lines = lines[1:]
    names = [QUOTES.sub("", line.split(",")[0].strip()) for line in lines]
    return ParsedModList(format_label="CSV", mods=_clean(names))


def parse_text_list(content: str) -> ParsedModList:
    """每行一个模组，跳过 # 和 // 注释，去掉列表符号"""
    names = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        names.append(BULLET.sub("", line))
    return ParsedModList(format_label="Text list", mods=_clean(names))


def parse_mod_list_file(content: str, filename: str) -> ParsedModList:
    """
    解析模组列表文件

    Args:
        content: 文件内容
        filename: 文件名，用扩展名决定格式

    Returns:
        ParsedModList

    Raises:
        ParseError: JSON 格式错误或无法识别
    """
    content = content.lstrip("\ufeff")
    suffix = PurePosixPath(filename).suffix.lower()
    if suffix == ".json":
        return parse_json_list(content)
    if suffix == ".csv":
        return parse_csv_list(content)
    return parse_text_list(content)


def decode_mod_list_bytes(raw: bytes, filename: str = "") -> str:
    """
    将上传的文件内容解码为文本

    按 UTF-8 解码并去掉 BOM（Windows 记事本、Excel 导出的 CSV 常带 BOM）。

    Raises:
        ParseError: 不是有效的 UTF-8 文本
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"文件不是有效的 UTF-8 文本 (位置 {e.start})",
            context={"filename": filename},
        )
