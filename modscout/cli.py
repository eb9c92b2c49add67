"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
import signal
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp
import click
from loguru import logger

from modscout.api import CatalogAdapter, CurseForgeAdapter, ModrinthAdapter
from modscout.config import CURSEFORGE_API_KEY_ENV, ScoutConfig, load_config
from modscout.exceptions import ModScoutError
from modscout.exporter import (
    build_export_document,
    default_export_filename,
    entries_from_outcomes,
    write_export,
)
from modscout.logger import setup_logger
from modscout.models import (
    KNOWN_LOADERS,
    CatalogSource,
    NormalizedFile,
    NormalizedMod,
    ResolutionOutcome,
    ResolutionStatus,
    ResolveContext,
)
from modscout.modlist import decode_mod_list_bytes, parse_mod_list_file
from modscout.orchestrator import ModScoutOrchestrator
from modscout.services.batch import BatchImporter
from modscout.services.version_matcher import pick_best_file
from modscout.utils import format_downloads, format_size

STATUS_MARKS = {
    ResolutionStatus.FOUND: "✓",
    ResolutionStatus.VERSION_MISMATCH: "≠",
    ResolutionStatus.NOT_FOUND: "✗",
    ResolutionStatus.ERROR: "!",
}


def describe_outcome(outcome: ResolutionOutcome) -> str:
    """单行描述解析结果"""
    mark = STATUS_MARKS[outcome.status]
    line = f"[{mark}] {outcome.query}"
    if outcome.mod is not None:
        mod = outcome.mod
        line += (
            f" -> {mod.title} ({mod.source.display_name}, "
            f"{format_downloads(mod.downloads)} 下载)"
        )
    if outcome.file is not None:
        line += f" | {outcome.file.filename} ({format_size(outcome.file.size)})"
    if outcome.available_versions:
        line += f" | 可用版本: {', '.join(outcome.available_versions[:8])}"
    if outcome.message:
        line += f" | {outcome.message}"
    return line


def describe_mod(mod: NormalizedMod) -> str:
    return (
        f"{mod.title} ({mod.slug}) by {mod.author} | "
        f"{format_downloads(mod.downloads)} 下载 | {mod.page_url}"
    )


def describe_file(file: NormalizedFile) -> str:
    return (
        f"{file.name} | {file.filename} ({format_size(file.size)}) | "
        f"{file.release_type.value} | MC {', '.join(file.game_versions) or '-'} | "
        f"{', '.join(file.loaders) or '-'}"
    )


def build_orchestrator(
    config: ScoutConfig, session: aiohttp.ClientSession
) -> ModScoutOrchestrator:
    return ModScoutOrchestrator(
        session=session,
        user_agent=config.user_agent,
        modrinth_url=config.modrinth_url,
        curseforge_url=config.curseforge_url,
    )


def build_adapter(
    config: ScoutConfig,
    source: str,
    api_key: str,
    session: Optional[aiohttp.ClientSession] = None,
) -> CatalogAdapter:
    """
    创建单个目录的适配器

    Raises:
        ConfigError: 选择 CurseForge 但没有 API Key
    """
    if CatalogSource(source) is CatalogSource.CURSEFORGE:
        return CurseForgeAdapter(
            api_key,
            session=session,
            base_url=config.curseforge_url,
            user_agent=config.user_agent,
        )
    return ModrinthAdapter(
        session=session, base_url=config.modrinth_url, user_agent=config.user_agent
    )


async def read_mod_list(path: str) -> str:
    async with aiofiles.open(path, "rb") as f:
        raw = await f.read()
    return decode_mod_list_bytes(raw, Path(path).name)


async def run_resolve(config: ScoutConfig, queries, context, as_json: bool):
    """异步解析若干查询"""
    async with aiohttp.ClientSession() as session:
        orchestrator = build_orchestrator(config, session)
        outcomes = [await orchestrator.resolve(q, context) for q in queries]

    if as_json:
        click.echo(json.dumps([o.to_dict() for o in outcomes], indent=2, ensure_ascii=False))
    else:
        for outcome in outcomes:
            click.echo(describe_outcome(outcome))


async def run_import(
    config: ScoutConfig,
    path: str,
    context,
    export_path: Optional[str],
    as_json: bool,
):
    """异步导入模组列表"""
    parsed = parse_mod_list_file(await read_mod_list(path), Path(path).name)
    context = context.with_detected(parsed.game_version, parsed.loader)
    logger.info(
        f"识别为 {parsed.format_label}，共 {len(parsed)} 个模组"
        f" (MC {context.game_version or '任意'}, 加载器 {context.loader or '任意'})"
    )

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # Windows 不支持 add_signal_handler
        pass

    def on_result(index: int, total: int, outcome: ResolutionOutcome):
        if not as_json:
            click.echo(f"({index}/{total}) {describe_outcome(outcome)}")

    try:
        async with aiohttp.ClientSession() as session:
            importer = BatchImporter(build_orchestrator(config, session), config.batch_delay)
            report = await importer.run(parsed.mods, context, cancel_event, on_result)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass

    if as_json:
        click.echo(
            json.dumps(
                {
                    "format": parsed.format_label,
                    "cancelled": report.cancelled,
                    "results": [o.to_dict() for o in report.outcomes],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
    else:
        counts = report.counts()
        click.echo(
            f"找到 {counts[ResolutionStatus.FOUND]} | "
            f"版本不匹配 {counts[ResolutionStatus.VERSION_MISMATCH]} | "
            f"未找到 {counts[ResolutionStatus.NOT_FOUND]} | "
            f"错误 {counts[ResolutionStatus.ERROR]}"
            + (" | 已取消" if report.cancelled else "")
        )

    if export_path is not None:
        if not export_path:
            export_path = default_export_filename(context.game_version, context.loader)
        document = build_export_document(
            entries_from_outcomes(report.outcomes), context.game_version, context.loader
        )
        await write_export(export_path, document)
        logger.success(f"已导出 {len(document['mods'])} 个模组: {export_path}")


async def run_search(
    config: ScoutConfig,
    source: str,
    query: str,
    context: ResolveContext,
    offset: int,
    as_json: bool,
):
    """在单个目录中搜索，按页输出"""
    async with aiohttp.ClientSession() as session:
        adapter = build_adapter(config, source, context.curseforge_api_key, session)
        page = await adapter.search(query, context.game_version, context.loader, offset)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "source": source,
                    "total": page.total,
                    "offset": offset,
                    "mods": [mod.to_dict() for mod in page.mods],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not page.mods:
        click.echo(f"没有找到与 '{query}' 相关的模组 (共 {page.total} 个结果)")
        return
    click.echo(
        f"共 {page.total} 个结果，显示第 {offset + 1}-{offset + len(page.mods)} 个"
    )
    for index, mod in enumerate(page.mods, offset + 1):
        click.echo(f"{index:>3}. {describe_mod(mod)}")


async def run_files(
    config: ScoutConfig,
    source: str,
    identifier: str,
    context: ResolveContext,
    as_json: bool,
):
    """列出模组的文件，并标出自动选择会选中的文件"""
    async with aiohttp.ClientSession() as session:
        adapter = build_adapter(config, source, context.curseforge_api_key, session)
        mod = await adapter.lookup_by_slug_or_id(identifier)
        if mod is None:
            raise click.ClickException(f"在 {adapter.display_name} 上未找到模组: {identifier}")
        files = await adapter.list_files(mod.id, context.game_version, context.loader)

    best = pick_best_file(files, context.game_version, context.loader)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "mod": mod.to_dict(),
                    "files": [file.to_dict() for file in files],
                    "recommended": best.id if best is not None else None,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    click.echo(describe_mod(mod))
    click.echo(f"{len(files)} 个文件:")
    for file in files:
        mark = "*" if best is not None and file.id == best.id else " "
        click.echo(f" {mark} {describe_file(file)}")


loader_choice = click.Choice(sorted(KNOWN_LOADERS), case_sensitive=False)
source_choice = click.Choice([s.value for s in CatalogSource], case_sensitive=False)


def common_options(func):
    """resolve / import / search / files 共用的选项"""
    options = [
        click.option(
            "-c",
            "--config",
            "config_path",
            type=click.Path(exists=True),
            help="配置文件 (toml/json/yaml)",
        ),
        click.option("-v", "--game-version", help="目标 Minecraft 版本，例如 1.20.1"),
        click.option("-l", "--loader", type=loader_choice, help="目标模组加载器"),
        click.option(
            "--api-key", envvar=CURSEFORGE_API_KEY_ENV, help="CurseForge API Key"
        ),
        click.option("--json", "as_json", is_flag=True, help="以 JSON 输出结果"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def source_option(func):
    return click.option(
        "-s",
        "--source",
        type=source_choice,
        default=CatalogSource.MODRINTH.value,
        show_default=True,
        help="要查询的模组目录",
    )(func)


@click.group()
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version="0.1.0")
def main(debug: bool):
    """ModScout - 跨 Modrinth / CurseForge 的 Minecraft 模组解析工具"""
    setup_logger(debug=debug)


@main.command()
@click.argument("queries", nargs=-1, required=True)
@common_options
@click.option("--no-auto-pick", is_flag=True, help="只查找模组，不选择文件")
def resolve(queries, config_path, game_version, loader, api_key, as_json, no_auto_pick):
    """解析一个或多个模组名称/slug"""
    try:
        config = load_config(config_path)
        context = config.to_context(
            game_version, loader, False if no_auto_pick else None, api_key
        )
        asyncio.run(run_resolve(config, queries, context, as_json))
    except ModScoutError as e:
        logger.error(f"配置错误: {e}")
        raise click.ClickException(str(e))


@main.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@common_options
@click.option("--delay", type=float, help="查询间隔（秒）")
@click.option(
    "--export",
    "export_path",
    is_flag=False,
    flag_value="",
    default=None,
    help="导出找到的模组；不指定路径时使用 modlist-<版本>-<加载器>.json",
)
def import_(path, config_path, game_version, loader, api_key, as_json, delay, export_path):
    """导入模组列表文件（txt / csv / json）并逐个解析"""
    try:
        config = load_config(config_path)
        if delay is not None:
            config.batch_delay = delay
            config.validate()
        context = config.to_context(game_version, loader, None, api_key)
        asyncio.run(run_import(config, path, context, export_path, as_json))
    except ModScoutError as e:
        logger.error(f"导入失败: {e}")
        raise click.ClickException(str(e))


@main.command()
@click.argument("query")
@common_options
@source_option
@click.option("--offset", type=click.IntRange(min=0), default=0, help="结果偏移量（翻页）")
def search(query, config_path, game_version, loader, api_key, as_json, source, offset):
    """在 Modrinth 或 CurseForge 中搜索模组"""
    try:
        config = load_config(config_path)
        context = config.to_context(game_version, loader, None, api_key)
        asyncio.run(run_search(config, source.lower(), query, context, offset, as_json))
    except ModScoutError as e:
        logger.error(f"搜索失败: {e}")
        raise click.ClickException(str(e))
    except aiohttp.ClientError as e:
        raise click.ClickException(f"网络错误: {e}")


@main.command()
@click.argument("mod")
@common_options
@source_option
def files(mod, config_path, game_version, loader, api_key, as_json, source):
    """列出模组（slug 或 ID）的可下载文件，* 为自动选择的文件"""
    try:
        config = load_config(config_path)
        context = config.to_context(game_version, loader, None, api_key)
        asyncio.run(run_files(config, source.lower(), mod, context, as_json))
    except ModScoutError as e:
        logger.error(f"获取文件失败: {e}")
        raise click.ClickException(str(e))
    except aiohttp.ClientError as e:
        raise click.ClickException(f"网络错误: {e}")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def parse(path):
    """只解析模组列表文件，不访问网络"""
    try:
        content = decode_mod_list_bytes(Path(path).read_bytes(), Path(path).name)
        parsed = parse_mod_list_file(content, Path(path).name)
    except ModScoutError as e:
        raise click.ClickException(str(e))

    click.echo(f"格式: {parsed.format_label}")
    click.echo(f"Minecraft 版本: {parsed.game_version or '-'}")
    click.echo(f"加载器: {parsed.loader or '-'}")
    click.echo(f"模组 ({len(parsed)}):")
    for name in parsed.mods:
        click.echo(f"  - {name}")


if __name__ == "__main__":
    main()
