"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from ficsitfetch import __version__
from ficsitfetch.exceptions import ConfigParseError, FicsitFetchError
from ficsitfetch.logger import resolve_level, setup_logger
from ficsitfetch.models import FicsitFetchConfig, Mod
from ficsitfetch.services import FicsitClient, QueryExecutor, TemporaryModOverlay
from ficsitfetch.sml import SMLHandler


def load_config(config_path: Optional[str]) -> dict:
    """加载配置文件，未指定时返回空配置"""
    if not config_path:
        return {}

    path = Path(config_path)

    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text())
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text()) or {}
    except (toml.TomlDecodeError, yaml.YAMLError, ValueError) as e:
        raise ConfigParseError(
            f"配置文件解析失败: {config_path}", context={"error": str(e)}
        ) from e
    raise click.ClickException(f"不支持的配置文件格式: {suffix}")


def build_client(config: FicsitFetchConfig) -> FicsitClient:
    """根据配置创建注册表客户端"""
    overlay = TemporaryModOverlay(enabled=config.use_temp_mods)
    if config.use_temp_mods:
        overlay.load(config.temp_mods)
    return FicsitClient(
        executor=QueryExecutor(config.graphql_url),
        overlay=overlay,
        api_url=config.api_url,
    )


def _format_mod(mod: Mod) -> str:
    authors = ", ".join(author.user.username for author in mod.authors)
    line = f"{mod.id}  {mod.name}"
    if authors:
        line += f"  ({authors})"
    return line


def _resolve_game_path(ctx: click.Context, game_path: Optional[str]) -> str:
    game_path = game_path or ctx.obj.game_path
    if not game_path:
        raise click.ClickException("请通过 --game-path 或配置文件的 game_path 指定游戏目录")
    return game_path


def run(ctx: click.Context, action):
    """在事件循环中运行 action(client)，统一处理错误"""

    async def runner():
        async with build_client(ctx.obj) as client:
            return await action(client)

    try:
        return asyncio.run(runner())
    except FicsitFetchError as e:
        logger.debug(f"命令失败: {e.to_dict()}")
        raise click.ClickException(str(e))


@click.group()
@click.option("-c", "--config", "config_path", help="配置文件路径 (toml/json/yaml)")
@click.option("--temp-mods", is_flag=True, help="启用配置文件中的临时模组（调试用）")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], temp_mods: bool, debug: bool):
    """ficsitfetch - ficsit.app 模组查询工具"""
    setup_logger(resolve_level(debug), sink=click.get_text_stream("stderr"))
    try:
        config = FicsitFetchConfig.from_dict(load_config(config_path))
    except FicsitFetchError as e:
        raise click.ClickException(str(e))
    if temp_mods:
        config.use_temp_mods = True
    logger.debug(
        f"[配置] API: {config.api_url}, 临时模组: "
        f"{len(config.temp_mods) if config.use_temp_mods else '未启用'}"
    )
    ctx.obj = config


@main.command()
@click.pass_context
def mods(ctx: click.Context):
    """列出可用模组"""
    for mod in run(ctx, lambda client: client.get_available_mods()):
        click.echo(_format_mod(mod))


@main.command()
@click.argument("mod_id")
@click.pass_context
def mod(ctx: click.Context, mod_id: str):
    """显示模组信息"""
    info = run(ctx, lambda client: client.get_mod(mod_id))
    click.echo(_format_mod(info))
    if info.short_description:
        click.echo(info.short_description)
    click.echo(f"版本数: {len(info.versions)}")


@main.command()
@click.argument("mod_id")
@click.pass_context
def versions(ctx: click.Context, mod_id: str):
    """列出模组版本"""
    for version in run(ctx, lambda client: client.get_mod_versions(mod_id)):
        click.echo(f"{version.version}  {version.stability.value}  SML {version.sml_version}")


@main.command()
@click.argument("mod_id")
@click.pass_context
def latest(ctx: click.Context, mod_id: str):
    """显示模组最新版本"""
    version = run(ctx, lambda client: client.get_mod_latest_version(mod_id))
    click.echo(version.version)


@main.command()
@click.argument("mod_id")
@click.argument("version")
@click.pass_context
def link(ctx: click.Context, mod_id: str, version: str):
    """显示模组版本的下载地址"""
    click.echo(run(ctx, lambda client: client.get_mod_download_link(mod_id, version)))


@main.command()
@click.argument("mod_id")
@click.argument("constraints", nargs=-1)
@click.option("--all", "list_all", is_flag=True, help="列出所有匹配的版本")
@click.pass_context
def match(ctx: click.Context, mod_id: str, constraints: tuple, list_all: bool):
    """查找满足所有版本范围的版本"""
    if list_all:
        matched = run(
            ctx, lambda client: client.find_all_versions_matching_all(mod_id, list(constraints))
        )
        for version in matched:
            click.echo(version)
        return

    version = run(
        ctx, lambda client: client.find_version_matching_all(mod_id, list(constraints))
    )
    if version is None:
        raise click.ClickException(f"没有满足条件的版本: {' '.join(constraints)}")
    click.echo(version)


@main.command("sml-latest")
@click.pass_context
def sml_latest(ctx: click.Context):
    """显示最新的 SML 版本"""
    click.echo(run(ctx, lambda client: client.get_latest_sml_version()).version)


@main.command("bootstrapper-latest")
@click.pass_context
def bootstrapper_latest(ctx: click.Context):
    """显示最新的 Bootstrapper 版本"""
    click.echo(run(ctx, lambda client: client.get_latest_bootstrapper_version()).version)


@main.command("install-sml")
@click.argument("version", required=False)
@click.option("-g", "--game-path", type=click.Path(exists=True, file_okay=False), help="游戏目录")
@click.pass_context
def install_sml(ctx: click.Context, version: Optional[str], game_path: Optional[str]):
    """安装 SML，未指定版本时安装最新版"""
    game_path = _resolve_game_path(ctx, game_path)

    async def action(client: FicsitClient):
        target = version or (await client.get_latest_sml_version()).version
        handler = SMLHandler(game_path, client)
        try:
            installed = await handler.install_sml(target)
        finally:
            await handler.downloads.close()
        return target, installed

    target, installed = run(ctx, action)
    if installed:
        click.echo(f"已安装 SML {target}")
    else:
        click.echo("SML 已安装，跳过")


@main.command("uninstall-sml")
@click.option("-g", "--game-path", type=click.Path(exists=True, file_okay=False), help="游戏目录")
@click.pass_context
def uninstall_sml(ctx: click.Context, game_path: Optional[str]):
    """卸载 SML"""
    game_path = _resolve_game_path(ctx, game_path)
    run(ctx, lambda client: SMLHandler(game_path, client).uninstall_sml())
    click.echo("已卸载 SML")


if __name__ == "__main__":
    main()
