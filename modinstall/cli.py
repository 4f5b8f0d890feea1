"""
CLI 模块

命令行接口实现。
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import click
from loguru import logger

from modinstall import __version__
from modinstall.config import detect_project
from modinstall.exceptions import AmbiguousMatchError, ModInstallError
from modinstall.logger import setup_logger
from modinstall.orchestrator import ModInstallOrchestrator
from modinstall.theme import Theme
from modinstall.utils import extract_mod_name, format_downloads, format_size, truncate

COMMAND_ALIASES = {
    "i": "install",
    "add": "install",
    "s": "search",
    "find": "search",
    "l": "list",
    "ls": "list",
    "r": "remove",
    "rm": "remove",
    "uninstall": "remove",
    "status": "info",
}


class AliasedGroup(click.Group):
    """支持命令别名的 click 命令组"""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))


@dataclass
class CliContext:
    """命令之间共享的选项"""

    theme: Theme
    minecraft_version: Optional[str] = None
    mod_loader: Optional[str] = None
    mods_dir: Optional[str] = None

    def create_orchestrator(self) -> ModInstallOrchestrator:
        config = detect_project(
            minecraft_version=self.minecraft_version,
            mod_loader=self.mod_loader,
            mods_dir=self.mods_dir,
        )
        return ModInstallOrchestrator(
            config, progress_callback=self.render_progress
        )

    def render_progress(self, filename: str, percent: float):
        bar = self.theme.progress_bar(percent)
        click.echo(f"\r     [{bar}] {percent:5.1f}%", nl=percent >= 100)

    def success(self, message: str):
        click.echo(f"  {click.style(self.theme.check, fg='bright_green')}  {message}")

    def warning(self, message: str):
        click.echo(
            f"  {click.style(self.theme.warn, fg='bright_yellow')}  "
            f"{click.style(message, fg='yellow')}"
        )

    def rule(self):
        click.secho(f"  {self.theme.line()}", dim=True)


def run_command(cli_ctx: CliContext, action):
    """执行命令并把预期内的错误转换为 ClickException"""

    async def runner():
        orchestrator = cli_ctx.create_orchestrator()
        async with orchestrator:
            result = action(orchestrator)
            if asyncio.iscoroutine(result):
                result = await result
            return orchestrator, result

    try:
        return asyncio.run(runner())
    except AmbiguousMatchError as e:
        cli_ctx.warning("找到多个匹配的模组:")
        for filename in e.matches:
            click.echo(f"    - {filename}")
        raise click.ClickException("请指定更精确的名称")
    except ModInstallError as e:
        logger.debug(f"命令失败: {e.to_dict()}")
        raise click.ClickException(str(e))


@click.group(cls=AliasedGroup)
@click.option("--mc-version", help="覆盖探测到的 Minecraft 版本")
@click.option(
    "--loader",
    type=click.Choice(["forge", "neoforge", "fabric", "quilt"], case_sensitive=False),
    help="覆盖探测到的模组加载器",
)
@click.option("--mods-dir", type=click.Path(file_okay=False), help="模组目录")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    mc_version: Optional[str],
    loader: Optional[str],
    mods_dir: Optional[str],
    debug: bool,
):
    """ModInstall - 从 Modrinth 安装 Minecraft 模组"""
    setup_logger(level="DEBUG" if debug else None)
    ctx.obj = CliContext(
        theme=Theme.detect(),
        minecraft_version=mc_version,
        mod_loader=loader,
        mods_dir=mods_dir,
    )


@main.command()
@click.argument("mods", nargs=-1, required=True)
@click.pass_obj
def install(cli_ctx: CliContext, mods: tuple):
    """安装模组（可同时指定多个）"""
    orchestrator, results = run_command(
        cli_ctx, lambda o: o.install(list(mods))
    )

    # 单个模组的结果已由服务层记录日志，这里只输出汇总
    stats = orchestrator.get_stats()
    warnings = sum(len(result.warnings) for result in results)
    cli_ctx.rule()
    cli_ctx.success(
        f"处理 {len(results)} 个模组, 下载 {len(stats['downloaded'])} 个文件 "
        f"({format_size(stats['bytes_downloaded'])})"
    )
    if warnings:
        cli_ctx.warning(f"{warnings} 个依赖未能安装，详见上方日志")
    if stats["failed"]:
        raise click.ClickException(f"安装失败: {', '.join(stats['failed'])}")


@main.command()
@click.argument("query", nargs=-1, required=True)
@click.pass_obj
def search(cli_ctx: CliContext, query: tuple):
    """搜索模组"""
    text = " ".join(query)
    _, result = run_command(cli_ctx, lambda o: o.search(text))

    if not result.hits:
        raise click.ClickException(f"没有找到与 '{text}' 相关的模组")

    click.secho(
        f"  共 {result.total_hits} 个结果（显示前 {len(result.hits)} 个）", dim=True
    )
    click.echo()
    for index, hit in enumerate(result.hits, start=1):
        click.echo(
            f"  {click.style(f'{index}.', fg='bright_magenta')} "
            f"{click.style(hit.title, fg='bright_cyan', bold=True)}  "
            f"{click.style(f'({hit.slug})', dim=True)}"
        )
        click.secho(f"     {truncate(hit.description, 55)}", dim=True)
        click.echo(f"     {format_downloads(hit.downloads)} 次下载")
        click.echo()

    cli_ctx.rule()
    click.echo(f"  {cli_ctx.theme.arrow} 提示: 使用 modinstall install <slug> 安装")


@main.command(name="list")
@click.pass_obj
def list_mods(cli_ctx: CliContext):
    """列出已安装的模组"""
    _, artifacts = run_command(cli_ctx, lambda o: o.list_installed())

    if not artifacts:
        click.echo("  没有已安装的模组")
        return

    click.secho(f"  已安装的模组 ({len(artifacts)})", bold=True)
    cli_ctx.rule()
    total = 0
    for artifact in artifacts:
        total += artifact.size
        click.echo(
            f"    {click.style(cli_ctx.theme.bullet, fg='bright_cyan')} "
            f"{click.style(extract_mod_name(artifact.filename), bold=True)}"
        )
        click.secho(f"       {artifact.filename}", dim=True)
        click.secho(f"       大小: {format_size(artifact.size)}", dim=True)
    cli_ctx.rule()
    click.echo(f"  共 {len(artifacts)} 个模组, {format_size(total)}")


@main.command()
@click.argument("mod")
@click.pass_obj
def remove(cli_ctx: CliContext, mod: str):
    """删除模组及只被它使用的依赖"""
    # 删除记录由服务层输出
    run_command(cli_ctx, lambda o: o.remove(mod))


@main.command()
@click.option("--dry-run", is_flag=True, help="只列出将被删除的文件")
@click.pass_obj
def clean(cli_ctx: CliContext, dry_run: bool):
    """清理未使用的依赖库"""
    _, candidates = run_command(cli_ctx, lambda o: o.clean(dry_run=dry_run))

    if dry_run and candidates:
        click.echo(f"  {cli_ctx.theme.arrow} 提示: 去掉 --dry-run 以删除以上文件")


@main.command()
@click.pass_obj
def info(cli_ctx: CliContext):
    """显示项目信息"""
    _, data = run_command(cli_ctx, lambda o: o.info())

    click.secho("  项目信息", bold=True)
    cli_ctx.rule()
    click.echo(f"    Minecraft 版本:  {click.style(data['minecraft_version'], fg='bright_green', bold=True)}")
    click.echo(f"    模组加载器:      {click.style(data['mod_loader'].capitalize(), fg='bright_yellow', bold=True)}")
    click.echo(f"    项目目录:        {data['root']}")
    click.echo(f"    模组目录:        {data['mods_dir']}")
    click.echo(f"    已安装模组:      {data['installed_mods']}")


if __name__ == "__main__":
    main()
