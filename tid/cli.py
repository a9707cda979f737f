# tid/cli.py
"""
Tid 的命令行接口 (CLI)。

密钥与默认参数从环境变量读取 (见 `tid.config.TidConfig`)，例如::

    TID_SECRETS='{"0": "topSecret"}' tid generate --type order
"""

import uuid
from typing import Optional

import structlog
import typer
from pydantic import ValidationError
from pydantic_settings import SettingsError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tid import __version__
from tid.config import TidConfig
from tid.core import Tid
from tid.exceptions import TidError
from tid.logging_config import setup_logging
from tid.types import Mode

app = typer.Typer(
    name="tid",
    help="生成并校验带类型指纹和密钥标签的 128 位标识符。",
    add_completion=False,
)

console = Console()
log = structlog.get_logger("tid.cli")


class State:
    """用于在 Typer 上下文中传递共享对象的容器。"""

    config: TidConfig
    codec: Tid


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", help="显示版本号并退出。", is_eager=True
    ),
) -> None:
    """处理全局选项。配置由子命令在执行时加载。"""
    if version:
        console.print(f"Tid version: [bold green]{__version__}[/bold green]")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


def _load_state(ctx: typer.Context) -> State:
    """加载配置、初始化日志和编解码器，结果缓存在根上下文中。"""
    root = ctx.find_root()
    if isinstance(root.obj, State):
        return root.obj

    try:
        config = TidConfig()
        setup_logging(log_level=config.logging.level, log_format=config.logging.format)
        codec = Tid.from_config(config)
    except (ValidationError, SettingsError, TidError) as e:
        console.print(f"[bold red]❌ 配置无效:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    state = State()
    state.config = config
    state.codec = codec
    root.obj = state
    return state


@app.command()
def generate(
    ctx: typer.Context,
    type_label: str = typer.Option(..., "--type", "-t", help="类型标签 (最多 255 字节)。"),
    mode: Optional[Mode] = typer.Option(
        None, "--mode", "-m", help="生成模式，默认取自配置。", case_sensitive=False
    ),
    tag_length: Optional[int] = typer.Option(
        None, "--tag-length", "-l", min=1, max=2, help="校验标签长度 (1 或 2)，默认取自配置。"
    ),
    count: int = typer.Option(1, "--count", "-n", min=1, help="要生成的标识符数量。"),
) -> None:
    """生成一个或多个标识符，每行输出一个。"""
    state = _load_state(ctx)
    mode = mode or state.config.default_mode
    tag_length = tag_length or state.config.default_tag_length

    try:
        for _ in range(count):
            typer.echo(str(state.codec.generate(type_label, mode, tag_length)))
    except TidError as e:
        console.print(f"[bold red]❌ 生成失败:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    log.debug("已生成标识符。", count=count, mode=mode.value, tag_length=tag_length)


@app.command()
def decode(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="要校验的 UUID。"),
    type_label: str = typer.Option(..., "--type", "-t", help="期望的类型标签。"),
) -> None:
    """解码并校验一个标识符。被拒绝时退出码为 1。"""
    state = _load_state(ctx)

    try:
        value = uuid.UUID(identifier)
    except ValueError as e:
        console.print(f"[bold red]❌ 不是合法的 UUID:[/bold red] {escape(identifier)}")
        raise typer.Exit(code=2) from e

    try:
        info = state.codec.decode(value, type_label)
    except TidError as e:
        console.print(f"[bold red]❌ 参数无效:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    table = Table(title=str(value))
    table.add_column("字段", style="cyan")
    table.add_column("值")
    table.add_row("valid_tag", str(info.valid_tag))
    table.add_row("type_matches", str(info.type_matches))
    table.add_row("timestamp", str(info.timestamp))
    table.add_row("secret_index", str(info.secret_index))
    table.add_row("mode", info.mode.value)
    table.add_row("version", str(info.version))
    table.add_row("tag_length", str(info.tag_length))
    console.print(table)

    if not info.is_valid:
        log.warning(
            "标识符校验未通过。",
            valid_tag=info.valid_tag,
            type_matches=info.type_matches,
        )
        console.print("[bold red]❌ 校验未通过[/bold red]")
        raise typer.Exit(code=1)

    console.print("[bold green]✅ 校验通过[/bold green]")
