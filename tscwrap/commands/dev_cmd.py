# -*- coding: utf-8 -*-

"""
开发命令模块
"""
import click

from ..errors import TscwrapError
from .build_cmd import build_options, load_options, watch


@click.command()
@build_options
def dev_cmd(project_dir, **overrides):
    """使用watch模式，先完整构建一次，代码更新时自动增量构建"""
    try:
        config, log = load_options(project_dir, overrides)
        click.secho("🔍 开始监控代码变化，路径: ", fg="bright_blue", nl=False)
        click.secho(f"{config.source_dir}", fg="bright_cyan")
        watch(config, log)
    except TscwrapError as e:
        click.secho(f"❌ 错误: {e}", fg="red", err=True)
        raise SystemExit(1)
