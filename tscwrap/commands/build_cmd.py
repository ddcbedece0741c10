# -*- coding: utf-8 -*-

"""
构建命令模块
"""
import os
import click

from ..config import load_build_config
from ..errors import TscwrapError
from ..builders.project_builder import BuildOrchestrator
from ..builders.watcher import ChangeMonitor, WatchLoop
from ..utils.utils import BuildLog


def build_options(func):
    """build 和 dev 命令共用的配置覆盖参数"""
    options = [
        click.option('--project-dir', '-C', type=click.Path(file_okay=False), default=None,
                     help='项目目录，默认为当前目录'),
        click.option('--source-dir', help='TypeScript 源目录'),
        click.option('--target-dir', help='输出目录（逐文件模式）'),
        click.option('--target-file', help='合并输出文件，设置后启用单文件模式'),
        click.option('--library-dir', help='.d.ts 库文件目录'),
        click.option('--target-version', help='目标 ECMAScript 版本'),
        click.option('--sourcemap/--no-sourcemap', 'generate_sourcemap', default=None, help='是否生成 sourcemap'),
        click.option('--sourcemap-root', help='sourcemap 中的源码根目录'),
        click.option('--use-tsc/--no-use-tsc', default=None, help='优先使用命令行 tsc'),
        click.option('--use-tsc-only/--no-use-tsc-only', default=None, help='只使用命令行 tsc，无法启动时构建失败'),
        click.option('--incremental/--full', default=None, help='首次构建是否检查时间戳'),
        click.option('--poll-time', type=int, help='监控模式轮询间隔（毫秒）'),
        click.option('--verbose', '-v', is_flag=True, help='输出调试信息'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def load_options(project_dir, overrides):
    verbose = overrides.pop('verbose', False)
    log = BuildLog(verbose=verbose)
    config = load_build_config(project_dir or os.getcwd(), overrides)
    return config, log


def build(config, log):
    """执行一次构建，返回 BuildReport；启动阶段的错误直接抛出"""
    orchestrator = BuildOrchestrator.from_config(config, log)
    return orchestrator.build(check_timestamp=config.incremental)


def watch(config, log):
    """构建后持续监控源目录，直到 Ctrl+C"""
    orchestrator = BuildOrchestrator.from_config(config, log)
    monitor = ChangeMonitor(config.source_dir, config.source_extension)
    loop = WatchLoop(monitor, orchestrator, log, config.poll_time)
    click.secho("👀 监控中... 按 Ctrl+C 停止", fg="bright_magenta")
    loop.run(check_timestamp=config.incremental)
    click.secho("🛑 监控已停止", fg="bright_yellow")
    return loop


@click.command()
@build_options
@click.option('--watch/--no-watch', '-w', default=None, help='构建后监控源文件变化')
@click.option('--fail-on-error', is_flag=True, help='有文件编译失败时以非零状态退出')
def build_cmd(project_dir, fail_on_error, **overrides):
    """编译 TypeScript 源文件"""
    try:
        config, log = load_options(project_dir, overrides)
        if config.watch:
            watch(config, log)
            return
        report = build(config, log)
        if fail_on_error:
            report.raise_for_failures()
    except TscwrapError as e:
        click.secho(f"❌ 构建失败: {e}", fg="red", err=True)
        raise SystemExit(1)
    if report.failures:
        click.secho(f"⚠️ {len(report.failures)} 个编译任务失败", fg="yellow")
    else:
        click.secho("✅ 构建完成", fg="green")
