# -*- coding: utf-8 -*-

"""
命令行入口
"""
import click

from . import __version__
from .commands.build_cmd import build_cmd
from .commands.dev_cmd import dev_cmd


@click.group()
@click.version_option(__version__, prog_name='tscwrap')
def main():
    """tscwrap - TypeScript 增量编译工具"""


main.add_command(build_cmd, name='build')
main.add_command(dev_cmd, name='dev')


if __name__ == '__main__':
    main()
