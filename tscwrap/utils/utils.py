# -*- coding: utf-8 -*-

"""
通用工具函数
"""
import subprocess
import threading
from pathlib import Path
import click

from ..errors import BuildIOError


def ensure_dir(path_str):
    """确保目录存在，如果不存在则创建"""
    path = Path(path_str).expanduser().resolve()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildIOError(f"无法创建目录 {path}: {e}") from e
    return str(path)


def _pump_lines(stream, callback, collected, lock):
    """逐行读取管道内容并立即转发"""
    try:
        for line in iter(stream.readline, ''):
            line = line.rstrip('\r\n')
            with lock:
                collected.append(line)
            callback(line)
    finally:
        stream.close()


def stream_command(cmd, on_stdout, on_stderr, cwd=None, encoding=None):
    """
    运行系统命令，并实时转发输出

    stdout 和 stderr 由两个线程同时读取，避免管道缓冲区写满导致子进程阻塞。
    进程无法启动时抛出 OSError，由调用方决定如何处理。

    Args:
        cmd: 命令参数列表
        on_stdout: 每读到一行标准输出时调用
        on_stderr: 每读到一行错误输出时调用
        cwd: 工作目录
        encoding: 子进程输出编码，None 表示使用系统默认编码

    Returns:
        (返回码, 按到达顺序收集的所有输出行)
    """
    process = subprocess.Popen(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding=encoding,
        errors='replace',
        bufsize=1
    )
    collected = []
    lock = threading.Lock()
    readers = [
        threading.Thread(target=_pump_lines, args=(process.stdout, on_stdout, collected, lock), daemon=True),
        threading.Thread(target=_pump_lines, args=(process.stderr, on_stderr, collected, lock), daemon=True),
    ]
    for reader in readers:
        reader.start()
    status = process.wait()
    for reader in readers:
        reader.join()
    return status, collected


class BuildLog:
    """构建日志输出，所有信息都通过 click 输出到终端"""

    def __init__(self, verbose=False, enabled=True):
        """
        Args:
            verbose: 是否输出调试信息
            enabled: 设为 False 时不输出任何内容
        """
        self.verbose = verbose
        self.enabled = enabled

    def _emit(self, message, color=None, err=False, bold=False):
        if self.enabled:
            click.secho(message, fg=color, err=err, bold=bold)

    def info(self, message):
        self._emit(message)

    def warning(self, message):
        self._emit(message, "yellow")

    def error(self, message):
        self._emit(message, "red", err=True)

    def debug(self, message):
        if self.verbose:
            self._emit(message, "bright_black")
