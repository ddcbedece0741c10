# -*- coding: utf-8 -*-
"""
外部编译器后端 - 直接运行命令行 tsc
"""

import shlex

from ..errors import BackendUnavailable
from ..utils.utils import stream_command
from .tasks import BuildResult, Failure, Success


class ExternalProcessBackend:
    """通过子进程调用外部编译器"""

    name = 'external'

    def __init__(self, executable='tsc', log=None, cwd=None, encoding=None):
        if isinstance(executable, str):
            executable = shlex.split(executable)
        self.command = list(executable)
        self.log = log
        self.cwd = cwd
        self.encoding = encoding

    def compile(self, task):
        arguments = self.command + task.arguments()
        self.log.debug(f"About to execute command: {arguments}")
        try:
            status, lines = stream_command(
                arguments,
                on_stdout=self.log.info,
                on_stderr=self.log.error,
                cwd=self.cwd,
                encoding=self.encoding
            )
        except OSError as e:
            # 子进程根本没有启动，交给回退策略处理
            raise BackendUnavailable(' '.join(self.command), e) from e

        if status != 0:
            self.log.error(f"Failed to execute tsc. Return code: {status}")
            return BuildResult(task, Failure(status), self.name, tuple(lines))

        self.log.debug("Compiled file successfully")
        return BuildResult(task, Success(), self.name, tuple(lines))
