# -*- coding: utf-8 -*-
"""
内嵌编译器后端 - 在当前进程内重复执行预先加载的编译器脚本
"""

import contextlib
import io
import os
import sys

from ..errors import BuildIOError
from .tasks import BuildResult, Failure, Fault, Success

INTERPRETER_NAME = 'python'


class ProcessState:
    """
    提供给编译脚本的进程对象

    脚本通过 process.argv 读取参数，通过 process.exit(status) 结束运行。
    """

    def __init__(self, argv, encoding, main_filename):
        self.argv = list(argv)
        self.encoding = encoding
        self.main_filename = main_filename

    def exit(self, status=0):
        raise SystemExit(status)


class _LineWriter(io.TextIOBase):
    """把写入的文本按行收集起来"""

    def __init__(self, stream_name, lines):
        self._stream_name = stream_name
        self._lines = lines
        self._buffer = ''

    def writable(self):
        return True

    def write(self, text):
        self._buffer += text
        while '\n' in self._buffer:
            line, self._buffer = self._buffer.split('\n', 1)
            self._emit(line)
        return len(text)

    def flush(self):
        if self._buffer:
            self._emit(self._buffer)
            self._buffer = ''

    def _emit(self, line):
        self._lines.append((self._stream_name, line.rstrip('\r')))


def _exit_status(code):
    """按照 sys.exit 的约定解析退出码"""
    if code is None:
        return 0, ''
    if isinstance(code, int):
        return code, ''
    return 1, str(code)


class InterpreterSession:
    """
    长期持有的编译器脚本上下文

    load() 只编译一次脚本；每次运行前必须调用 reset(argv)，
    它会重建脚本的全局命名空间和 process 对象，上一次运行的状态不会保留。
    """

    def __init__(self, script_path, encoding='utf-8'):
        self.script_path = os.path.abspath(script_path)
        self.encoding = encoding
        self.process = None
        self._code = None
        self._globals = None

    def load(self):
        """读取并编译编译器脚本，失败时抛出 BuildIOError"""
        try:
            with open(self.script_path, 'r', encoding=self.encoding) as f:
                source = f.read()
        except OSError as e:
            raise BuildIOError(f"Resource open error: {self.script_path} ({e})") from e
        try:
            self._code = compile(source, self.script_path, 'exec')
        except (SyntaxError, ValueError) as e:
            raise BuildIOError(f"Resource read error: {self.script_path} ({e})") from e
        return self

    def reset(self, argv):
        """清空上一次运行的状态，并写入新的参数"""
        self.process = ProcessState(
            [INTERPRETER_NAME, os.path.basename(self.script_path)] + list(argv),
            self.encoding,
            self.script_path
        )
        self._globals = {
            '__name__': '__main__',
            '__file__': self.script_path,
            'process': self.process,
        }

    def run(self, stdout=None, stderr=None):
        """执行脚本，返回 Success / Failure / Fault 之一"""
        if self._code is None:
            return Fault(f"编译器脚本尚未加载: {self.script_path}")
        if self._globals is None:
            return Fault("运行前未调用 reset()")

        saved_argv = sys.argv
        sys.argv = list(self.process.argv[1:])
        try:
            with contextlib.redirect_stdout(stdout or sys.stdout), contextlib.redirect_stderr(stderr or sys.stderr):
                exec(self._code, self._globals)
        except SystemExit as e:
            status, detail = _exit_status(e.code)
            if status != 0:
                return Failure(status, detail or f"Process Error: {status}")
        except (RecursionError, MemoryError) as e:
            return Fault(f"{type(e).__name__}: {e}")
        except Exception as e:
            return Failure(1, f"Script error: {type(e).__name__}: {e}")
        finally:
            sys.argv = saved_argv
            self._globals = None
        return Success()


class EmbeddedInterpreterBackend:
    """在进程内运行编译器脚本"""

    name = 'embedded'

    def __init__(self, session, log=None):
        self.session = session
        self.log = log

    def compile(self, task):
        captured = []
        stdout = _LineWriter('stdout', captured)
        stderr = _LineWriter('stderr', captured)

        self.session.reset(task.arguments())
        try:
            outcome = self.session.run(stdout, stderr)
        finally:
            stdout.flush()
            stderr.flush()

        # 脚本运行期间 sys.stdout 被替换，输出只能在运行结束后转发
        for stream_name, line in captured:
            if stream_name == 'stderr':
                self.log.error(line)
            else:
                self.log.info(line)
        lines = tuple(line for _, line in captured)

        if isinstance(outcome, Failure):
            self.log.error(outcome.detail or f"Process Error: {outcome.status}")
        elif isinstance(outcome, Fault):
            self.log.error(f"Interpreter error: {outcome.detail}")
        return BuildResult(task, outcome, self.name, lines)
