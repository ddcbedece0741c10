# -*- coding: utf-8 -*-
"""
错误类型定义
"""


class TscwrapError(Exception):
    """tscwrap 所有错误的基类"""


class ConfigError(TscwrapError):
    """配置文件内容无效"""


class BuildIOError(TscwrapError, OSError):
    """文件系统或资源访问失败（目录创建、脚本加载、源目录不可读）"""


class BackendUnavailable(TscwrapError):
    """外部编译器无法启动（未找到或无权限）"""

    def __init__(self, executable, cause=None):
        self.executable = executable
        self.cause = cause
        message = f"无法启动编译器: {executable}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class CompileFailure(TscwrapError):
    """编译器运行了，但对某个任务报告失败"""

    def __init__(self, task, backend, status, detail=""):
        self.task = task
        self.backend = backend
        self.status = status
        self.detail = detail
        message = f"编译失败 [{backend}] {task.describe()}: 返回码 {status}"
        if detail:
            message += f" - {detail}"
        super().__init__(message)


class InterpreterFault(TscwrapError):
    """内嵌解释器在编译器自身退出语义之外出错"""

    def __init__(self, task, backend, detail):
        self.task = task
        self.backend = backend
        self.detail = detail
        super().__init__(f"解释器错误 [{backend}] {task.describe()}: {detail}")
