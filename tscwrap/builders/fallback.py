# -*- coding: utf-8 -*-
"""
后端选择模块 - 决定使用外部 tsc 还是内嵌编译器
"""

from enum import Enum

from ..errors import BackendUnavailable


class BackendMode(str, Enum):
    INTERPRETER = 'interpreter'
    EXTERNAL = 'external'
    EXTERNAL_ONLY = 'external-only'

    @classmethod
    def from_flags(cls, use_tsc, use_tsc_only):
        if use_tsc_only:
            return cls.EXTERNAL_ONLY
        if use_tsc:
            return cls.EXTERNAL
        return cls.INTERPRETER

    @property
    def needs_interpreter(self):
        return self is not BackendMode.EXTERNAL_ONLY


class FallbackBackend:
    """
    按模式分派编译任务

    external 模式下外部编译器一旦无法启动，本次运行剩余的任务都改用内嵌编译器，
    不会再尝试外部编译器；外部编译器启动成功时，无论返回码如何都以它的结果为准。
    external-only 模式下无法启动直接抛出 BackendUnavailable。
    """

    def __init__(self, mode, external=None, interpreter=None, log=None):
        self.mode = BackendMode(mode)
        self.external = external
        self.interpreter = interpreter
        self.log = log
        if self.mode is not BackendMode.INTERPRETER and self.external is None:
            raise ValueError(f"{self.mode.value} 模式需要外部编译器后端")
        if self.mode.needs_interpreter and self.interpreter is None:
            raise ValueError(f"{self.mode.value} 模式需要内嵌编译器后端")
        self.active = self.interpreter if self.mode is BackendMode.INTERPRETER else self.external

    @property
    def name(self):
        return self.active.name

    def compile(self, task):
        if self.active is self.external:
            try:
                return self.external.compile(task)
            except BackendUnavailable as e:
                if self.mode is BackendMode.EXTERNAL_ONLY:
                    self.log.error(f"Failed to execute tsc: {e}")
                    raise
                self.log.debug(f"无法运行外部编译器: {e}")
                self.log.info("Unable to run 'tsc' binary - falling back to internal tsc compiler code")
                self.active = self.interpreter
        return self.interpreter.compile(task)
