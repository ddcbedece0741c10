# -*- coding: utf-8 -*-
"""
编译任务与结果模型
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..errors import CompileFailure, InterpreterFault
from .snapshot import SourceFile

OUT_FLAG = '--out'


@dataclass(frozen=True)
class Success:
    """编译器正常结束或以状态 0 退出"""


@dataclass(frozen=True)
class Failure:
    """编译器以非零状态退出，或编译脚本自身抛出异常"""
    status: int
    detail: str = ''


@dataclass(frozen=True)
class Fault:
    """解释器层面的错误，与编译器的退出语义无关"""
    detail: str


Outcome = Union[Success, Failure, Fault]


@dataclass(frozen=True)
class CompileTask:
    """
    一次编译调用

    参数顺序固定：--out 输出路径，源文件路径，最后是全局编译参数。
    """
    sources: Tuple[SourceFile, ...]
    output: str
    extra_args: Tuple[str, ...] = ()
    bundled: bool = False

    def arguments(self) -> List[str]:
        args = [OUT_FLAG, self.output]
        args.extend(source.absolute_path for source in self.sources)
        args.extend(self.extra_args)
        return args

    def describe(self):
        if len(self.sources) == 1:
            return self.sources[0].path
        paths = ', '.join(source.path for source in self.sources)
        return f"{paths} -> {self.output}"


@dataclass(frozen=True)
class BuildResult:
    """单个编译任务的结果"""
    task: CompileTask
    outcome: Outcome
    backend: str
    lines: Tuple[str, ...] = ()

    @property
    def success(self):
        return isinstance(self.outcome, Success)

    def error(self) -> Optional[Exception]:
        """将失败结果转换为对应的异常对象，成功时返回 None"""
        if isinstance(self.outcome, Failure):
            return CompileFailure(self.task, self.backend, self.outcome.status, self.outcome.detail)
        if isinstance(self.outcome, Fault):
            return InterpreterFault(self.task, self.backend, self.outcome.detail)
        return None


@dataclass
class BuildReport:
    """一次构建过程的汇总"""
    results: List[BuildResult] = field(default_factory=list)
    skipped: int = 0

    @property
    def compiled(self):
        """成功编译的源文件数量"""
        return sum(len(result.task.sources) for result in self.results if result.success)

    @property
    def failures(self) -> List[BuildResult]:
        return [result for result in self.results if not result.success]

    @property
    def message(self):
        if self.compiled == 0:
            return "Nothing to compile"
        return f"Compiled {self.compiled} file(s)"

    def raise_for_failures(self):
        """存在失败的任务时抛出第一个失败对应的异常"""
        for result in self.failures:
            raise result.error()
