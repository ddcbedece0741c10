# -*- coding: utf-8 -*-
"""
项目构建模块 - 决定哪些源文件需要编译，并交给编译器后端执行
"""

import os

from ..utils.utils import ensure_dir
from .external_backend import ExternalProcessBackend
from .fallback import BackendMode, FallbackBackend
from .file_handler import find_library_files, needs_compile, output_path_for
from .interpreter_backend import EmbeddedInterpreterBackend, InterpreterSession
from .snapshot import scan
from .tasks import BuildReport, CompileTask

NOLIB_FLAG = '--nolib'
TARGET_FLAG = '--target'
SOURCEMAP_FLAG = '--sourcemap'
SOURCE_ROOT_FLAG = '--sourceRoot'


def create_backend(config, log):
    """
    根据配置创建编译器后端

    除 external-only 模式外都需要加载内嵌编译器脚本，加载失败抛出 BuildIOError。
    """
    mode = BackendMode.from_flags(config.use_tsc, config.use_tsc_only)
    external = None
    interpreter = None
    if mode is not BackendMode.INTERPRETER:
        external = ExternalProcessBackend(config.tsc_executable, log)
    if mode.needs_interpreter:
        session = InterpreterSession(config.compiler_script, config.encoding).load()
        interpreter = EmbeddedInterpreterBackend(session, log)
    return FallbackBackend(mode, external, interpreter, log)


class BuildOrchestrator:
    """
    构建调度器

    配置了 target_file 时把所有源文件编译成一个输出文件，否则逐个文件编译，
    输出路径镜像源目录结构。
    """

    def __init__(self, config, backend, log, scanner=scan):
        self.config = config
        self.backend = backend
        self.log = log
        self.scanner = scanner
        self.watching = False

    @classmethod
    def from_config(cls, config, log):
        """创建目录并加载编译器，任何 IO 错误都会在编译开始前抛出"""
        ensure_dir(config.source_dir)
        ensure_dir(config.target_dir)
        if config.target_file:
            ensure_dir(os.path.dirname(os.path.abspath(config.target_file)))
        return cls(config, create_backend(config, log), log)

    def compiler_flags(self):
        """
        追加在源文件之后的全局编译参数

        顺序：标准库参数、库声明文件、目标版本、sourcemap 参数。
        """
        config = self.config
        flags = []
        if config.no_standard_lib:
            flags.append(NOLIB_FLAG)
        if config.lib_dts and os.path.isfile(config.lib_dts):
            self._note(f"Adding standard library file {config.lib_dts}")
            flags.append(os.path.abspath(config.lib_dts))
        for library_file in find_library_files(config.library_dir):
            self._note(f"Adding library file {library_file}")
            flags.append(library_file)
        if config.target_version:
            self._note(f"Setting target version to {config.target_version}")
            flags.extend([TARGET_FLAG, config.target_version])
        if config.generate_sourcemap:
            flags.append(SOURCEMAP_FLAG)
            if config.sourcemap_root:
                flags.extend([SOURCE_ROOT_FLAG, config.sourcemap_root])
        return tuple(flags)

    def _note(self, message):
        # 监控模式下每次重新构建都会重复这些信息
        if self.watching:
            self.log.debug(message)
        else:
            self.log.info(message)

    def build(self, check_timestamp=True):
        """执行一次完整构建，返回 BuildReport"""
        snapshot = self.scanner(self.config.source_dir, self.config.source_extension)
        if not self.watching:
            self.log.info(f"Searching directory {snapshot.root}")
        if self.config.target_file:
            return self.build_bundle(snapshot, check_timestamp)
        return self.build_each(snapshot, check_timestamp)

    def bundle_task(self, snapshot):
        return CompileTask(
            tuple(snapshot),
            os.path.abspath(self.config.target_file),
            self.compiler_flags(),
            bundled=True
        )

    def build_bundle(self, snapshot, check_timestamp=True):
        """把所有源文件编译为单个输出文件"""
        report = BuildReport()
        if len(snapshot) == 0:
            self.log.info(report.message)
            return report

        task = self.bundle_task(snapshot)
        if not needs_compile(snapshot.latest_mtime(), task.output, check_timestamp):
            report.skipped = len(snapshot)
            self.log.info(report.message)
            return report

        self.log.info(f"Compiling {len(snapshot)} file(s) into {task.output}")
        result = self.backend.compile(task)
        report.results.append(result)
        self._report_result(result)
        self.log.info(report.message)
        return report

    def file_tasks(self, snapshot, check_timestamp=True):
        """生成需要编译的单文件任务，以及跳过的文件数"""
        flags = self.compiler_flags()
        tasks = []
        for source in snapshot:
            output = output_path_for(
                source.path,
                self.config.target_dir,
                self.config.source_extension,
                self.config.output_extension
            )
            if needs_compile(source.mtime, output, check_timestamp):
                tasks.append(CompileTask((source,), output, flags))
        return tasks, len(snapshot) - len(tasks)

    def build_each(self, snapshot, check_timestamp=True):
        """逐个文件编译，单个文件失败不影响其余文件"""
        report = BuildReport()
        tasks, report.skipped = self.file_tasks(snapshot, check_timestamp)
        for task in tasks:
            self.log.info(f"Compiling: {task.sources[0].absolute_path}")
            result = self.backend.compile(task)
            report.results.append(result)
            self._report_result(result)
        self.log.info(report.message)
        return report

    def _report_result(self, result):
        if result.success:
            self.log.info(f"Generated: {result.task.output}")
        else:
            self.log.error(str(result.error()))
