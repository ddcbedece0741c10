# -*- coding: utf-8 -*-
"""
构建模块包，提供文件扫描、变化监控、编译器后端和构建调度功能
"""

from .snapshot import SourceFile, FileSetSnapshot, scan
from .tasks import CompileTask, BuildResult, BuildReport, Success, Failure, Fault
from .external_backend import ExternalProcessBackend
from .interpreter_backend import EmbeddedInterpreterBackend, InterpreterSession
from .fallback import BackendMode, FallbackBackend
from .project_builder import BuildOrchestrator, create_backend
from .watcher import ChangeMonitor, WatchLoop, SnapshotDelta

__all__ = ['SourceFile', 'FileSetSnapshot', 'scan',
           'CompileTask', 'BuildResult', 'BuildReport', 'Success', 'Failure', 'Fault',
           'ExternalProcessBackend', 'EmbeddedInterpreterBackend', 'InterpreterSession',
           'BackendMode', 'FallbackBackend', 'BuildOrchestrator', 'create_backend',
           'ChangeMonitor', 'WatchLoop', 'SnapshotDelta']
