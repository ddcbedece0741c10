# -*- coding: utf-8 -*-
"""
文件快照模块 - 记录源目录下所有源文件及其修改时间
"""

import os
import stat
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from watchdog.utils.dirsnapshot import DirectorySnapshot

from ..errors import BuildIOError
from .file_handler import is_source_file

DEFAULT_SOURCE_EXTENSION = '.ts'


@dataclass(frozen=True)
class SourceFile:
    """单个源文件，path 为相对源目录的路径（使用 / 分隔）"""
    path: str
    absolute_path: str
    mtime: float


@dataclass(frozen=True)
class FileSetSnapshot:
    """某一时刻的源文件集合，按相对路径字典序排列"""
    root: str
    files: Dict[str, SourceFile] = field(default_factory=dict)

    def __len__(self):
        return len(self.files)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.files.values())

    def __contains__(self, path):
        return path in self.files

    def get(self, path) -> Optional[SourceFile]:
        return self.files.get(path)

    def paths(self):
        return list(self.files)

    def latest_mtime(self) -> float:
        """所有文件中最新的修改时间，空快照返回 0"""
        return max((f.mtime for f in self.files.values()), default=0.0)


def _check_readable(root):
    if not os.path.isdir(root):
        raise BuildIOError(f"源目录不存在: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise BuildIOError(f"源目录不可读: {root}")


def scan(root_dir, extension=DEFAULT_SOURCE_EXTENSION) -> FileSetSnapshot:
    """
    递归扫描目录，返回所有以 extension 结尾的文件

    目录中没有匹配文件时返回空快照，不视为错误。
    """
    root = os.path.abspath(root_dir)
    _check_readable(root)

    try:
        dir_snapshot = DirectorySnapshot(root, recursive=True)
    except OSError as e:
        raise BuildIOError(f"无法扫描源目录 {root}: {e}") from e

    found = {}
    for path in dir_snapshot.paths:
        if path == root or not is_source_file(path, extension):
            continue
        info = dir_snapshot.stat_info(path)
        if stat.S_ISDIR(info.st_mode):
            continue
        rel_path = os.path.relpath(path, root).replace(os.sep, '/')
        found[rel_path] = SourceFile(rel_path, path, info.st_mtime)

    return FileSetSnapshot(root, {path: found[path] for path in sorted(found)})
