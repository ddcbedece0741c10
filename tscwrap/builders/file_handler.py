# -*- coding: utf-8 -*-
"""
文件处理模块 - 负责单个源文件的输出路径和时间戳判断
"""

import os

DEFAULT_OUTPUT_EXTENSION = '.js'
LIBRARY_SUFFIX = '.d.ts'


def is_source_file(file_path, extension='.ts'):
    """判断是否为源文件"""
    return file_path.endswith(extension)


def output_path_for(rel_path, target_dir, source_extension='.ts', output_extension=DEFAULT_OUTPUT_EXTENSION):
    """计算源文件在目标目录下对应的输出文件路径"""
    base = rel_path[:-len(source_extension)] if rel_path.endswith(source_extension) else os.path.splitext(rel_path)[0]
    return os.path.join(os.path.abspath(target_dir), *(base + output_extension).split('/'))


def needs_compile(source_mtime, output_path, check_timestamp=True):
    """
    判断输出文件是否需要重新生成

    输出不存在、不检查时间戳、或输出严格早于源文件时需要编译。
    """
    if not check_timestamp or not os.path.exists(output_path):
        return True
    return os.path.getmtime(output_path) < source_mtime


def find_library_files(library_dir, suffix=LIBRARY_SUFFIX):
    """列出库目录下（不递归）所有声明文件，按文件名排序"""
    if not library_dir or not os.path.isdir(library_dir):
        return []
    library_files = []
    for name in sorted(os.listdir(library_dir)):
        path = os.path.join(library_dir, name)
        if name.endswith(suffix) and os.path.isfile(path):
            library_files.append(os.path.abspath(path))
    return library_files
