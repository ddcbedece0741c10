# -*- coding: utf-8 -*-
"""
配置模块 - 从 pyproject.toml 的 [tool.tscwrap] 读取构建配置
"""

import os
import shlex
import tomllib
from dataclasses import dataclass, fields, replace
from typing import Optional

from .errors import ConfigError

CONFIG_FILE = 'pyproject.toml'
TOOL_SECTION = 'tscwrap'

# 需要相对项目目录解析为绝对路径的配置项
PATH_KEYS = ('source_dir', 'target_dir', 'library_dir', 'lib_dts', 'target_file', 'compiler_script')


@dataclass(frozen=True)
class BuildConfig:
    source_dir: str = 'src/main/ts'
    target_dir: str = 'target/ts'
    library_dir: str = 'src/main/d.ts'
    lib_dts: str = 'src/main/tsc/lib.d.ts'
    encoding: str = 'utf-8'
    watch: bool = False
    # 轮询间隔，单位毫秒
    poll_time: int = 100
    target_file: Optional[str] = None
    target_version: Optional[str] = 'ES3'
    generate_sourcemap: bool = False
    sourcemap_root: Optional[str] = None
    use_tsc: bool = False
    use_tsc_only: bool = False
    no_standard_lib: bool = True
    tsc_executable: str = 'tsc'
    compiler_script: str = 'src/main/tsc/tsc.py'
    source_extension: str = '.ts'
    output_extension: str = '.js'
    incremental: bool = False

    @property
    def bundled(self):
        return self.target_file is not None

    def resolved(self, base_dir):
        """返回所有路径都相对 base_dir 解析后的配置"""
        changes = {}
        for key in PATH_KEYS:
            value = getattr(self, key)
            if value is not None:
                changes[key] = os.path.normpath(os.path.join(base_dir, value))
        changes['tsc_executable'] = _resolve_command(self.tsc_executable, base_dir)
        return replace(self, **changes)


def _resolve_command(command, base_dir):
    """命令中第一个参数是相对路径（如 node_modules/.bin/tsc）时，相对 base_dir 解析；PATH 中的命令名保持不变"""
    parts = shlex.split(command)
    if not parts:
        return command
    program = parts[0]
    if os.path.isabs(program) or ('/' not in program and os.sep not in program):
        return command
    parts[0] = os.path.normpath(os.path.join(base_dir, program))
    return shlex.join(parts)


_FIELD_TYPES = {f.name: f.type for f in fields(BuildConfig)}


def config_exists(base_dir=None):
    """检查配置文件是否存在"""
    return os.path.exists(os.path.join(base_dir or os.getcwd(), CONFIG_FILE))


def read_config(config_path=None):
    """读取配置文件，文件不存在时返回空字典"""
    config_path = config_path or os.path.join(os.getcwd(), CONFIG_FILE)
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"配置文件解析错误 {config_path}: {e}") from e


def get_tscwrap_config(config_path=None):
    """获取 [tool.tscwrap] 配置段"""
    return read_config(config_path).get('tool', {}).get(TOOL_SECTION, {})


def _normalize_options(options, source):
    normalized = {}
    for key, value in options.items():
        name = key.replace('-', '_')
        if name not in _FIELD_TYPES:
            raise ConfigError(f"{source} 中存在未知配置项: {key}")
        normalized[name] = _coerce(name, value, source)
    return normalized


def _coerce(name, value, source):
    expected = _FIELD_TYPES[name]
    if value is None:
        if 'Optional' in str(expected):
            return None
        raise ConfigError(f"{source} 中的 {name} 不能为空")
    if expected in (bool, 'bool'):
        if not isinstance(value, bool):
            raise ConfigError(f"{source} 中的 {name} 必须是布尔值")
        return value
    if expected in (int, 'int'):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{source} 中的 {name} 必须是正整数")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{source} 中的 {name} 必须是字符串")
    return value


def load_build_config(base_dir=None, overrides=None):
    """
    合并默认值、配置文件和命令行参数，得到最终的构建配置

    优先级：命令行参数 > [tool.tscwrap] > 默认值。值为 None 的命令行参数会被忽略。
    """
    base_dir = os.path.abspath(base_dir or os.getcwd())
    file_options = _normalize_options(
        get_tscwrap_config(os.path.join(base_dir, CONFIG_FILE)),
        CONFIG_FILE
    )
    cli_options = _normalize_options(
        {k: v for k, v in (overrides or {}).items() if v is not None},
        '命令行参数'
    )
    config = BuildConfig(**{**file_options, **cli_options})
    return config.resolved(base_dir)
