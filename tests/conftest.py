from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

from tscwrap.utils.utils import BuildLog

OLD_MTIME = 1_600_000_000

COMPILER_SCRIPT = '''\
import os

args = process.argv[2:]
out = args[args.index('--out') + 1]
sources = [a for a in args if a.endswith('.ts') and not a.endswith('.d.ts')]
for source in sources:
    with open(source, encoding=process.encoding) as f:
        if 'syntax error' in f.read():
            print(source + ': error TS1005')
            process.exit(2)
os.makedirs(os.path.dirname(out), exist_ok=True)
with open(out, 'w', encoding='utf-8') as f:
    for source in sources:
        f.write('// ' + os.path.basename(source) + '\\n')
print('wrote ' + out)
'''


class RecordingLog(BuildLog):
    """Collects log lines instead of printing them."""

    def __init__(self) -> None:
        super().__init__(verbose=True, enabled=False)
        self.records: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def debug(self, message: str) -> None:
        self.records.append(("debug", message))

    def messages(self, level: str | None = None) -> list[str]:
        return [message for lvl, message in self.records if level is None or lvl == level]


@pytest.fixture
def log() -> RecordingLog:
    return RecordingLog()


@pytest.fixture
def write_file() -> Callable[..., Path]:
    def _write(path: Path, content: str = "", mtime: float | None = OLD_MTIME) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def compiler_script(tmp_path: Path) -> Path:
    path = tmp_path / "tools" / "tsc.py"
    path.parent.mkdir(parents=True)
    path.write_text(COMPILER_SCRIPT, encoding="utf-8")
    return path
