from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tscwrap.builders.external_backend import ExternalProcessBackend
from tscwrap.builders.snapshot import SourceFile
from tscwrap.builders.tasks import CompileTask, Failure, Success
from tscwrap.errors import BackendUnavailable

FAKE_TSC = '''\
import sys

args = sys.argv[1:]
print('compiling ' + ' '.join(args))
sys.stderr.write('note from tsc\\n')
for _ in range(20000):
    sys.stdout.write('o' * 40 + '\\n')
    sys.stderr.write('e' * 40 + '\\n')
sys.exit(2 if any('bad' in a for a in args) else 0)
'''


@pytest.fixture
def fake_tsc(tmp_path: Path) -> list[str]:
    script = tmp_path / "fake_tsc.py"
    script.write_text(FAKE_TSC, encoding="utf-8")
    return [sys.executable, str(script)]


def make_task(tmp_path: Path, name: str) -> CompileTask:
    source = SourceFile(name, str(tmp_path / name), 1.0)
    return CompileTask((source,), str(tmp_path / "out.js"), ("--target", "ES5"))


def test_successful_run_streams_stdout_and_stderr(tmp_path: Path, fake_tsc: list[str], log) -> None:
    backend = ExternalProcessBackend(fake_tsc, log)
    task = make_task(tmp_path, "good.ts")

    result = backend.compile(task)

    assert result.outcome == Success()
    assert result.backend == "external"
    assert ("info", "compiling " + " ".join(task.arguments())) in log.records
    assert ("error", "note from tsc") in log.records
    assert len(result.lines) == 2 + 2 * 20000


def test_nonzero_exit_is_reported_failure(tmp_path: Path, fake_tsc: list[str], log) -> None:
    backend = ExternalProcessBackend(fake_tsc, log)

    result = backend.compile(make_task(tmp_path, "bad.ts"))

    assert result.outcome == Failure(2)
    assert "Failed to execute tsc. Return code: 2" in log.messages("error")


def test_missing_executable_is_backend_unavailable(tmp_path: Path, log) -> None:
    backend = ExternalProcessBackend(str(tmp_path / "no-such-tsc"), log)

    with pytest.raises(BackendUnavailable):
        backend.compile(make_task(tmp_path, "good.ts"))


def test_executable_string_is_shell_split(log) -> None:
    backend = ExternalProcessBackend("node ./node_modules/.bin/tsc", log)

    assert backend.command == ["node", "./node_modules/.bin/tsc"]
