# -*- coding: utf-8 -*-
"""
文件监控模块 - 轮询源目录变化并触发重新构建
"""

import threading
from typing import NamedTuple, Optional, Set, Tuple

from ..errors import BuildIOError
from .snapshot import DEFAULT_SOURCE_EXTENSION, FileSetSnapshot, scan

DEFAULT_POLL_TIME = 100  # 毫秒


class SnapshotDelta(NamedTuple):
    added: Tuple[str, ...]
    modified: Tuple[str, ...]
    removed: Tuple[str, ...]

    @property
    def changed(self) -> Set[str]:
        """新增或修改过的文件，删除不计入"""
        return set(self.added) | set(self.modified)


def diff_snapshots(previous: Optional[FileSetSnapshot], current: FileSetSnapshot) -> SnapshotDelta:
    """比较两个快照；没有旧快照时所有文件都视为新增"""
    if previous is None:
        return SnapshotDelta(tuple(current.paths()), (), ())
    added = []
    modified = []
    for source in current:
        old = previous.get(source.path)
        if old is None:
            added.append(source.path)
        elif source.mtime > old.mtime:
            modified.append(source.path)
    removed = [path for path in previous.paths() if path not in current]
    return SnapshotDelta(tuple(added), tuple(modified), tuple(removed))


class ChangeMonitor:
    """
    源文件变化检测器

    只保存上一次检查时的快照，每次检查后替换它，因此结果只反映两次检查之间的变化。
    第一次检查时没有旧快照，返回所有文件。不支持多线程同时调用。
    """

    def __init__(self, source_dir, extension=DEFAULT_SOURCE_EXTENSION, scanner=scan):
        self.source_dir = source_dir
        self.extension = extension
        self.scanner = scanner
        self._baseline: Optional[FileSetSnapshot] = None

    @property
    def armed(self):
        return self._baseline is not None

    def compute_changes(self) -> SnapshotDelta:
        current = self.scanner(self.source_dir, self.extension)
        delta = diff_snapshots(self._baseline, current)
        self._baseline = current
        return delta

    def compute_delta(self) -> Set[str]:
        """返回自上次检查以来新增或修改的相对路径"""
        return self.compute_changes().changed

    def prime(self):
        """记录当前状态作为基准，不报告变化"""
        self._baseline = self.scanner(self.source_dir, self.extension)


class WatchLoop:
    """
    监控循环

    每隔 poll_time 毫秒检查一次变化，有变化时执行一次增量构建。
    cancel() 或 Ctrl+C 会打断等待并正常退出。
    """

    RUNNING = 'running'
    STOPPED = 'stopped'

    def __init__(self, monitor, orchestrator, log, poll_time=DEFAULT_POLL_TIME):
        self.monitor = monitor
        self.orchestrator = orchestrator
        self.log = log
        self.poll_time = poll_time
        self.state = self.RUNNING
        self._stop_event = threading.Event()

    def cancel(self):
        self._stop_event.set()

    def tick(self):
        """检查一次变化，返回本次构建的 BuildReport；没有变化时返回 None"""
        try:
            delta = self.monitor.compute_changes()
        except BuildIOError as e:
            # 源目录暂时不可读时保留旧的基准快照，下次轮询再试
            self.log.error(f"❌ 检查源文件变化失败: {e}")
            return None
        for path in delta.removed:
            self.log.warning(f"🗑️  文件已删除: {path}")
        if not delta.changed:
            return None
        for path in sorted(delta.changed):
            self.log.info(f"📝 检测到文件变化: {path}")
        # 变化只决定是否构建，具体编译哪些文件仍由时间戳判断
        try:
            return self.orchestrator.build(check_timestamp=True)
        except BuildIOError as e:
            self.log.error(f"❌ 重新构建失败: {e}")
            return None

    def run(self, initial_build=True, check_timestamp=False):
        """先执行一次完整构建，然后进入轮询，直到被取消"""
        try:
            self.monitor.prime()
            if initial_build:
                self.orchestrator.build(check_timestamp=check_timestamp)

            self.orchestrator.watching = True
            self.log.info(
                f"Waiting for changes to {self.monitor.source_dir} polling every {self.poll_time} millis"
            )
            while not self._stop_event.wait(self.poll_time / 1000.0):
                self.tick()
        except KeyboardInterrupt:
            self.log.info("Caught interrupt, quitting.")
        finally:
            self.state = self.STOPPED
