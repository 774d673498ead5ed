import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from logly import logger
from PySide6.QtCore import QObject, QThreadPool, Signal

from quicklaunch.application.launch_recorder import LaunchRecorder
from quicklaunch.core.catalogue import Catalogue
from quicklaunch.core.config import ResolvedSearchConfig
from quicklaunch.core.dmenu_filter import filter_lines
from quicklaunch.core.entry_types import CatalogueEntry, EntryKind, UsageRecord
from quicklaunch.core.query_router import QueryRouter
from quicklaunch.core.usage_store import UsageStore
from quicklaunch.infra.active_windows import active_window_classes
from quicklaunch.infra.calculator import evaluate_expression
from quicklaunch.infra.desktop_dirs import get_desktop_paths
from quicklaunch.infra.filesystem import create_file_entry, find_binary
from quicklaunch.infra.qt_tasks import CallableTask


class LauncherController(QObject):
    """Owns the catalogue and usage store and runs queries on a worker pool.

    Every request returns a future resolved exactly once and is also announced
    through a signal tagged with a monotonic job id; receivers drop replies whose
    id is not `latest_job_id`.
    """

    log = Signal(str)
    error = Signal(str)
    reloaded = Signal(int, object)  # job id, entry count
    searched = Signal(int, object)  # job id, list[SearchResult]
    filtered = Signal(int, object)  # job id, list[str]
    launch_recorded = Signal(str, int)  # name, persisted count

    def __init__(
        self,
        config: ResolvedSearchConfig | None = None,
        usage_store: UsageStore | None = None,
        scan_dirs: Sequence[Path] | None = None,
        router: QueryRouter | None = None,
        pool: QThreadPool | None = None,
        parent: QObject | None = None,
    ):
        """Initializes the controller.

        Args:
            config: Initial configuration snapshot.
            usage_store: Heatmap store. Defaults to the per-user heatmap file.
            scan_dirs: Descriptor directories. Defaults to the XDG locations.
            router: Query router. Defaults to one wired to the system probes.
            pool: Worker pool. Defaults to a dedicated pool.
            parent: Optional Qt parent object.
        """
        super().__init__(parent)
        self._config = config or ResolvedSearchConfig()
        self._usage_store = usage_store or UsageStore()
        self._scan_dirs = list(scan_dirs) if scan_dirs is not None else None
        self.catalogue = Catalogue(self._usage_store)
        self._router = router or QueryRouter(
            self.catalogue,
            make_file_entry=create_file_entry,
            find_binary=find_binary,
            evaluate=evaluate_expression,
            window_classes=active_window_classes,
        )
        self._pool = pool or QThreadPool(self)
        self._recorder = LaunchRecorder(
            self._usage_store, on_recorded=self._on_launch_persisted
        )
        self._tasks: dict[int, CallableTask] = {}
        self._active_job_id = 0

    @property
    def config(self) -> ResolvedSearchConfig:
        return self._config

    def set_config(self, config: ResolvedSearchConfig) -> None:
        """Replaces the configuration snapshot used by later queries."""
        self._config = config

    @property
    def latest_job_id(self) -> int:
        return self._active_job_id

    def reload_catalogue(self, scan_dirs: Sequence[Path] | None = None) -> Future:
        """Rebuilds the catalogue in the background.

        Returns:
            A future resolving to the number of loaded entries.
        """
        if scan_dirs is None:
            scan_dirs = self._scan_dirs if self._scan_dirs is not None else get_desktop_paths()
        dirs = list(scan_dirs)
        return self._start_task(
            lambda: self.catalogue.reload(dirs),
            label="reload",
            signal=self.reloaded,
        )

    def search(self, query: str) -> Future:
        """Runs `query` against the catalogue in the background.

        Returns:
            A future resolving to the ordered `SearchResult` list.
        """
        config = self._config
        return self._start_task(
            lambda: self._router.run(query, config),
            label=f"search {query!r}",
            signal=self.searched,
        )

    def filter_dmenu(self, query: str, lines: Sequence[str]) -> Future:
        """Filters caller-supplied lines in the background.

        Returns:
            A future resolving to the matching lines, best first.
        """
        config = self._config
        snapshot = list(lines)
        return self._start_task(
            lambda: filter_lines(query, snapshot, config),
            label=f"dmenu {query!r}",
            signal=self.filtered,
        )

    def record_launch(self, entry: CatalogueEntry) -> int:
        """Records a launch of `entry` and returns its new launch count.

        The in-memory catalogue is updated immediately; the heatmap write is
        queued. Only applications are tracked, other entries keep their count.
        """
        if entry.kind is not EntryKind.APPLICATION:
            return entry.launch_count

        current = self.catalogue.get(entry.name)
        base = max(entry.launch_count, current.launch_count if current else 0)
        count = base + 1
        self.catalogue.update_after_launch(entry.name, count, int(time.time()))
        self._recorder.submit(entry.name)
        self.log.emit(f"[launch] {entry.name} ({count})")
        return count

    def shutdown(self, drain: bool = True, timeout: float | None = 5.0) -> None:
        """Waits for running tasks and stops the launch recorder."""
        self._pool.waitForDone()
        self._tasks.clear()
        self._recorder.shutdown(drain=drain, timeout=timeout)

    def _start_task(
        self, fn: Callable[[], Any], label: str, signal: Any
    ) -> Future:
        self._active_job_id += 1
        job_id = self._active_job_id

        # Finished tasks are released here, on the owning thread.
        self._tasks = {
            jid: t for jid, t in self._tasks.items() if not t.future.done()
        }

        task = CallableTask(fn, job_id=job_id, label=label)
        task.setAutoDelete(False)
        task.signals.finished.connect(signal)
        task.signals.failed.connect(self._on_task_failed)

        self._tasks[job_id] = task
        logger.debug(f"Dispatching job={job_id} label={label}")
        self._pool.start(task)
        return task.future

    def _on_task_failed(self, job_id: int, message: str) -> None:
        self.error.emit(f"[error] job {job_id}: {message}")

    def _on_launch_persisted(self, name: str, record: UsageRecord) -> None:
        self.launch_recorded.emit(name, record.count)
