from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from logly import logger
from PySide6.QtCore import QObject, QRunnable, Signal


class SearchDispatchError(OSError):
    """Raised through a task's future when the dispatched work itself failed."""


class TaskSignals(QObject):
    """Signals emitted by `CallableTask`; kept on a QObject since QRunnable has none."""

    finished = Signal(int, object)
    failed = Signal(int, str)


class CallableTask(QRunnable):
    """Runs a callable on a `QThreadPool` worker and resolves a future once.

    The result is delivered both through `future` and the `finished` signal,
    tagged with `job_id` so receivers can discard stale replies.
    """

    def __init__(self, fn: Callable[[], Any], job_id: int = 0, label: str = ""):
        super().__init__()
        self._fn = fn
        self._job_id = job_id
        self._label = label or getattr(fn, "__name__", "task")
        self.future: Future = Future()
        self.signals = TaskSignals()

    @property
    def job_id(self) -> int:
        return self._job_id

    def run(self):
        """Executes the callable and publishes its result."""
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self._fn()
        except Exception as e:
            logger.exception(f"Task failed job={self._job_id} label={self._label}")
            error = SearchDispatchError(f"{self._label} failed: {e}")
            self.future.set_exception(error)
            self.signals.failed.emit(self._job_id, str(error))
            return

        self.future.set_result(result)
        self.signals.finished.emit(self._job_id, result)
