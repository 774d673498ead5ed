import queue
import threading
from collections.abc import Callable

from logly import logger

from quicklaunch.core.entry_types import UsageRecord
from quicklaunch.core.usage_store import UsageStore

_STOP = object()


class LaunchRecorder:
    """Persists launch events on a single background consumer thread.

    `submit` never blocks the caller. The queue is bounded; when it is full the
    event is dropped and logged.
    """

    def __init__(
        self,
        store: UsageStore,
        maxsize: int = 64,
        on_recorded: Callable[[str, UsageRecord], None] | None = None,
    ):
        self._store = store
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._on_recorded = on_recorded
        self._stopped = False
        self._thread = threading.Thread(
            target=self._drain, name="launch-recorder", daemon=True
        )
        self._thread.start()

    def submit(self, name: str) -> bool:
        """Queues a launch of `name` for persistence.

        Returns:
            False if the recorder is stopped or the queue is full.
        """
        if self._stopped:
            logger.warning(f"Launch recorder stopped, dropping launch name={name}")
            return False
        try:
            self._queue.put_nowait(name)
        except queue.Full:
            logger.warning(f"Launch queue full, dropping launch name={name}")
            return False
        return True

    def pending(self) -> int:
        return self._queue.qsize()

    def flush(self) -> None:
        """Blocks until every queued launch has been processed."""
        self._queue.join()

    def shutdown(self, drain: bool = True, timeout: float | None = None) -> None:
        """Stops the consumer thread.

        Args:
            drain: Persist queued launches before stopping. Otherwise they are
                discarded.
            timeout: Maximum seconds to wait for the thread.
        """
        if self._stopped:
            return
        self._stopped = True
        if not drain:
            while True:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    break
                self._queue.task_done()
        self._queue.put(_STOP)
        self._thread.join(timeout)

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._record(item)
            finally:
                self._queue.task_done()

    def _record(self, name: str) -> None:
        try:
            record = self._store.record_launch(name)
        except OSError as e:
            logger.error(f"Failed to persist launch name={name} error={e}")
            return
        logger.info(f"Recorded launch name={name} count={record.count}")
        if self._on_recorded is None:
            return
        try:
            self._on_recorded(name, record)
        except Exception:
            logger.exception(f"Launch callback failed name={name}")
