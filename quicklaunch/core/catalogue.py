from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path

from logly import logger
from PySide6.QtCore import QReadWriteLock

from .desktop_entry_parser import parse_desktop_file
from .entry_types import CatalogueEntry
from .usage_store import UsageStore

DescriptorParser = Callable[[Path], CatalogueEntry | None]


class Catalogue:
    """In-memory application catalogue keyed by entry name.

    Readers share the catalogue concurrently; a reload swap or a launch update
    takes the lock exclusively. A reload builds the new mapping outside the lock
    and replaces the previous one in a single step.
    """

    def __init__(
        self,
        usage_store: UsageStore,
        parser: DescriptorParser = parse_desktop_file,
        max_workers: int = 4,
    ):
        self._usage_store = usage_store
        self._parser = parser
        self._max_workers = max_workers
        self._lock = QReadWriteLock()
        self._entries: dict[str, CatalogueEntry] = {}

    def __len__(self) -> int:
        with self.read() as entries:
            return len(entries)

    @contextmanager
    def read(self) -> Iterator[dict[str, CatalogueEntry]]:
        """Holds the read lock while the caller inspects the entries.

        Callers must not mutate the yielded mapping or its entries.
        """
        self._lock.lockForRead()
        try:
            yield self._entries
        finally:
            self._lock.unlock()

    def get(self, name: str) -> CatalogueEntry | None:
        """Returns a copy of the entry named `name`, if present."""
        with self.read() as entries:
            entry = entries.get(name)
            return entry.copy() if entry is not None else None

    def _scan_directory(self, directory: Path) -> list[CatalogueEntry]:
        try:
            paths = sorted(directory.glob("*.desktop"))
        except OSError as e:
            logger.debug(f"Cannot scan directory path={directory} error={e}")
            return []

        entries: list[CatalogueEntry] = []
        for path in paths:
            entry = self._parser(path)
            if entry is not None:
                entries.append(entry)
        return entries

    def reload(self, scan_dirs: Sequence[Path]) -> int:
        """Re-derives the catalogue from `scan_dirs`.

        Directories are scanned in parallel and merged in list order, so a later
        directory wins when two descriptors share a name.

        Returns:
            The number of entries in the new catalogue.
        """
        logger.info(f"Reloading catalogue from {len(scan_dirs)} directories")
        usage = self._usage_store.load()

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            scanned = list(pool.map(self._scan_directory, [Path(d) for d in scan_dirs]))

        entries: dict[str, CatalogueEntry] = {}
        for batch in scanned:
            for entry in batch:
                record = usage.get(entry.name)
                if record is not None:
                    entry.launch_count = record.count
                    entry.last_used = record.last_used
                entries[entry.name] = entry

        self._lock.lockForWrite()
        try:
            self._entries = entries
        finally:
            self._lock.unlock()

        logger.info(f"Loaded {len(entries)} applications")
        return len(entries)

    def update_after_launch(self, name: str, count: int, timestamp: int) -> bool:
        """Updates the usage fields of one entry in place.

        Returns:
            True if the entry exists.
        """
        self._lock.lockForWrite()
        try:
            entry = self._entries.get(name)
            if entry is None:
                return False
            entry.launch_count = count
            entry.last_used = timestamp
            return True
        finally:
            self._lock.unlock()
