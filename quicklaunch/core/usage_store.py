import json
import os
import threading
import time
from pathlib import Path

from logly import logger

from .entry_types import UsageRecord


def default_heatmap_path() -> Path:
    """Returns `$XDG_DATA_HOME/quicklaunch/heatmap.json`."""
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "quicklaunch" / "heatmap.json"


def _parse_record(value: object) -> UsageRecord | None:
    if not isinstance(value, dict):
        return None
    count = value.get("count")
    last_used = value.get("last_used")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        return None
    if isinstance(last_used, bool) or not isinstance(last_used, int):
        return None
    return UsageRecord(count=count, last_used=last_used)


class UsageStore:
    """Persists per-entry launch counts ("heatmap") as a JSON file.

    The whole file is read, modified and rewritten on every launch. An in-process
    lock serializes the read-modify-write so concurrent launches in this process
    do not lose updates.
    """

    def __init__(self, path: Path | None = None):
        self._path = path or default_heatmap_path()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, UsageRecord]:
        """Loads the heatmap. A missing or corrupt file yields an empty mapping."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Cannot read heatmap path={self._path} error={e}")
            return {}

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt heatmap path={self._path} error={e}")
            return {}
        if not isinstance(data, dict):
            return {}

        records: dict[str, UsageRecord] = {}
        for name, value in data.items():
            record = _parse_record(value)
            if record is not None:
                records[str(name)] = record
        return records

    def record_launch(self, name: str, now: int | None = None) -> UsageRecord:
        """Increments the launch count for `name` and stamps the launch time.

        Raises:
            OSError: If the heatmap cannot be written.
        """
        if now is None:
            now = int(time.time())
        with self._lock:
            records = self.load()
            previous = records.get(name)
            record = UsageRecord(
                count=(previous.count if previous else 0) + 1, last_used=now
            )
            records[name] = record
            self._write(records)
        return record

    def _write(self, records: dict[str, UsageRecord]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            name: {"count": r.count, "last_used": r.last_used}
            for name, r in records.items()
        }
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False, sort_keys=True)
        os.replace(tmp_path, self._path)
