import time
from collections.abc import Callable
from enum import Enum

from logly import logger

from .catalogue import Catalogue
from .config import ResolvedSearchConfig
from .entry_types import SearchResult
from .path_search import FileEntryFactory, path_mode
from .search_modes import BinaryProbe, Evaluator, browse_mode, fuzzy_mode

PATH_PREFIXES = ("~", "$", "/")

WindowProbe = Callable[[], list[str]]


class QueryMode(Enum):
    BROWSE = "browse"
    PATH = "path"
    FUZZY = "fuzzy"


def classify_query(query: str) -> QueryMode:
    """Picks the search mode from the first character of the query."""
    if not query:
        return QueryMode.BROWSE
    if query.startswith(PATH_PREFIXES):
        return QueryMode.PATH
    return QueryMode.FUZZY


class QueryRouter:
    """Dispatches a query to exactly one search mode over a catalogue.

    External probes are injected so the router itself performs no process or
    filesystem calls beyond what the probes do.
    """

    def __init__(
        self,
        catalogue: Catalogue,
        make_file_entry: FileEntryFactory,
        find_binary: BinaryProbe | None = None,
        evaluate: Evaluator | None = None,
        window_classes: WindowProbe | None = None,
    ):
        self._catalogue = catalogue
        self._make_file_entry = make_file_entry
        self._find_binary = find_binary
        self._evaluate = evaluate
        self._window_classes = window_classes

    def _running_classes(self) -> list[str]:
        if self._window_classes is None:
            return []
        return self._window_classes()

    def run(self, query: str, config: ResolvedSearchConfig) -> list[SearchResult]:
        """Runs `query` synchronously and returns at most `max_results` results."""
        mode = classify_query(query)
        started = time.perf_counter()

        if mode is QueryMode.PATH:
            results = path_mode(query, config, self._make_file_entry)
        else:
            running = self._running_classes()
            now = int(time.time())
            with self._catalogue.read() as entries:
                if mode is QueryMode.BROWSE:
                    results = browse_mode(entries.values(), config, running, now)
                else:
                    results = fuzzy_mode(
                        entries.values(),
                        query,
                        config,
                        running,
                        now,
                        find_binary=self._find_binary,
                        evaluate=self._evaluate,
                    )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Query finished mode={mode.value} results={len(results)} elapsed={elapsed_ms:.1f}ms"
        )
        return results
