import os
from collections.abc import Callable
from typing import Final

from logly import logger

from .config import ResolvedSearchConfig
from .entry_types import CatalogueEntry, SearchResult
from .fuzzy import fuzzy_match

PARENT_DIR_SCORE: Final[int] = 1_000_000
FOLDER_SCORE: Final[int] = 2_000
FILE_SCORE: Final[int] = 1_000

FileEntryFactory = Callable[[str], CatalogueEntry | None]


def expand_path(query: str) -> str:
    """Expands `~` and `$VAR` the way a shell would."""
    return os.path.expandvars(os.path.expanduser(query))


def split_query_path(query: str) -> tuple[str, str]:
    """Splits a path query into the directory to list and an in-directory filter.

    An existing directory is listed whole. Otherwise its parent is listed and the
    last segment becomes the filter.
    """
    expanded = expand_path(query)
    if os.path.isdir(expanded):
        return expanded, ""
    directory, _, needle = expanded.rpartition("/")
    return directory or "/", needle


def _parent_entry(directory: str, make_entry: FileEntryFactory) -> CatalogueEntry | None:
    path = os.path.abspath(directory)
    parent = os.path.dirname(path)
    if parent == path:
        return None
    entry = make_entry(parent)
    if entry is None:
        return None
    return entry.copy(name="..", score_boost=PARENT_DIR_SCORE)


def _is_dir(dir_entry: os.DirEntry) -> bool:
    try:
        return dir_entry.is_dir()
    except OSError:
        return False


def path_mode(
    query: str,
    config: ResolvedSearchConfig,
    make_entry: FileEntryFactory,
) -> list[SearchResult]:
    """Lists a directory for a path-shaped query.

    Candidates are ranked on the directory listing alone; `make_entry` is only
    called until `max_results` entries are filled, so a large directory does not
    trigger a lookup per file.

    Args:
        query: Raw query starting with `~`, `$` or `/`.
        config: Search configuration (`show_hidden`, `max_results`).
        make_entry: Builds a file entry for a path, or None to omit it.

    Returns:
        `..` first when the directory has a parent, then the directory's
        entries ordered by score and case-insensitive name.
    """
    directory, needle = split_query_path(query)
    try:
        with os.scandir(directory) as it:
            candidates: list[tuple[int, str]] = []
            for dir_entry in it:
                name = dir_entry.name
                if name.startswith(".") and not config.show_hidden:
                    continue
                match = 0
                if needle:
                    match = fuzzy_match(name, needle)
                    if match is None:
                        continue
                base = FOLDER_SCORE if _is_dir(dir_entry) else FILE_SCORE
                candidates.append((base + match, name))
    except OSError as e:
        logger.debug(f"Cannot list directory path={directory} error={e}")
        return []

    results: list[SearchResult] = []
    parent = _parent_entry(directory, make_entry)
    if parent is not None:
        results.append(SearchResult(entry=parent, score=PARENT_DIR_SCORE))

    candidates.sort(key=lambda c: (-c[0], c[1].casefold(), c[1]))
    for score, name in candidates:
        if len(results) >= config.max_results:
            break
        entry = make_entry(os.path.join(directory, name))
        if entry is not None:
            results.append(SearchResult(entry=entry, score=score))
    return results[: config.max_results]
