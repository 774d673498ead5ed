import time
from collections.abc import Iterable
from typing import Final

from .entry_types import FALLBACK_ICON, CatalogueEntry, SearchResult

EXACT_NAME_BONUS: Final[int] = 100_000
EXACT_KEYWORD_BONUS: Final[int] = 90_000
EXACT_CATEGORY_BONUS: Final[int] = 80_000

RECENCY_BASE: Final[int] = 10_000
RECENCY_DIVISOR: Final[int] = 10
USE_COUNT_WEIGHT: Final[int] = 20
USE_COUNT_CAP: Final[int] = 200
ICON_BONUS: Final[int] = 1_000
RUNNING_PENALTY: Final[int] = 1_000
ACTION_PENALTY: Final[int] = 100


def usage_bonus(count: int) -> int:
    return min(count * USE_COUNT_WEIGHT, USE_COUNT_CAP)


def is_running(entry: CatalogueEntry, running_classes: Iterable[str]) -> bool:
    """Checks whether any active window class occurs in the entry's name or exec."""
    name = entry.name.lower()
    command = entry.exec.lower()
    for window_class in running_classes:
        cls = window_class.strip().lower()
        if cls and (cls in name or cls in command):
            return True
    return False


def calculate_bonus_score(
    entry: CatalogueEntry,
    running_classes: Iterable[str] = (),
    now: int | None = None,
) -> int:
    """Computes the recency/frequency/icon/running bonus for an entry.

    With a usage record the score decays by one point per ten seconds since the
    last launch, bottoming out at zero, plus a capped use-count bonus. Without a
    record only the capped use-count bonus applies.
    """
    if entry.last_used is not None:
        if now is None:
            now = int(time.time())
        elapsed = max(0, now - entry.last_used)
        score = max(0, RECENCY_BASE - elapsed // RECENCY_DIVISOR)
        score += usage_bonus(entry.launch_count)
    else:
        score = usage_bonus(entry.launch_count)

    if entry.icon != FALLBACK_ICON:
        score += ICON_BONUS
    if is_running(entry, running_classes):
        score -= RUNNING_PENALTY
    return score


def result_sort_key(result: SearchResult) -> tuple[int, str, str]:
    """Score descending, then case-insensitive name for a stable order."""
    name = result.entry.name
    return (-result.score, name.casefold(), name)


def rank(results: list[SearchResult], max_results: int) -> list[SearchResult]:
    return sorted(results, key=result_sort_key)[:max_results]
