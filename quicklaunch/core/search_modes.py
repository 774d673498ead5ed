import time
from collections.abc import Callable, Iterable
from typing import Final
from urllib.parse import quote_plus

from .config import ResolvedSearchConfig, WebSearchConfig
from .entry_types import CatalogueEntry, EntryKind, SearchResult
from .fuzzy import fuzzy_match
from .scoring import (
    ACTION_PENALTY,
    EXACT_CATEGORY_BONUS,
    EXACT_KEYWORD_BONUS,
    EXACT_NAME_BONUS,
    calculate_bonus_score,
    rank,
)

CALCULATOR_SCORE: Final[int] = 5_000
WEB_SEARCH_SCORE: Final[int] = -1_000_000
CALCULATOR_ICON: Final[str] = "accessories-calculator"
WEB_SEARCH_ICON: Final[str] = "web-browser"

# Queries the picker interprets itself; never offered as a web search.
RESERVED_QUERIES: Final[frozenset[str]] = frozenset(
    {".", "..", "exit", "quit", "reload"}
)

BinaryProbe = Callable[[str], CatalogueEntry | None]
Evaluator = Callable[[str], str]


def browse_mode(
    entries: Iterable[CatalogueEntry],
    config: ResolvedSearchConfig,
    running_classes: Iterable[str] = (),
    now: int | None = None,
) -> list[SearchResult]:
    """Lists installed applications for an empty query.

    Recently/frequently used entries come first, ordered by bonus score and then by
    last launch; the rest follow alphabetically without a score.
    """
    if now is None:
        now = int(time.time())
    running = list(running_classes)

    known: list[SearchResult] = []
    unknown: list[CatalogueEntry] = []
    for entry in entries:
        if entry.kind is not EntryKind.APPLICATION or not entry.path.endswith(".desktop"):
            continue
        if entry.last_used is not None:
            known.append(
                SearchResult(entry=entry, score=calculate_bonus_score(entry, running, now))
            )
        else:
            unknown.append(entry)

    # Ties, such as entries past the recency window, go to the latest launch.
    known.sort(
        key=lambda r: (-r.score, -(r.entry.last_used or 0), r.entry.name.casefold(), r.entry.name)
    )
    unknown.sort(key=lambda e: (e.name.casefold(), e.name))

    ordered = known + [SearchResult(entry=e, score=0) for e in unknown]
    return [
        SearchResult(entry=r.entry.copy(), score=r.score)
        for r in ordered[: config.max_results]
    ]


def _primary_match(entry: CatalogueEntry, query: str, folded: str) -> int | None:
    if entry.name.lower() == folded:
        return EXACT_NAME_BONUS
    if any(k.lower() == folded for k in entry.keywords):
        return EXACT_KEYWORD_BONUS
    if any(c.lower() == folded for c in entry.categories):
        return EXACT_CATEGORY_BONUS

    score = fuzzy_match(entry.name, query)
    if score is not None:
        return score

    for surface in (entry.keywords, entry.categories):
        for text in surface:
            score = fuzzy_match(text, query)
            if score is not None:
                return score
    return None


def action_label(entry_name: str, action_name: str) -> str:
    return f"{entry_name} - {action_name}"


def _match_actions(entry: CatalogueEntry, query: str, bonus: int) -> list[SearchResult]:
    results: list[SearchResult] = []
    folded = query.lower()
    for action in entry.actions:
        label = action_label(entry.name, action.name)
        score = fuzzy_match(label, query)
        if score is None and folded in label.lower():
            score = 0
        if score is None:
            continue
        results.append(
            SearchResult(
                entry=entry.copy(
                    name=label,
                    exec=action.exec,
                    icon=action.icon or entry.icon,
                    actions=[],
                ),
                score=bonus + score - ACTION_PENALTY,
            )
        )
    return results


def build_calculator_entry(expression: str, value: str) -> CatalogueEntry:
    return CatalogueEntry(
        name=value,
        description=f"{expression.strip()} = {value}",
        exec=f'wl-copy "{value}"',
        icon=CALCULATOR_ICON,
        kind=EntryKind.FILE,
        score_boost=CALCULATOR_SCORE,
    )


def web_search_url(query: str, web: WebSearchConfig) -> tuple[str, str]:
    """Resolves the search term and URL for a query.

    `prefix:term` uses the configured prefix URL when `prefix` is known; anything
    else searches the full query with the default engine.

    Returns:
        A `(term, url)` tuple.
    """
    prefix, sep, rest = query.partition(":")
    template = ""
    term = query
    if sep:
        match = web.find_prefix(prefix.strip())
        if match is not None:
            template = match.url
            term = rest.strip()
    if not template:
        template = web.engine.resolve_url()

    encoded = quote_plus(term)
    if "{}" in template:
        return term, template.replace("{}", encoded)
    return term, template + encoded


def build_web_search_entry(query: str, web: WebSearchConfig) -> CatalogueEntry:
    term, url = web_search_url(query, web)
    return CatalogueEntry(
        name=f'Search the web for "{term}"',
        description=url,
        path=url,
        exec=f'xdg-open "{url}"',
        icon=WEB_SEARCH_ICON,
        kind=EntryKind.FILE,
        score_boost=WEB_SEARCH_SCORE,
    )


def should_offer_web_search(query: str, web: WebSearchConfig) -> bool:
    folded = query.strip().lower()
    return web.enabled and bool(folded) and folded not in RESERVED_QUERIES


def fuzzy_mode(
    entries: Iterable[CatalogueEntry],
    query: str,
    config: ResolvedSearchConfig,
    running_classes: Iterable[str] = (),
    now: int | None = None,
    find_binary: BinaryProbe | None = None,
    evaluate: Evaluator | None = None,
) -> list[SearchResult]:
    """Ranks catalogue entries against a non-path query.

    Each entry gets at most one primary match (exact name, exact keyword, exact
    category, fuzzy name, then fuzzy keyword/category). Matching actions are added
    as separate results. Synthetic entries follow: a binary from the system
    binary directory, the calculator and the web search fallback.
    """
    if now is None:
        now = int(time.time())
    running = list(running_classes)
    folded = query.lower()

    results: list[SearchResult] = []
    exact_name_seen = False
    for entry in entries:
        bonus: int | None = None
        match = _primary_match(entry, query, folded)
        if match is not None:
            bonus = calculate_bonus_score(entry, running, now)
            results.append(SearchResult(entry=entry.copy(), score=match + bonus))
            if match == EXACT_NAME_BONUS:
                exact_name_seen = True

        if config.show_actions and entry.actions:
            if bonus is None:
                bonus = calculate_bonus_score(entry, running, now)
            results.extend(_match_actions(entry, query, bonus))

    if not exact_name_seen and find_binary is not None:
        binary = find_binary(query.strip())
        if binary is not None:
            results.append(SearchResult(entry=binary, score=binary.score_boost))

    if not results and config.calculator_enabled and evaluate is not None:
        if query[:1].isdigit():
            value = evaluate(query)
            results.append(
                SearchResult(
                    entry=build_calculator_entry(query, value), score=CALCULATOR_SCORE
                )
            )

    web = config.web_search
    if should_offer_web_search(query, web) and (not results or web.always_show):
        results.append(
            SearchResult(entry=build_web_search_entry(query.strip(), web), score=WEB_SEARCH_SCORE)
        )

    return rank(results, config.max_results)
