from collections.abc import Sequence

from .config import ResolvedSearchConfig
from .fuzzy import fuzzy_match


def filter_lines(
    query: str, lines: Sequence[str], config: ResolvedSearchConfig
) -> list[str]:
    """Filters caller-supplied lines by fuzzy match quality.

    An empty query keeps the input order. When nothing matches and
    `dmenu.allow_invalid` is set, the query itself is returned so free-form input
    can be selected.
    """
    if not query:
        return list(lines[: config.max_results])

    case_sensitive = config.dmenu.case_sensitive
    scored: list[tuple[int, int, str]] = []
    for index, line in enumerate(lines):
        score = fuzzy_match(line, query, case_sensitive=case_sensitive)
        if score is not None:
            scored.append((-score, index, line))

    scored.sort()
    matches = [line for _, _, line in scored[: config.max_results]]
    if not matches and config.dmenu.allow_invalid and config.max_results > 0:
        return [query]
    return matches
