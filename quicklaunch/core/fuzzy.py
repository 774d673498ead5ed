from typing import Final

from rapidfuzz import fuzz
from rapidfuzz.distance import LCSseq

PREFIX_BONUS: Final[int] = 25
WORD_START_BONUS: Final[int] = 10


def is_smart_case_sensitive(pattern: str) -> bool:
    """Smart case: the match is case-sensitive only if the pattern has uppercase."""
    return any(ch.isupper() for ch in pattern)


def fuzzy_match(
    choice: str, pattern: str, case_sensitive: bool | None = None
) -> int | None:
    """Scores `pattern` as a subsequence of `choice`.

    Every character of the pattern must appear in the choice in order. The score
    is the best partial alignment ratio (0-100) plus bonuses when the pattern is a
    prefix of the choice or of one of its words.

    Args:
        choice: Candidate string.
        pattern: User query.
        case_sensitive: Force case handling. None applies smart case.

    Returns:
        The match score, or None if the pattern is not a subsequence.
    """
    if not pattern:
        return 0
    if case_sensitive is None:
        case_sensitive = is_smart_case_sensitive(pattern)
    if not case_sensitive:
        choice = choice.lower()
        pattern = pattern.lower()

    if len(pattern) > len(choice):
        return None
    if LCSseq.similarity(pattern, choice) < len(pattern):
        return None

    score = round(fuzz.partial_ratio(pattern, choice))
    if choice.startswith(pattern):
        score += PREFIX_BONUS
    elif any(word.startswith(pattern) for word in choice.split()):
        score += WORD_START_BONUS
    return score
