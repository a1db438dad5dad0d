"""
Relevance heuristic for search results.

A linear score. Phrase hits and word occurrences add points, and short
text with a phrase hit earns a bonus. The weights are shared by every
entity kind.
"""

from chatprompt.core.settings import (
    EMPTY_QUERY_SCORE,
    EXACT_PHRASE_WEIGHT,
    SHORT_TEXT_BONUS,
    SHORT_TEXT_THRESHOLD,
    WORD_OCCURRENCE_WEIGHT,
)


def calculate_relevance_score(text: str, query: str) -> float:
    """
    Score how well text matches query.

    Args:
        text: The text blob of a record (title, description, content...)
        query: The raw search query

    Returns:
        EMPTY_QUERY_SCORE for an empty query, otherwise the sum of the
        phrase, word and short-text components.
    """
    if not query:
        return EMPTY_QUERY_SCORE

    lower_text = text.lower()
    lower_query = query.lower()
    phrase_hit = lower_query in lower_text

    score = 0
    if phrase_hit:
        score += EXACT_PHRASE_WEIGHT

    for word in lower_query.split():
        score += lower_text.count(word) * WORD_OCCURRENCE_WEIGHT

    if len(text) < SHORT_TEXT_THRESHOLD and phrase_hit:
        score += SHORT_TEXT_BONUS

    return score
