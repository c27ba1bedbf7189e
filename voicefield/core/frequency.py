"""
Frequency & Keyword Extraction

Ranks tokens by occurrence count. Ties keep first-seen order: the count
table preserves insertion order and the descending sort is stable.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Tuple


def count_tokens(tokens: Iterable[str]) -> Dict[str, int]:
    """Build token → count, keyed in first-seen order."""
    frequency: Dict[str, int] = {}
    for token in tokens:
        frequency[token] = frequency.get(token, 0) + 1
    return frequency


def rank_tokens(frequency: Dict[str, int]) -> List[Tuple[str, int]]:
    """All (token, count) pairs, most frequent first."""
    return sorted(frequency.items(), key=lambda item: -item[1])


def extract_keywords(frequency: Dict[str, int], limit: int = 6) -> Tuple[str, ...]:
    """Top `limit` distinct tokens by count, descending."""
    if limit < 0:
        raise ValueError("limit must be non-negative")
    return tuple(token for token, _ in rank_tokens(frequency)[:limit])
