"""
Sentiment & Energy Scoring

Heuristic polarity and activity scores from token hits against two fixed,
lexically disjoint term lists. Both scores are recomputed from scratch on
every call; nothing is carried between corpora.
"""

from __future__ import annotations
from typing import FrozenSet, Sequence
import math


POSITIVE_TERMS: FrozenSet[str] = frozenset({
    'great', 'good', 'awesome', 'excited', 'optimistic', 'love', 'amazing',
    'win', 'growth', 'positive', 'up', 'better', 'improve', 'success',
    'increase',
})

NEGATIVE_TERMS: FrozenSet[str] = frozenset({
    'bad', 'problem', 'issue', 'concern', 'stuck', 'risk', 'down', 'decline',
    'worse', 'fail', 'fear', 'uncertain', 'hard', 'difficult',
})


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (0.5 → 1, -0.5 → 0)."""
    return int(math.floor(value + 0.5))


def count_hits(tokens: Sequence[str], terms: FrozenSet[str]) -> int:
    """Occurrences of any term, repeats counted each time."""
    return sum(1 for token in tokens if token in terms)


def score_sentiment(
    tokens: Sequence[str],
    positive_terms: FrozenSet[str] = POSITIVE_TERMS,
    negative_terms: FrozenSet[str] = NEGATIVE_TERMS,
    floor: int = 4
) -> float:
    """
    Polarity in [-1, 1].

    The denominator never drops below `floor`, which dampens swings on
    very short inputs.
    """
    if not tokens:
        return 0.0
    positive_hits = count_hits(tokens, positive_terms)
    negative_hits = count_hits(tokens, negative_terms)
    return clamp(
        (positive_hits - negative_hits) / max(len(tokens), floor),
        -1.0,
        1.0
    )


def score_energy(
    token_count: int,
    sentiment: float,
    token_divisor: float = 45.0,
    sentiment_weight: float = 0.45
) -> float:
    """Activity in [0, 1]: corpus length plus sentiment magnitude."""
    if token_count <= 0:
        return 0.0
    return clamp(
        token_count / token_divisor + abs(sentiment) * sentiment_weight,
        0.0,
        1.0
    )
