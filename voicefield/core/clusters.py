"""
Cluster Synthesis

Turns the top keywords into labeled topic records. Rank order is kept;
the position of a cluster only matters later, to the insight builder.
"""

from __future__ import annotations
from typing import Dict, Sequence, Tuple

from ..contracts.events import Cluster
from .scoring import clamp, round_half_up


SUMMARY_TEMPLATE = "Emerging signal around “{keyword}” with {percent}% clarity."


def capitalize(word: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    return word[:1].upper() + word[1:]


def synthesize_clusters(
    keywords: Sequence[str],
    frequency: Dict[str, int],
    token_count: int,
    energy: float,
    limit: int = 3,
    seed_weight: float = 2.0,
    energy_weight: float = 0.6
) -> Tuple[Cluster, ...]:
    """Build one Cluster per leading keyword, in rank order."""
    clusters = []
    for keyword in keywords[:limit]:
        score_seed = frequency.get(keyword, 1) / max(token_count, 1)
        score = clamp(score_seed * seed_weight + energy * energy_weight, 0.0, 1.0)
        clusters.append(Cluster(
            label=capitalize(keyword),
            score=score,
            summary=SUMMARY_TEMPLATE.format(
                keyword=keyword,
                percent=round_half_up(score * 100)
            )
        ))
    return tuple(clusters)
