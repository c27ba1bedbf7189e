"""
Insight Builder

Maps clusters into ranked display cards. Dynamic cards always come first;
the fixed baseline cards pad out whatever slots remain.

The per-index terms in pulse and drift (i*0.1, i*0.05) are fixed display
tuning constants and are pinned by tests.
"""

from __future__ import annotations
from typing import Tuple

from ..contracts.events import Analysis, Insight
from .scoring import clamp


BASELINE_INSIGHTS: Tuple[Insight, ...] = (
    Insight(
        insight_id="baseline-velocity",
        label="Signal Velocity",
        detail="Live trendline for how quickly the conversation is evolving.",
        pulse=0.48,
        delta=0.06,
    ),
    Insight(
        insight_id="baseline-composure",
        label="Agent Composure",
        detail="Ambient calm from the voice agent's prosodic fingerprint.",
        pulse=0.62,
        delta=-0.04,
    ),
    Insight(
        insight_id="baseline-focus",
        label="Focus Field",
        detail="Dominant node describing the most coherent cluster in view.",
        pulse=0.55,
        delta=0.08,
    ),
)

MAX_INSIGHTS = 5


def build_insights(analysis: Analysis, limit: int = MAX_INSIGHTS) -> Tuple[Insight, ...]:
    """Ranked insight cards for an analysis, capped at `limit`."""
    if not analysis.keywords:
        return BASELINE_INSIGHTS

    dynamic = tuple(
        Insight(
            insight_id=f"cluster-{cluster.label.lower()}",
            label=f"{cluster.label} Signal",
            detail=cluster.summary,
            pulse=clamp(0.35 + cluster.score * 0.55 + index * 0.1, 0.2, 0.95),
            delta=clamp(
                analysis.sentiment * 0.6 + cluster.score * 0.3 - index * 0.05,
                -0.4,
                0.4
            ),
        )
        for index, cluster in enumerate(analysis.clusters)
    )

    return (dynamic + BASELINE_INSIGHTS)[:limit]
