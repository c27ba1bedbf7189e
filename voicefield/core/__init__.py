"""
Core Analysis Layer

RESPONSIBILITY: Derive keywords, sentiment, energy, clusters, insights and
the reply from the compiled corpus
ALLOWED INPUTS: Corpus string, latest fragment text
OUTPUTS: Analysis, Tuple[Insight, ...], reply string (all immutable)

WHAT THIS LAYER MUST NOT DO:
============================
- Hold session state or counters between calls
- Update an earlier Analysis incrementally (always recompute from the corpus)
- Read the clock

PIPELINE:
=========
corpus → LexicalNormalizer → token counts → keywords
                           → sentiment → energy → clusters
Analysis → insights
(latest fragment, Analysis) → reply
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from ..contracts.events import Analysis, Insight
from ..normalization import LexicalNormalizer, NormalizationConfig
from .frequency import count_tokens, extract_keywords
from .scoring import (
    POSITIVE_TERMS, NEGATIVE_TERMS, score_sentiment, score_energy
)
from .clusters import synthesize_clusters
from .insights import BASELINE_INSIGHTS, MAX_INSIGHTS, build_insights
from .reply import generate_reply


@dataclass(frozen=True)
class AnalysisConfig:
    """Tuning constants for the lexical heuristic."""
    max_keywords: int = 6
    cluster_count: int = 3
    positive_terms: FrozenSet[str] = field(default=POSITIVE_TERMS)
    negative_terms: FrozenSet[str] = field(default=NEGATIVE_TERMS)
    sentiment_floor: int = 4
    energy_token_divisor: float = 45.0
    energy_sentiment_weight: float = 0.45
    cluster_seed_weight: float = 2.0
    cluster_energy_weight: float = 0.6

    def __post_init__(self):
        if self.positive_terms & self.negative_terms:
            raise ValueError("positive and negative term lists must be disjoint")
        if self.sentiment_floor < 1:
            raise ValueError("sentiment_floor must be at least 1")
        if self.energy_token_divisor <= 0:
            raise ValueError("energy_token_divisor must be positive")


@dataclass(frozen=True)
class InsightConfig:
    """Configuration for the insight builder."""
    max_insights: int = MAX_INSIGHTS


class AnalysisEngine:
    """
    Pure analysis over a whole corpus.

    GUARANTEES:
    ===========
    1. analyze(corpus) is deterministic
    2. No hidden state between calls
    3. Total: every string, including "", has a defined Analysis
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        normalization: Optional[NormalizationConfig] = None,
        insights: Optional[InsightConfig] = None
    ):
        self._config = config or AnalysisConfig()
        self._normalizer = LexicalNormalizer(normalization)
        self._insight_config = insights or InsightConfig()

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def analyze(self, corpus: str) -> Analysis:
        """Full analysis of the corpus."""
        tokens = self._normalizer.tokenize(corpus)

        if not tokens:
            return Analysis.empty()

        frequency = count_tokens(tokens)
        keywords = extract_keywords(frequency, self._config.max_keywords)

        sentiment = score_sentiment(
            tokens,
            self._config.positive_terms,
            self._config.negative_terms,
            self._config.sentiment_floor
        )
        energy = score_energy(
            len(tokens),
            sentiment,
            self._config.energy_token_divisor,
            self._config.energy_sentiment_weight
        )

        clusters = synthesize_clusters(
            keywords,
            frequency,
            token_count=len(tokens),
            energy=energy,
            limit=self._config.cluster_count,
            seed_weight=self._config.cluster_seed_weight,
            energy_weight=self._config.cluster_energy_weight
        )

        return Analysis(
            keywords=keywords,
            sentiment=sentiment,
            energy=energy,
            clusters=clusters
        )

    def build_insights(self, analysis: Analysis) -> Tuple[Insight, ...]:
        return build_insights(analysis, self._insight_config.max_insights)

    def generate_reply(self, latest_fragment: str, analysis: Analysis) -> str:
        return generate_reply(latest_fragment, analysis)


def analyze_text(corpus: str) -> Analysis:
    """Analyze with the default configuration."""
    return AnalysisEngine().analyze(corpus)


__all__ = [
    'AnalysisConfig',
    'InsightConfig',
    'AnalysisEngine',
    'analyze_text',
    'build_insights',
    'generate_reply',
    'BASELINE_INSIGHTS',
]
