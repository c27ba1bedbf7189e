"""
Session to ViewModel Mapper

Converts the immutable SessionState into display-ready view models.

MAPPING BOUNDARY:
=================
This is the ONLY place where session state becomes presentation data.
Percentages, labels and animation constants are computed here, never in
the analysis layer.

MAPPING RULES:
==============
1. Never expose session internals (no corpus, no raw Analysis)
2. Preserve session ordering of insights and segments
3. Fixed fallbacks for empty sessions, never inferred content
"""

from __future__ import annotations
from datetime import tzinfo
from typing import Optional, Tuple

from ..contracts.base import ListeningStatus, Timestamp
from ..contracts.events import Analysis, Insight, Segment, SessionState
from ..core.clusters import capitalize
from ..core.scoring import clamp, round_half_up
from .viewmodels import (
    InsightCardViewModel, SegmentRowViewModel, SignalGaugeViewModel,
    CoreVectorViewModel, SessionViewModel
)


STANDBY_TEXT = "Standing by. Your audio stream routes here for instant Grok synthesis."
AWAITING_SIGNAL = "Awaiting Signal"
PLACEHOLDER_TOPICS: Tuple[str, ...] = (
    "voice graph", "agent choreography", "signal lattice", "grok overlay",
)
ORBIT_SIZE = 3


def listening_status(state: SessionState) -> ListeningStatus:
    if state.listening:
        return ListeningStatus.LISTENING
    if state.live_preview:
        return ListeningStatus.PROCESSING
    return ListeningStatus.IDLE


def momentum_variance(analysis: Analysis) -> float:
    """Coherence of the core vector, kept inside [0.2, 0.9]."""
    base = analysis.energy * 0.45 + abs(analysis.sentiment) * 0.35
    return clamp(base, 0.2, 0.9)


def format_time(timestamp: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """12-hour clock label, e.g. "03:45 PM". tz=None uses local time."""
    return timestamp.value.astimezone(tz).strftime("%I:%M %p")


class SessionViewMapper:
    """
    Maps session snapshots to view models.

    SINGLE POINT OF CONVERSION:
    ===========================
    All session → presentation conversion goes through this class.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz

    def map_session(
        self,
        state: SessionState,
        speech_supported: bool = False
    ) -> SessionViewModel:
        analysis = state.analysis
        coherence = momentum_variance(analysis)
        insight_cards = tuple(self.map_insight(i) for i in state.insights)

        return SessionViewModel(
            listening_label=listening_status(state).value,
            is_listening=state.listening,
            speech_supported=speech_supported,
            mic_stream_text=self._mic_stream_text(state),
            reply=state.reply,
            updated_label=f"Updated {format_time(state.last_updated, self._tz)}",
            gauges=self.map_gauges(analysis),
            core_vector=CoreVectorViewModel(
                title=capitalize(analysis.keywords[0]) if analysis.keywords else AWAITING_SIGNAL,
                coherence=coherence,
                coherence_percent=round_half_up(coherence * 100),
                glow_opacity=clamp(coherence + 0.3, 0.4, 0.9),
                orbit_seconds=18 - coherence * 6,
            ),
            topics=analysis.keywords or PLACEHOLDER_TOPICS,
            orbit=insight_cards[:ORBIT_SIZE],
            insights=insight_cards,
            segments=tuple(self.map_segment(s) for s in state.segments),
        )

    def map_gauges(self, analysis: Analysis) -> SignalGaugeViewModel:
        if analysis.sentiment > 0.15:
            sentiment_label = "Positive"
        elif analysis.sentiment < -0.15:
            sentiment_label = "Negative"
        else:
            sentiment_label = "Neutral"

        return SignalGaugeViewModel(
            energy_percent=round_half_up(analysis.energy * 100),
            energy_bar_percent=round_half_up(max(analysis.energy, 0.05) * 100),
            sentiment_index=round_half_up(analysis.sentiment * 100),
            sentiment_label=sentiment_label,
        )

    def map_insight(self, insight: Insight) -> InsightCardViewModel:
        drift = round_half_up(insight.delta * 100)
        sign = "+" if insight.delta > 0 else ""
        return InsightCardViewModel(
            insight_id=insight.insight_id,
            label=insight.label,
            detail=insight.detail,
            pulse_percent=round_half_up(insight.pulse * 100),
            drift=drift,
            drift_label=f"{sign}{drift} drift",
            opacity=clamp(insight.pulse + 0.2, 0.4, 1.0),
        )

    def map_segment(self, segment: Segment) -> SegmentRowViewModel:
        return SegmentRowViewModel(
            segment_id=segment.segment_id.value,
            text=segment.text,
            time_label=format_time(segment.timestamp, self._tz),
        )

    def _mic_stream_text(self, state: SessionState) -> str:
        if state.live_preview:
            return state.live_preview
        if state.segments:
            return state.segments[-1].text
        return STANDBY_TEXT
