"""
Presentation Contracts

Responsibility:
Define ViewModel contracts for the rendering collaborator.
Display-ready values only; no business logic and no references back
into session state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class InsightCardViewModel:
    """ViewModel for an insight card or orbit node."""
    insight_id: str
    label: str
    detail: str
    pulse_percent: int   # e.g. 72 → "72 pulse"
    drift: int           # e.g. -4 → "-4 drift"
    drift_label: str     # signed, e.g. "+12 drift"
    opacity: float       # orbit node opacity


@dataclass(frozen=True)
class SegmentRowViewModel:
    """ViewModel for one row of the recent-segment trail."""
    segment_id: str
    text: str
    time_label: str      # e.g. "03:45 PM"


@dataclass(frozen=True)
class SignalGaugeViewModel:
    """Energy bar and sentiment dial."""
    energy_percent: int
    energy_bar_percent: int
    sentiment_index: int
    sentiment_label: str  # "Positive" | "Negative" | "Neutral"


@dataclass(frozen=True)
class CoreVectorViewModel:
    """Centre of the orbit field."""
    title: str
    coherence: float
    coherence_percent: int
    glow_opacity: float
    orbit_seconds: float  # Orbit animation period


@dataclass(frozen=True)
class SessionViewModel:
    """Everything one render of the voice field needs."""
    listening_label: str
    is_listening: bool
    speech_supported: bool
    mic_stream_text: str
    reply: str
    updated_label: str
    gauges: SignalGaugeViewModel
    core_vector: CoreVectorViewModel
    topics: Tuple[str, ...]
    orbit: Tuple[InsightCardViewModel, ...]
    insights: Tuple[InsightCardViewModel, ...]
    segments: Tuple[SegmentRowViewModel, ...]
