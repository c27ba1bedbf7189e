"""
Event and State Contracts

Immutable records that flow between layers:

    RecognitionEvent  (ingestion → engine)
    Segment / Analysis / Insight / SessionState  (session → presentation)
    AuditLogEntry / MetricPoint  (any layer → observability)

Every derived record is REPLACED on recomputation, never patched in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .base import Error, SegmentId, Timestamp


# =============================================================================
# SESSION RECORDS
# =============================================================================

@dataclass(frozen=True)
class Segment:
    """One accepted fragment, as kept in the recent-segment trail."""
    segment_id: SegmentId
    text: str
    timestamp: Timestamp

    @property
    def sequence(self) -> int:
        return self.segment_id.sequence


@dataclass(frozen=True)
class Cluster:
    """Topic record derived from one top keyword."""
    label: str
    score: float
    summary: str

    def __post_init__(self):
        if not 0.0 <= self.score <= 1.0:
            raise ValueError("cluster score must be between 0.0 and 1.0")


@dataclass(frozen=True)
class Analysis:
    """
    Full lexical analysis of a corpus.

    Deterministic pure function of the corpus alone: the same corpus
    always produces an equal Analysis.
    """
    keywords: Tuple[str, ...]
    sentiment: float
    energy: float
    clusters: Tuple[Cluster, ...]

    def __post_init__(self):
        if not -1.0 <= self.sentiment <= 1.0:
            raise ValueError("sentiment must be between -1.0 and 1.0")
        if not 0.0 <= self.energy <= 1.0:
            raise ValueError("energy must be between 0.0 and 1.0")

    @staticmethod
    def empty() -> Analysis:
        return Analysis(keywords=(), sentiment=0.0, energy=0.0, clusters=())

    @property
    def is_empty(self) -> bool:
        return not self.keywords


@dataclass(frozen=True)
class Insight:
    """Display-oriented ranked card with pulse and drift values."""
    insight_id: str
    label: str
    detail: str
    pulse: float
    delta: float


@dataclass(frozen=True)
class SessionState:
    """
    Complete session snapshot.

    This is the ONLY state the engine owns. Each transition builds a new
    instance, so an observer never sees a corpus without its matching
    analysis, insights and reply.
    """
    corpus: str
    segments: Tuple[Segment, ...]
    analysis: Analysis
    insights: Tuple[Insight, ...]
    reply: str
    live_preview: str
    listening: bool
    last_updated: Timestamp
    sequence: int = 0  # Accepted fragments over the session lifetime


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of offering one fragment to the session state machine."""
    state: SessionState
    accepted: bool
    segment: Optional[Segment] = None
    rejection: Optional[Error] = None


# =============================================================================
# RECOGNITION EVENTS
# =============================================================================

class RecognitionEventKind(Enum):
    """Callbacks a speech-recognition engine can fire."""
    RESULT = "result"
    ERROR = "error"
    END = "end"


@dataclass(frozen=True)
class RecognitionResult:
    """A single recognized transcript, either final or interim."""
    transcript: str
    is_final: bool


@dataclass(frozen=True)
class RecognitionEvent:
    """
    One reporting tick from the recognition engine.

    For RESULT events, only results[result_index:] are new in this tick.
    `generation` is the listening run that produced the event; None until
    the capture session stamps it.
    """
    kind: RecognitionEventKind
    results: Tuple[RecognitionResult, ...] = field(default_factory=tuple)
    result_index: int = 0
    message: str = ""
    generation: Optional[int] = None

    def __post_init__(self):
        if self.result_index < 0:
            raise ValueError("result_index must be non-negative")

    @staticmethod
    def result(*results: RecognitionResult, result_index: int = 0) -> RecognitionEvent:
        return RecognitionEvent(
            kind=RecognitionEventKind.RESULT,
            results=tuple(results),
            result_index=result_index
        )

    @staticmethod
    def error(message: str) -> RecognitionEvent:
        return RecognitionEvent(kind=RecognitionEventKind.ERROR, message=message)

    @staticmethod
    def end() -> RecognitionEvent:
        return RecognitionEvent(kind=RecognitionEventKind.END)

    @property
    def is_terminal(self) -> bool:
        return self.kind != RecognitionEventKind.RESULT

    @property
    def pending_results(self) -> Tuple[RecognitionResult, ...]:
        return self.results[self.result_index:]


# =============================================================================
# AUDIT AND METRICS
# =============================================================================

class AuditEventType(Enum):
    """Explicit audit event types."""
    INGESTION = "ingestion"
    STATE_CHANGE = "state_change"
    ERROR = "error"
    SYSTEM = "system"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: Timestamp
    layer: str  # Which layer generated this
    action: str
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MetricPoint:
    """Immutable metric data point."""
    metric_name: str
    value: float
    timestamp: Timestamp
    labels: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
