"""
Presentation Layer

Responsibility:
Read-only view models for the rendering collaborator (orbit field,
gauges, insight cards, segment trail).

PRINCIPLES:
1. Immutable (Frozen)
2. No Business Logic
3. Derived only from a SessionState snapshot
"""

from .viewmodels import (
    InsightCardViewModel, SegmentRowViewModel, SignalGaugeViewModel,
    CoreVectorViewModel, SessionViewModel
)
from .mapper import (
    SessionViewMapper, listening_status, momentum_variance, format_time
)

__all__ = [
    'InsightCardViewModel', 'SegmentRowViewModel', 'SignalGaugeViewModel',
    'CoreVectorViewModel', 'SessionViewModel',
    'SessionViewMapper', 'listening_status', 'momentum_variance', 'format_time',
]
