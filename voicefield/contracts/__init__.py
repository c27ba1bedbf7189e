"""
Contracts shared by every layer.

Layers import types from here and nowhere else when crossing a boundary.
"""

from .base import (
    ErrorCode, Error, Result, Timestamp, TimeRange, SegmentId, ListeningStatus
)
from .events import (
    Segment, Cluster, Analysis, Insight, SessionState, TransitionResult,
    RecognitionEventKind, RecognitionResult, RecognitionEvent,
    AuditEventType, AuditLogEntry, MetricPoint
)

__all__ = [
    'ErrorCode', 'Error', 'Result', 'Timestamp', 'TimeRange', 'SegmentId',
    'ListeningStatus',
    'Segment', 'Cluster', 'Analysis', 'Insight', 'SessionState',
    'TransitionResult',
    'RecognitionEventKind', 'RecognitionResult', 'RecognitionEvent',
    'AuditEventType', 'AuditLogEntry', 'MetricPoint',
]
