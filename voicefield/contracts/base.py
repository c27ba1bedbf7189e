"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.
No behavior, no side effects, no dependencies.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- All types are frozen dataclasses for immutability guarantee
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from enum import Enum, auto


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    Every rejected input or boundary failure is enumerated here.
    """
    # Session errors
    EMPTY_FRAGMENT = auto()

    # Recognition boundary errors
    RECOGNITION_UNAVAILABLE = auto()
    RECOGNITION_START_FAILED = auto()
    RECOGNITION_ERROR = auto()
    EVENT_CHANNEL_FULL = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# TEMPORAL TYPES (Immutable, explicit semantics)
# =============================================================================

@dataclass(frozen=True)
class Timestamp:
    """
    Immutable timestamp with explicit semantics.
    All timestamps are UTC, never local time.
    """
    value: datetime

    def __post_init__(self):
        # Ensure UTC timezone
        if self.value.tzinfo is None:
            object.__setattr__(self, 'value', self.value.replace(tzinfo=timezone.utc))

    @staticmethod
    def now() -> Timestamp:
        return Timestamp(value=datetime.now(timezone.utc))

    @property
    def epoch_ms(self) -> int:
        """Milliseconds since the Unix epoch."""
        return (self.value - EPOCH) // timedelta(milliseconds=1)

    def to_iso(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True)
class TimeRange:
    """Immutable time range for audit queries."""
    start: Timestamp
    end: Timestamp

    def __post_init__(self):
        if self.start.value > self.end.value:
            raise ValueError("TimeRange start must be before or equal to end")

    def contains(self, timestamp: Timestamp) -> bool:
        return self.start.value <= timestamp.value <= self.end.value


# =============================================================================
# IDENTITY TYPES
# =============================================================================

@dataclass(frozen=True)
class SegmentId:
    """
    Immutable segment identifier.

    Pairs the acceptance time with the session-wide acceptance sequence,
    so two fragments accepted within the same millisecond stay distinct.
    """
    value: str
    sequence: int

    @staticmethod
    def generate(timestamp: Timestamp, sequence: int) -> SegmentId:
        if sequence < 1:
            raise ValueError("sequence must be a positive integer")
        return SegmentId(
            value=f"seg_{timestamp.epoch_ms}_{sequence}",
            sequence=sequence
        )


# =============================================================================
# LISTENING STATES
# =============================================================================

class ListeningStatus(Enum):
    """Status label shown next to the microphone control."""
    LISTENING = "Listening"
    PROCESSING = "Processing"  # Not listening, but an interim preview is pending
    IDLE = "Idle"
