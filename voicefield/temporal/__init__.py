"""
Temporal Layer
==============

Session state management over an injectable clock.

INVARIANTS:
- Session state is replaced, never mutated
- Corpus only grows; the segment trail is bounded
- Same fragments + same clock ticks → equal session states

Modules:
- clock: Live / replay logical clock
- state_machine: Pure fragment-acceptance transitions
"""

from .clock import LogicalClock, ClockExhausted
from .state_machine import (
    SessionStateMachine, SessionConfig, TRAIL_LIMIT, compile_corpus
)

__all__ = [
    'LogicalClock',
    'ClockExhausted',
    'SessionStateMachine',
    'SessionConfig',
    'TRAIL_LIMIT',
    'compile_corpus',
]
