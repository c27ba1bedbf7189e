"""
Session State Machine
=====================

Pure transitions over the immutable SessionState.

INVARIANT: every transition returns a NEW SessionState built in one step.
Corpus, segment trail, analysis, insights and reply always agree with
each other; no partially updated state is ever observable.

This module DOES NOT hold state.
The engine owns the single current SessionState and swaps it for the
result of each transition.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

from ..contracts.base import Error, ErrorCode, SegmentId
from ..contracts.events import Segment, SessionState, TransitionResult
from ..core import AnalysisEngine
from ..core.reply import OPEN_MIC_REPLY
from .clock import LogicalClock


TRAIL_LIMIT = 6


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for the session state machine."""
    trail_limit: int = TRAIL_LIMIT
    initial_reply: str = OPEN_MIC_REPLY

    def __post_init__(self):
        if self.trail_limit < 1:
            raise ValueError("trail_limit must be at least 1")


def compile_corpus(corpus: str, fragment: str) -> str:
    """Append a fragment to the corpus with a single separating space."""
    return f"{corpus} {fragment}" if corpus else fragment


class SessionStateMachine:
    """
    Fragment-acceptance state machine.

    GUARANTEES:
    ===========
    1. Blank fragments leave the state untouched (same object returned)
    2. Segment trail never exceeds trail_limit, oldest evicted first
    3. Analysis and insights are recomputed from the full corpus
    4. The clock is read only for accepted fragments
    """

    def __init__(
        self,
        analysis: Optional[AnalysisEngine] = None,
        config: Optional[SessionConfig] = None
    ):
        self._analysis = analysis or AnalysisEngine()
        self._config = config or SessionConfig()

    @property
    def config(self) -> SessionConfig:
        return self._config

    def initial_state(self, clock: LogicalClock) -> SessionState:
        """Empty session: no corpus, baseline insights, open-mic reply."""
        analysis = self._analysis.analyze("")
        return SessionState(
            corpus="",
            segments=(),
            analysis=analysis,
            insights=self._analysis.build_insights(analysis),
            reply=self._config.initial_reply,
            live_preview="",
            listening=False,
            last_updated=clock.now(),
            sequence=0
        )

    def accept_fragment(
        self,
        state: SessionState,
        fragment: str,
        clock: LogicalClock
    ) -> TransitionResult:
        """
        Apply one fragment.

        Rejection is not an exception: the result carries the unchanged
        state and an EMPTY_FRAGMENT error as data.
        """
        trimmed = fragment.strip() if fragment else ""
        if not trimmed:
            return TransitionResult(
                state=state,
                accepted=False,
                rejection=Error(
                    code=ErrorCode.EMPTY_FRAGMENT,
                    message="Fragment is empty after trimming",
                    timestamp=state.last_updated.value,
                    context=(("length", str(len(fragment or ""))),)
                )
            )

        timestamp = clock.now()
        sequence = state.sequence + 1

        segment = Segment(
            segment_id=SegmentId.generate(timestamp, sequence),
            text=trimmed,
            timestamp=timestamp
        )
        segments = (state.segments + (segment,))[-self._config.trail_limit:]

        corpus = compile_corpus(state.corpus, trimmed)
        analysis = self._analysis.analyze(corpus)

        new_state = replace(
            state,
            corpus=corpus,
            segments=segments,
            analysis=analysis,
            insights=self._analysis.build_insights(analysis),
            reply=self._analysis.generate_reply(trimmed, analysis),
            live_preview="",
            last_updated=timestamp,
            sequence=sequence
        )

        return TransitionResult(state=new_state, accepted=True, segment=segment)

    def update_live_preview(self, state: SessionState, text: str) -> SessionState:
        """Replace the transient interim preview; nothing else changes."""
        text = text or ""
        if text == state.live_preview:
            return state
        return replace(state, live_preview=text)

    def mark_listening(
        self,
        state: SessionState,
        listening: bool,
        reply: Optional[str] = None
    ) -> SessionState:
        """Toggle the listening flag, optionally replacing the reply."""
        new_reply = state.reply if reply is None else reply
        if state.listening == listening and state.reply == new_reply:
            return state
        return replace(state, listening=listening, reply=new_reply)
