"""
Engine Orchestration Module

This module provides the unified interface for coordinating all layers
while maintaining strict boundary separation.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. The engine is the single owner of the current SessionState
3. Each fragment is applied as one complete transition before the next
4. All operations are traceable through observability
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional
import time

from .contracts.base import Result, TimeRange
from .contracts.events import (
    AuditEventType, AuditLogEntry, RecognitionEvent, RecognitionEventKind,
    SessionState
)
from .core import AnalysisConfig, AnalysisEngine, InsightConfig
from .core.reply import PAUSED_REPLY, STREAMING_REPLY
from .ingestion import (
    RecognitionCapability, RecognitionConfig, SpeechCaptureSession
)
from .normalization import NormalizationConfig
from .observability import (
    MetricsCollector, ObservabilityConfig, ObservabilityEngine
)
from .presentation import SessionViewMapper, SessionViewModel
from .temporal import LogicalClock, SessionConfig, SessionStateMachine


@dataclass
class VoiceFieldConfig:
    """Unified configuration for every layer."""
    normalization: NormalizationConfig = None
    analysis: AnalysisConfig = None
    insights: InsightConfig = None
    session: SessionConfig = None
    recognition: RecognitionConfig = None
    observability: ObservabilityConfig = None

    def __post_init__(self):
        self.normalization = self.normalization or NormalizationConfig()
        self.analysis = self.analysis or AnalysisConfig()
        self.insights = self.insights or InsightConfig()
        self.session = self.session or SessionConfig()
        self.recognition = self.recognition or RecognitionConfig()
        self.observability = self.observability or ObservabilityConfig()


class VoiceFieldEngine:
    """
    Unified engine for the voice field session.

    FLOW:
    =====
    1. Input: manual submit_fragment() or recognition events via pump()
    2. Session: SessionStateMachine builds the next SessionState
    3. Analysis: full recompute over the compiled corpus
    4. Observability: audit + metrics for every transition
    5. Presentation: snapshot() / view_model() for the renderer

    Single-threaded: a transition runs to completion before the next
    event is taken from the channel.
    """

    def __init__(
        self,
        config: Optional[VoiceFieldConfig] = None,
        recognition: Optional[RecognitionCapability] = None,
        clock: Optional[LogicalClock] = None
    ):
        self._config = config or VoiceFieldConfig()
        self._clock = clock or LogicalClock.live()

        self._analysis = AnalysisEngine(
            self._config.analysis,
            self._config.normalization,
            self._config.insights
        )
        self._machine = SessionStateMachine(self._analysis, self._config.session)
        self._capture = SpeechCaptureSession(recognition, self._config.recognition)
        self._observability = ObservabilityEngine(self._config.observability)
        self._mapper = SessionViewMapper()

        self._state = self._machine.initial_state(self._clock)

    # =========================================================================
    # INPUT INTERFACE
    # =========================================================================

    def submit_fragment(self, text: str, source: str = "manual") -> bool:
        """
        Apply one fragment to the session.

        Blank input is a silent no-op: returns False and leaves the state
        exactly as it was.
        """
        started = time.perf_counter()
        outcome = self._machine.accept_fragment(self._state, text, self._clock)

        if not outcome.accepted:
            self._observability.collect_metric(
                "fragments_rejected_total", 1.0, {"source": source}
            )
            return False

        self._state = outcome.state

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._observability.collect_metric(
            "fragments_accepted_total", 1.0, {"source": source}
        )
        self._observability.collect_metric("analysis_duration_ms", elapsed_ms)
        self._observability.collect_metric(
            "corpus_length_chars", float(len(self._state.corpus))
        )
        self._observability.log_audit(
            action="fragment_accepted",
            entity_id=outcome.segment.segment_id.value,
            entity_type="segment",
            layer="session",
            event_type=AuditEventType.STATE_CHANGE,
            metadata=(
                ("source", source),
                ("keyword_count", str(len(self._state.analysis.keywords))),
            )
        )
        return True

    def set_live_preview(self, text: str):
        """Show interim text; corpus and analysis are untouched."""
        previous = self._state
        self._state = self._machine.update_live_preview(self._state, text)
        if self._state is not previous:
            self._observability.collect_metric("live_preview_updates_total", 1.0)

    # =========================================================================
    # SPEECH INTERFACE
    # =========================================================================

    @property
    def speech_supported(self) -> bool:
        return self._capture.is_available

    def start_listening(self) -> Result:
        """
        Start speech capture.

        Failures (unavailable engine, denied permission, duplicate start)
        only leave the session in the not-listening state.
        """
        result = self._capture.begin()
        if result.is_failure:
            self._record_recognition_failure(result.error.code.name)
            self._state = self._machine.mark_listening(self._state, False)
            return result

        self._state = self._machine.mark_listening(self._state, True, STREAMING_REPLY)
        return result

    def stop_listening(self) -> Result:
        """Stop speech capture. Accepted fragments are kept."""
        result = self._capture.end()
        if result.is_success:
            self._state = self._machine.mark_listening(self._state, False, PAUSED_REPLY)
        return result

    def handle_recognition_event(self, event: RecognitionEvent):
        """
        Apply one recognition tick.

        Final results are applied one at a time in index order, each as a
        full transition; interim transcripts of the tick are concatenated
        into the live preview afterwards.
        Error and end events clear the listening flag unless they belong
        to an earlier listening run.
        """
        self._observability.collect_metric(
            "channel_events_total", 1.0, {"kind": event.kind.value}
        )

        if event.kind == RecognitionEventKind.RESULT:
            live_transcript = ""
            for result in event.pending_results:
                if not result.transcript:
                    continue
                if result.is_final:
                    self.submit_fragment(result.transcript, source="speech")
                else:
                    live_transcript += result.transcript
            self.set_live_preview(live_transcript)
            return

        if event.kind == RecognitionEventKind.ERROR:
            self._record_recognition_failure("RECOGNITION_ERROR", event.message)

        # A terminal event from an earlier run must not end the current one
        if event.generation is not None and event.generation != self._capture.generation:
            return

        self._state = self._machine.mark_listening(self._state, False)

    def pump(self) -> int:
        """Drain the recognition channel; returns the number of events applied."""
        count = 0
        for event in self._capture.drain():
            self.handle_recognition_event(event)
            count += 1
        return count

    def _record_recognition_failure(self, error_code: str, message: str = ""):
        self._observability.collect_metric(
            "recognition_failures_total", 1.0, {"error_code": error_code}
        )
        self._observability.log_audit(
            action="recognition_failure",
            entity_type="recognition",
            event_type=AuditEventType.ERROR,
            metadata=(("error_code", error_code), ("message", message))
        )

    # =========================================================================
    # READ INTERFACE
    # =========================================================================

    def snapshot(self) -> SessionState:
        """Current immutable session state."""
        return self._state

    def view_model(self) -> SessionViewModel:
        return self._mapper.map_session(self._state, self.speech_supported)

    @property
    def capture(self) -> SpeechCaptureSession:
        return self._capture

    @property
    def clock(self) -> LogicalClock:
        return self._clock

    # =========================================================================
    # OBSERVABILITY INTERFACE
    # =========================================================================

    def get_audit_log(
        self,
        time_range: Optional[TimeRange] = None,
        layers: Optional[List[str]] = None
    ) -> List[AuditLogEntry]:
        """Get unified audit log."""
        self._sync_audit_logs()
        return self._observability.get_unified_log(time_range, layers)

    def get_audit_report(self, time_range: Optional[TimeRange] = None) -> Dict:
        self._sync_audit_logs()
        return self._observability.generate_audit_report(time_range)

    def get_metrics(self) -> Optional[MetricsCollector]:
        return self._observability.get_metrics()

    def _sync_audit_logs(self):
        """Sync layer-local audit logs into observability."""
        for entry in self._capture.get_audit_log():
            self._observability.collect_audit(entry)
