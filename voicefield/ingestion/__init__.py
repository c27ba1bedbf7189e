"""
Speech Capture Ingestion Layer

RESPONSIBILITY: Boundary between a speech-recognition engine and the session
ALLOWED INPUTS: Recognition callbacks (result / error / end)
OUTPUTS: RecognitionEvent objects, queued in arrival order

WHAT THIS LAYER MUST NOT DO:
============================
- Analyze, trim or filter transcripts (that's the session's job)
- Touch session state directly
- Let a recognition failure escape as an exception

BOUNDARY ENFORCEMENT:
=====================
Recognition engines are selected at construction as a capability strategy
(available or unavailable); nothing probes the environment at runtime.
Engines push events into a bounded RecognitionChannel; the engine layer
drains the channel one event at a time. Start/stop failures raised by a
capability are caught here, turned into Error data and audited.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional
import hashlib
import queue

from ..contracts.base import Error, ErrorCode, Result, Timestamp
from ..contracts.events import (
    RecognitionEvent, RecognitionResult, AuditLogEntry, AuditEventType
)


EventSink = Callable[[RecognitionEvent], Result]


class RecognitionError(Exception):
    """Raised by a recognition capability that cannot start or continue."""
    pass


@dataclass(frozen=True)
class RecognitionConfig:
    """Configuration applied to the recognition engine on start."""
    language: str = "en-US"
    continuous: bool = True
    interim_results: bool = True
    channel_capacity: int = 64

    def __post_init__(self):
        if self.channel_capacity < 1:
            raise ValueError("channel_capacity must be at least 1")


# =============================================================================
# EVENT CHANNEL (Bounded, ordered)
# =============================================================================

class RecognitionChannel:
    """
    Bounded FIFO of recognition events.

    Producers may run on another thread; the queue and the held deque
    are the only shared objects. A full channel rejects result events instead of blocking the
    recognition callback. Terminal events (error, end) are never dropped:
    when the queue is full they are held and delivered after it.
    """

    def __init__(self, capacity: int = 64):
        self._queue: "queue.Queue[RecognitionEvent]" = queue.Queue(maxsize=capacity)
        self._held: "deque[RecognitionEvent]" = deque()
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def publish(self, event: RecognitionEvent) -> Result:
        if self._held and event.is_terminal:
            self._held.append(event)
            return Result.success(event)
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            if event.is_terminal:
                self._held.append(event)
                return Result.success(event)
            return Result.failure(Error(
                code=ErrorCode.EVENT_CHANNEL_FULL,
                message=f"Recognition channel full ({self._capacity} events pending)",
                timestamp=Timestamp.now().value,
                context=(("event_kind", event.kind.value),)
            ))
        return Result.success(event)

    def drain(self) -> Iterator[RecognitionEvent]:
        """
        Yield the events pending at call time, in arrival order.

        Events published while draining wait for the next drain.
        """
        pending = self._queue.qsize()
        for _ in range(pending):
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                break
            yield event

        held = len(self._held)
        for _ in range(held):
            yield self._held.popleft()

    def __len__(self) -> int:
        return self._queue.qsize() + len(self._held)


# =============================================================================
# RECOGNITION CAPABILITIES (Strategy pattern)
# =============================================================================

class RecognitionCapability(ABC):
    """
    Abstract speech-recognition engine.

    Implementations report results by calling the bound sink; they raise
    RecognitionError from start() when the engine refuses to run.
    """

    def __init__(self):
        self._sink: Optional[EventSink] = None

    def bind(self, sink: EventSink):
        """Attach the sink that receives this engine's events."""
        self._sink = sink

    @property
    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def start(self, config: RecognitionConfig):
        pass

    @abstractmethod
    def stop(self):
        pass


class UnavailableRecognition(RecognitionCapability):
    """No recognition engine on this host; manual entry only."""

    @property
    def is_available(self) -> bool:
        return False

    def start(self, config: RecognitionConfig):
        raise RecognitionError("speech recognition is not available")

    def stop(self):
        pass


class ScriptedRecognition(RecognitionCapability):
    """
    In-process recognition engine driven by its caller.

    Used by the console front end and the test suite: whoever holds the
    instance plays the role of the speech service and emits results.
    Behaves like a browser engine: a second start() while running fails,
    and error() is followed by an end event.
    """

    def __init__(self):
        super().__init__()
        self._running = False
        self._pending_failure: Optional[str] = None
        self.active_config: Optional[RecognitionConfig] = None

    @property
    def is_available(self) -> bool:
        return True

    @property
    def is_running(self) -> bool:
        return self._running

    def fail_next_start(self, message: str = "not-allowed"):
        """Make the next start() fail, e.g. a denied microphone permission."""
        self._pending_failure = message

    def start(self, config: RecognitionConfig):
        if self._pending_failure is not None:
            message, self._pending_failure = self._pending_failure, None
            raise RecognitionError(message)
        if self._running:
            raise RecognitionError("recognition has already started")
        self._running = True
        self.active_config = config

    def stop(self):
        if self._running:
            self._running = False
            self._emit(RecognitionEvent.end())

    def emit_results(self, *results: RecognitionResult, result_index: int = 0) -> Result:
        return self._emit(RecognitionEvent.result(*results, result_index=result_index))

    def emit_final(self, transcript: str) -> Result:
        return self.emit_results(RecognitionResult(transcript=transcript, is_final=True))

    def emit_interim(self, transcript: str) -> Result:
        return self.emit_results(RecognitionResult(transcript=transcript, is_final=False))

    def emit_error(self, message: str) -> Result:
        """Engine-side failure: error event, then the engine ends."""
        result = self._emit(RecognitionEvent.error(message))
        self._running = False
        self._emit(RecognitionEvent.end())
        return result

    def _emit(self, event: RecognitionEvent) -> Result:
        if self._sink is None:
            return Result.failure(Error(
                code=ErrorCode.RECOGNITION_ERROR,
                message="recognition engine has no bound sink",
                timestamp=Timestamp.now().value
            ))
        return self._sink(event)


# =============================================================================
# SPEECH CAPTURE SESSION (Orchestrates capability + channel)
# =============================================================================

class SpeechCaptureSession:
    """
    Owns the recognition capability and its event channel.

    BOUNDARY ENFORCEMENT:
    - This class ONLY produces RecognitionEvent objects
    - Failures become Result.failure values plus audit entries
    """

    def __init__(
        self,
        capability: Optional[RecognitionCapability] = None,
        config: Optional[RecognitionConfig] = None
    ):
        self._capability = capability or UnavailableRecognition()
        self._config = config or RecognitionConfig()
        self._channel = RecognitionChannel(self._config.channel_capacity)
        self._audit_log: List[AuditLogEntry] = []
        self._generation = 0

        self._capability.bind(self.publish)

    @property
    def is_available(self) -> bool:
        return self._capability.is_available

    @property
    def capability(self) -> RecognitionCapability:
        return self._capability

    @property
    def config(self) -> RecognitionConfig:
        return self._config

    @property
    def generation(self) -> int:
        """Current listening run; bumped on every successful start."""
        return self._generation

    def begin(self) -> Result:
        """Start the recognition engine."""
        if not self._capability.is_available:
            return self._fail(
                ErrorCode.RECOGNITION_UNAVAILABLE,
                "speech recognition is not available",
                action="listening_unavailable"
            )

        try:
            self._capability.start(self._config)
        except RecognitionError as exc:
            return self._fail(
                ErrorCode.RECOGNITION_START_FAILED,
                str(exc),
                action="listening_start_failed"
            )

        self._generation += 1
        self._log_audit(
            action="listening_started",
            metadata=(("language", self._config.language),)
        )
        return Result.success(True)

    def end(self) -> Result:
        """Stop the recognition engine; accepted fragments are not rolled back."""
        if not self._capability.is_available:
            return self._fail(
                ErrorCode.RECOGNITION_UNAVAILABLE,
                "speech recognition is not available",
                action="listening_unavailable"
            )

        self._capability.stop()
        self._log_audit(action="listening_stopped")
        return Result.success(True)

    def publish(self, event: RecognitionEvent) -> Result:
        """Sink for capability callbacks; stamps the current run on the event."""
        if event.generation is None:
            event = replace(event, generation=self._generation)
        result = self._channel.publish(event)
        if result.is_failure:
            self._log_audit(
                action="event_dropped",
                event_type=AuditEventType.ERROR,
                metadata=(("reason", result.error.code.name),)
            )
        return result

    def drain(self) -> Iterator[RecognitionEvent]:
        return self._channel.drain()

    def pending_count(self) -> int:
        return len(self._channel)

    def _fail(self, code: ErrorCode, message: str, action: str) -> Result:
        error = Error(code=code, message=message, timestamp=Timestamp.now().value)
        self._log_audit(
            action=action,
            event_type=AuditEventType.ERROR,
            metadata=(("error_code", code.name), ("message", message))
        )
        return Result.failure(error)

    def _log_audit(
        self,
        action: str,
        event_type: AuditEventType = AuditEventType.INGESTION,
        metadata: tuple = ()
    ):
        """Add entry to internal audit log."""
        now = Timestamp.now()
        entry_id = hashlib.sha256(
            f"{action}|{len(self._audit_log)}|{now.value.timestamp()}".encode()
        ).hexdigest()[:16]

        self._audit_log.append(AuditLogEntry(
            entry_id=f"audit_{entry_id}",
            event_type=event_type,
            timestamp=now,
            layer="ingestion",
            action=action,
            entity_type="recognition",
            metadata=metadata
        ))

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return list(self._audit_log)


__all__ = [
    'RecognitionError',
    'RecognitionConfig',
    'RecognitionChannel',
    'RecognitionCapability',
    'UnavailableRecognition',
    'ScriptedRecognition',
    'SpeechCaptureSession',
]
