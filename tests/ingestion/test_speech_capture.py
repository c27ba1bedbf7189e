"""
Speech Capture Tests
====================

INVARIANTS TESTED:
1. Channel preserves arrival order; full channel rejects results, holds error/end
2. Start failures come back as Error data, never exceptions
3. Scripted engine mimics a browser engine: error is followed by end
"""

import pytest

from voicefield.contracts.base import ErrorCode
from voicefield.contracts.events import (
    AuditEventType, RecognitionEvent, RecognitionEventKind, RecognitionResult
)
from voicefield.ingestion import (
    RecognitionChannel, RecognitionConfig, ScriptedRecognition,
    SpeechCaptureSession, UnavailableRecognition
)


class TestRecognitionChannel:

    def test_fifo_order(self):
        channel = RecognitionChannel(capacity=4)
        events = [RecognitionEvent.error("a"), RecognitionEvent.end(),
                  RecognitionEvent.error("b")]
        for event in events:
            assert channel.publish(event).is_success

        assert len(channel) == 3
        assert list(channel.drain()) == events
        assert len(channel) == 0

    def test_full_channel_rejects_results(self):
        channel = RecognitionChannel(capacity=1)
        channel.publish(RecognitionEvent.result(RecognitionResult("one", True)))

        result = channel.publish(RecognitionEvent.result(RecognitionResult("two", True)))

        assert result.is_failure
        assert result.error.code == ErrorCode.EVENT_CHANNEL_FULL
        assert len(channel) == 1

    def test_terminal_events_held_when_full(self):
        channel = RecognitionChannel(capacity=1)
        first = RecognitionEvent.result(RecognitionResult("hel", False))
        channel.publish(first)

        assert channel.publish(RecognitionEvent.error("network")).is_success
        assert channel.publish(RecognitionEvent.end()).is_success
        assert len(channel) == 3

        kinds = [e.kind for e in channel.drain()]
        assert kinds == [
            RecognitionEventKind.RESULT, RecognitionEventKind.ERROR,
            RecognitionEventKind.END,
        ]
        assert len(channel) == 0

    def test_drain_stops_at_events_pending_on_entry(self):
        channel = RecognitionChannel(capacity=8)
        channel.publish(RecognitionEvent.error("a"))
        channel.publish(RecognitionEvent.error("b"))

        drained = []
        for event in channel.drain():
            drained.append(event.message)
            channel.publish(RecognitionEvent.error("late"))

        assert drained == ["a", "b"]
        assert len(channel) == 2

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            RecognitionConfig(channel_capacity=0)


class TestRecognitionEvent:

    def test_pending_results_respect_index(self):
        event = RecognitionEvent.result(
            RecognitionResult("old", True),
            RecognitionResult("new", True),
            result_index=1
        )
        assert event.pending_results == (RecognitionResult("new", True),)

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            RecognitionEvent(kind=RecognitionEventKind.RESULT, result_index=-1)


class TestSpeechCaptureSession:

    def test_unavailable_engine(self):
        capture = SpeechCaptureSession(UnavailableRecognition())
        result = capture.begin()

        assert not capture.is_available
        assert result.is_failure
        assert result.error.code == ErrorCode.RECOGNITION_UNAVAILABLE
        assert capture.get_audit_log()[-1].action == "listening_unavailable"

    def test_start_applies_config(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition, RecognitionConfig(language="en-GB"))

        assert capture.begin().is_success
        assert recognition.is_running
        assert recognition.active_config.language == "en-GB"
        assert recognition.active_config.continuous
        assert recognition.active_config.interim_results

    def test_denied_permission(self):
        recognition = ScriptedRecognition()
        recognition.fail_next_start("not-allowed")
        capture = SpeechCaptureSession(recognition)

        result = capture.begin()

        assert result.error.code == ErrorCode.RECOGNITION_START_FAILED
        assert result.error.message == "not-allowed"
        assert not recognition.is_running
        assert capture.begin().is_success

    def test_double_start_fails(self):
        capture = SpeechCaptureSession(ScriptedRecognition())
        capture.begin()

        result = capture.begin()

        assert result.is_failure
        assert result.error.code == ErrorCode.RECOGNITION_START_FAILED

    def test_results_flow_into_channel(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition)
        capture.begin()

        recognition.emit_interim("hel")
        recognition.emit_final("hello there")

        events = list(capture.drain())
        assert [e.results[0].transcript for e in events] == ["hel", "hello there"]
        assert capture.pending_count() == 0

    def test_stop_emits_end(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition)
        capture.begin()

        assert capture.end().is_success
        assert [e.kind for e in capture.drain()] == [RecognitionEventKind.END]

    def test_error_then_end(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition)
        capture.begin()

        recognition.emit_error("network")

        kinds = [e.kind for e in capture.drain()]
        assert kinds == [RecognitionEventKind.ERROR, RecognitionEventKind.END]
        assert not recognition.is_running

    def test_overflow_is_audited(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition, RecognitionConfig(channel_capacity=1))
        capture.begin()

        assert recognition.emit_final("first one").is_success
        result = recognition.emit_final("second one")

        assert result.is_failure
        dropped = capture.get_audit_log()[-1]
        assert dropped.action == "event_dropped"
        assert dropped.event_type == AuditEventType.ERROR

    def test_unbound_engine_reports_error(self):
        result = ScriptedRecognition().emit_final("orphan")

        assert result.is_failure
        assert result.error.code == ErrorCode.RECOGNITION_ERROR

    def test_events_stamped_with_listening_run(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition)

        capture.begin()
        recognition.emit_final("first run")
        capture.end()
        capture.begin()
        recognition.emit_final("second run")

        stamped = [(e.kind, e.generation) for e in capture.drain()]
        assert stamped == [
            (RecognitionEventKind.RESULT, 1),
            (RecognitionEventKind.END, 1),
            (RecognitionEventKind.RESULT, 2),
        ]
        assert capture.generation == 2

    def test_failed_start_keeps_generation(self):
        recognition = ScriptedRecognition()
        recognition.fail_next_start("not-allowed")
        capture = SpeechCaptureSession(recognition)

        capture.begin()

        assert capture.generation == 0

    def test_error_survives_full_channel(self):
        recognition = ScriptedRecognition()
        capture = SpeechCaptureSession(recognition, RecognitionConfig(channel_capacity=1))
        capture.begin()

        recognition.emit_interim("hel")
        assert recognition.emit_error("network").is_success

        kinds = [e.kind for e in capture.drain()]
        assert kinds[-2:] == [RecognitionEventKind.ERROR, RecognitionEventKind.END]
