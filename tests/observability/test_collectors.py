"""
Observability Tests
===================

INVARIANTS TESTED:
1. Collectors are append-only and ignore repeated entry ids
2. Unified log is ordered by timestamp across layers
3. Metrics aggregate correctly
"""

from datetime import datetime, timedelta, timezone

from voicefield.contracts.base import TimeRange, Timestamp
from voicefield.contracts.events import AuditEventType, AuditLogEntry
from voicefield.observability import (
    LogCollector, MetricDefinition, MetricType, MetricsCollector,
    ObservabilityEngine
)


BASE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def entry(entry_id, layer="session", minutes=0, event_type=AuditEventType.STATE_CHANGE):
    return AuditLogEntry(
        entry_id=entry_id,
        event_type=event_type,
        timestamp=Timestamp(BASE + timedelta(minutes=minutes)),
        layer=layer,
        action="fragment_accepted"
    )


class TestLogCollector:

    def test_repeated_entry_ignored(self):
        collector = LogCollector("session")

        assert collector.collect(entry("a"))
        assert not collector.collect(entry("a"))
        assert collector.entry_count == 1

    def test_filters(self):
        collector = LogCollector("session")
        collector.collect(entry("a", minutes=0))
        collector.collect(entry("b", minutes=10, event_type=AuditEventType.ERROR))

        window = TimeRange(Timestamp(BASE), Timestamp(BASE + timedelta(minutes=5)))
        assert [e.entry_id for e in collector.get_entries(time_range=window)] == ["a"]
        assert [e.entry_id for e in collector.get_entries(
            event_type=AuditEventType.ERROR)] == ["b"]


class TestMetricsCollector:

    def test_defaults_registered(self):
        metrics = MetricsCollector()
        definition = metrics.get_definition("fragments_accepted_total")

        assert definition.metric_type == MetricType.COUNTER
        assert metrics.get_metric("fragments_accepted_total") == []

    def test_aggregates(self):
        metrics = MetricsCollector()
        for value in (2.0, 4.0, 9.0):
            metrics.record("analysis_duration_ms", value)

        aggregates = metrics.compute_aggregates("analysis_duration_ms")
        assert aggregates == {'count': 3, 'sum': 15.0, 'min': 2.0, 'max': 9.0, 'avg': 5.0}
        assert metrics.total("analysis_duration_ms") == 15.0
        assert metrics.get_latest("analysis_duration_ms").value == 9.0

    def test_labels_sorted(self):
        metrics = MetricsCollector()
        metrics.record("channel_events_total", 1.0, {"kind": "end", "a": "b"})

        assert metrics.get_latest("channel_events_total").labels == (
            ("a", "b"), ("kind", "end")
        )

    def test_custom_metric(self):
        metrics = MetricsCollector()
        metrics.register_metric(MetricDefinition(
            name="custom_gauge", metric_type=MetricType.GAUGE, description="x"
        ))

        assert metrics.compute_aggregates("custom_gauge") == {}


class TestObservabilityEngine:

    def test_unified_log_sorted_across_layers(self):
        engine = ObservabilityEngine()
        engine.collect_audit(entry("late", layer="session", minutes=5))
        engine.collect_audit(entry("early", layer="ingestion", minutes=1))

        assert [e.entry_id for e in engine.get_unified_log()] == ["early", "late"]
        assert [e.entry_id for e in engine.get_layer_log("ingestion")] == ["early"]

    def test_unknown_layer_dropped(self):
        engine = ObservabilityEngine()
        engine.collect_audit(entry("x", layer="nowhere"))

        assert engine.get_unified_log() == []
        assert engine.get_layer_log("nowhere") == []

    def test_log_audit_returns_entry(self):
        engine = ObservabilityEngine()
        logged = engine.log_audit("listening_started", layer="engine")

        assert logged.entry_id.startswith("audit_")
        assert engine.get_layer_log("engine") == [logged]

    def test_empty_report(self):
        report = ObservabilityEngine().generate_audit_report()

        assert report['total_entries'] == 0
        assert report['time_range'] == {'start': None, 'end': None}
