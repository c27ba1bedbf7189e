"""
Observability & Audit Layer

RESPONSIBILITY: Audit logging and metrics for every layer
ALLOWED INPUTS: AuditLogEntry records and metric samples from other layers
OUTPUTS: Unified audit log, metric series, audit report

WHAT THIS LAYER MUST NOT DO:
============================
- Modify session state or system behavior
- Filter or interpret events (only record them)
- Feed anything back into analysis

BOUNDARY ENFORCEMENT:
=====================
- Entries are frozen dataclasses; collectors only append
- Provides read-only copies of logs and metrics
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from enum import Enum
import hashlib

from ..contracts.base import Timestamp, TimeRange
from ..contracts.events import AuditLogEntry, AuditEventType, MetricPoint


LAYERS: Tuple[str, ...] = ('ingestion', 'session', 'engine')


# =============================================================================
# LOG COLLECTORS (One per layer)
# =============================================================================

class LogCollector:
    """
    Append-only audit collector for one layer.

    Entries already collected (same entry_id) are not stored twice, so a
    layer's log can be synced repeatedly.
    """

    def __init__(self, layer_name: str):
        self._layer_name = layer_name
        self._entries: List[AuditLogEntry] = []
        self._seen_ids: set = set()

    def collect(self, entry: AuditLogEntry) -> bool:
        """Collect an audit entry (append-only). Returns False for repeats."""
        if entry.entry_id in self._seen_ids:
            return False
        self._seen_ids.add(entry.entry_id)
        self._entries.append(entry)
        return True

    def get_entries(
        self,
        time_range: Optional[TimeRange] = None,
        event_type: Optional[AuditEventType] = None
    ) -> List[AuditLogEntry]:
        """Get entries, optionally filtered."""
        entries = self._entries

        if time_range:
            entries = [e for e in entries if time_range.contains(e.timestamp)]

        if event_type:
            entries = [e for e in entries if e.event_type == event_type]

        return list(entries)

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        return len(self._entries)


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

class MetricType(Enum):
    """Types of metrics collected."""
    COUNTER = "counter"
    GAUGE = "gauge"
    TIMING = "timing"


@dataclass
class MetricDefinition:
    """Definition of a metric to collect."""
    name: str
    metric_type: MetricType
    description: str
    labels: Tuple[str, ...] = field(default_factory=tuple)


class MetricsCollector:
    """
    Append-only time series per metric name.
    """

    def __init__(self):
        self._metrics: Dict[str, List[MetricPoint]] = {}
        self._definitions: Dict[str, MetricDefinition] = {}
        self._register_default_metrics()

    def _register_default_metrics(self):
        defaults = [
            MetricDefinition(
                name="fragments_accepted_total",
                metric_type=MetricType.COUNTER,
                description="Fragments accepted into the corpus",
                labels=("source",)
            ),
            MetricDefinition(
                name="fragments_rejected_total",
                metric_type=MetricType.COUNTER,
                description="Blank fragments ignored",
                labels=("source",)
            ),
            MetricDefinition(
                name="analysis_duration_ms",
                metric_type=MetricType.TIMING,
                description="Time spent in one fragment-acceptance transition"
            ),
            MetricDefinition(
                name="corpus_length_chars",
                metric_type=MetricType.GAUGE,
                description="Length of the compiled corpus"
            ),
            MetricDefinition(
                name="live_preview_updates_total",
                metric_type=MetricType.COUNTER,
                description="Interim transcript updates"
            ),
            MetricDefinition(
                name="recognition_failures_total",
                metric_type=MetricType.COUNTER,
                description="Recognition start failures and engine errors",
                labels=("error_code",)
            ),
            MetricDefinition(
                name="channel_events_total",
                metric_type=MetricType.COUNTER,
                description="Recognition events consumed from the channel",
                labels=("kind",)
            ),
        ]

        for definition in defaults:
            self.register_metric(definition)

    def register_metric(self, definition: MetricDefinition):
        """Register a new metric definition."""
        self._definitions[definition.name] = definition
        if definition.name not in self._metrics:
            self._metrics[definition.name] = []

    def get_definition(self, metric_name: str) -> Optional[MetricDefinition]:
        return self._definitions.get(metric_name)

    def record(
        self,
        metric_name: str,
        value: float,
        labels: Optional[Dict[str, str]] = None
    ):
        """Record a metric data point."""
        if metric_name not in self._metrics:
            self._metrics[metric_name] = []

        label_tuple = tuple(sorted(labels.items())) if labels else ()

        self._metrics[metric_name].append(MetricPoint(
            metric_name=metric_name,
            value=value,
            timestamp=Timestamp.now(),
            labels=label_tuple
        ))

    def get_metric(
        self,
        metric_name: str,
        time_range: Optional[TimeRange] = None
    ) -> List[MetricPoint]:
        """Get metric data points, optionally filtered by time range."""
        points = self._metrics.get(metric_name, [])

        if time_range:
            points = [p for p in points if time_range.contains(p.timestamp)]

        return list(points)

    def get_latest(self, metric_name: str) -> Optional[MetricPoint]:
        points = self._metrics.get(metric_name, [])
        return points[-1] if points else None

    def total(self, metric_name: str) -> float:
        """Sum of all recorded values (counter reading)."""
        return sum(p.value for p in self._metrics.get(metric_name, []))

    def compute_aggregates(
        self,
        metric_name: str,
        time_range: Optional[TimeRange] = None
    ) -> Dict[str, float]:
        """Compute aggregate statistics for a metric."""
        points = self.get_metric(metric_name, time_range)

        if not points:
            return {}

        values = [p.value for p in points]

        return {
            'count': len(values),
            'sum': sum(values),
            'min': min(values),
            'max': max(values),
            'avg': sum(values) / len(values),
        }


# =============================================================================
# OBSERVABILITY ENGINE
# =============================================================================

@dataclass(frozen=True)
class ObservabilityConfig:
    """Configuration for observability engine."""
    enable_metrics: bool = True


class ObservabilityEngine:
    """
    Central Observability Engine.

    BOUNDARY ENFORCEMENT:
    - ONLY observes, never modifies
    - Provides read-only access to collected data
    """

    def __init__(self, config: Optional[ObservabilityConfig] = None):
        self._config = config or ObservabilityConfig()
        self._collectors: Dict[str, LogCollector] = {
            layer: LogCollector(layer) for layer in LAYERS
        }
        self._metrics = MetricsCollector() if self._config.enable_metrics else None

    def collect_audit(self, entry: AuditLogEntry):
        """Collect an audit log entry from any layer."""
        collector = self._collectors.get(entry.layer)
        if collector:
            collector.collect(entry)

    def log_audit(
        self,
        action: str,
        entity_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        metadata: Tuple[Tuple[str, str], ...] = (),
        layer: str = "engine",
        event_type: AuditEventType = AuditEventType.SYSTEM
    ) -> AuditLogEntry:
        """Helper to log audit entry directly."""
        now = Timestamp.now()
        collector = self._collectors.get(layer)
        position = collector.entry_count if collector else 0
        entry_id = hashlib.sha256(
            f"{layer}_{action}|{position}|{now.value.timestamp()}".encode()
        ).hexdigest()[:16]

        entry = AuditLogEntry(
            entry_id=f"audit_{entry_id}",
            event_type=event_type,
            timestamp=now,
            layer=layer,
            action=action,
            entity_id=entity_id,
            entity_type=entity_type,
            metadata=metadata
        )
        self.collect_audit(entry)
        return entry

    def collect_metric(
        self,
        metric_name: str,
        value: float,
        labels: Optional[Dict[str, str]] = None
    ):
        """Collect a metric data point."""
        if self._metrics:
            self._metrics.record(metric_name, value, labels)

    def get_unified_log(
        self,
        time_range: Optional[TimeRange] = None,
        layers: Optional[List[str]] = None
    ) -> List[AuditLogEntry]:
        """Get unified log from all or specified layers."""
        target_layers = layers or list(self._collectors.keys())

        all_entries = []
        for layer_name in target_layers:
            collector = self._collectors.get(layer_name)
            if collector:
                all_entries.extend(collector.get_entries(time_range=time_range))

        # Stable sort keeps per-layer order for equal timestamps
        all_entries.sort(key=lambda e: e.timestamp.value)

        return all_entries

    def get_layer_log(
        self,
        layer_name: str,
        time_range: Optional[TimeRange] = None
    ) -> List[AuditLogEntry]:
        """Get log for a specific layer."""
        collector = self._collectors.get(layer_name)
        if not collector:
            return []
        return collector.get_entries(time_range=time_range)

    def get_metrics(self) -> Optional[MetricsCollector]:
        """Get metrics collector (read-only access)."""
        return self._metrics

    def generate_audit_report(
        self,
        time_range: Optional[TimeRange] = None
    ) -> Dict:
        """Generate audit report aggregated by layer and event type."""
        entries = self.get_unified_log(time_range=time_range)

        by_layer: Dict[str, int] = {}
        by_type: Dict[str, int] = {}

        for entry in entries:
            by_layer[entry.layer] = by_layer.get(entry.layer, 0) + 1
            by_type[entry.event_type.value] = by_type.get(entry.event_type.value, 0) + 1

        return {
            'total_entries': len(entries),
            'by_layer': by_layer,
            'by_event_type': by_type,
            'time_range': {
                'start': entries[0].timestamp.to_iso() if entries else None,
                'end': entries[-1].timestamp.to_iso() if entries else None,
            },
            'generated_at': Timestamp.now().to_iso()
        }


__all__ = [
    'LogCollector',
    'MetricType',
    'MetricDefinition',
    'MetricsCollector',
    'ObservabilityConfig',
    'ObservabilityEngine',
]
