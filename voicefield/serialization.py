import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict

from .contracts.events import SessionState


class SessionStateEncoder(json.JSONEncoder):
    """
    JSON Encoder for session snapshots.

    RULES:
    1. View models (frozen dataclass trees) collapse to plain dicts.
    2. Tuples become lists; field order is kept.
    """

    def default(self, obj: Any) -> Any:
        if is_dataclass(obj):
            return asdict(obj)

        return super().default(obj)


def snapshot_to_dict(state: SessionState) -> Dict[str, Any]:
    """Plain-data view of a session snapshot, in renderer field names."""
    analysis = state.analysis
    return {
        'corpus': state.corpus,
        'analysis': {
            'keywords': list(analysis.keywords),
            'sentiment': analysis.sentiment,
            'energy': analysis.energy,
            'clusters': [
                {'label': c.label, 'score': c.score, 'summary': c.summary}
                for c in analysis.clusters
            ],
        },
        'insights': [
            {
                'id': i.insight_id,
                'label': i.label,
                'detail': i.detail,
                'pulse': i.pulse,
                'delta': i.delta,
            }
            for i in state.insights
        ],
        'segments': [
            {
                'id': s.segment_id.value,
                'text': s.text,
                'timestamp': s.timestamp.epoch_ms,
            }
            for s in state.segments
        ],
        'reply': state.reply,
        'live_preview': state.live_preview,
        'listening': state.listening,
        'last_updated': state.last_updated.epoch_ms,
        'sequence': state.sequence,
    }


def dumps_snapshot(state: SessionState, indent: int = 2) -> str:
    return json.dumps(
        snapshot_to_dict(state),
        cls=SessionStateEncoder,
        indent=indent,
        ensure_ascii=False
    )


def dumps_view_model(view_model: Any, indent: int = 2) -> str:
    """Serialize a presentation view model (frozen dataclass tree)."""
    return json.dumps(view_model, cls=SessionStateEncoder, indent=indent, ensure_ascii=False)
