"""
VoiceField

Turns a live stream of short text fragments (speech results or typed
notes) into keywords, a sentiment score, an energy score, topic clusters,
ranked insight cards and a short reply, recomputed after every fragment.

LAYER STRUCTURE:
================

1. INGESTION LAYER (ingestion/)
   - Responsibility: Speech-recognition boundary and event channel
   - Outputs: RecognitionEvent (immutable, queued in arrival order)
   - MUST NOT: Analyze text or touch session state

2. NORMALIZATION LAYER (normalization/)
   - Responsibility: Text → filtered lowercase token sequence
   - MUST NOT: Count, rank or score tokens

3. CORE ANALYSIS LAYER (core/)
   - Responsibility: Keywords, sentiment, energy, clusters, insights, reply
   - MUST NOT: Keep state between calls or update incrementally

4. TEMPORAL LAYER (temporal/)
   - Responsibility: Injectable clock, pure session transitions
   - Outputs: SessionState (immutable, replaced wholesale)

5. PRESENTATION LAYER (presentation/)
   - Responsibility: Display-ready view models for the renderer
   - MUST NOT: Feed anything back into the session

6. OBSERVABILITY LAYER (observability/)
   - Responsibility: Audit log and metrics
   - MUST NOT: Modify system behavior

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: all records are frozen dataclasses
- Deterministic: the same corpus always yields the same Analysis
- Total analysis: empty input degrades to empty/baseline outputs
- Errors as data: boundary failures become Error values, not exceptions
"""

from .contracts import (
    Analysis, Cluster, Insight, Segment, SessionState,
    RecognitionEvent, RecognitionResult, Error, ErrorCode, Result, Timestamp
)
from .core import AnalysisEngine, analyze_text
from .engine import VoiceFieldEngine, VoiceFieldConfig
from .ingestion import ScriptedRecognition, UnavailableRecognition
from .temporal import LogicalClock

__version__ = "0.1.0"

__all__ = [
    'Analysis', 'Cluster', 'Insight', 'Segment', 'SessionState',
    'RecognitionEvent', 'RecognitionResult', 'Error', 'ErrorCode', 'Result',
    'Timestamp',
    'AnalysisEngine', 'analyze_text',
    'VoiceFieldEngine', 'VoiceFieldConfig',
    'ScriptedRecognition', 'UnavailableRecognition',
    'LogicalClock',
]
