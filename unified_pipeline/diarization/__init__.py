"""
Diarization timeline core.

- DiarizationEntry: immutable speaker turn.
- DiarizationSession: batch (replace-all) or streaming (append-only) entries.
- StreamScheduler: periodic task feeding a streaming session from a script.
- project(): per-speaker timeline layout in percent of total duration.
"""
from __future__ import annotations

from unified_pipeline.diarization.models import DiarizationEntry, SessionMode
from unified_pipeline.diarization.scheduler import DEMO_STREAM_SCRIPT, StreamScheduler
from unified_pipeline.diarization.session import DiarizationSession
from unified_pipeline.diarization.timeline import TimelineSegment, project

__all__ = [
    "DiarizationEntry",
    "SessionMode",
    "DiarizationSession",
    "StreamScheduler",
    "DEMO_STREAM_SCRIPT",
    "TimelineSegment",
    "project",
]
