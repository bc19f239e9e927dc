"""Pydantic schemas for API request/response."""
from unified_pipeline.schemas.diarization import (
    DiarizationEntryModel,
    ProcessResponse,
    StreamEntryMessage,
    StreamErrorMessage,
    StreamStoppedMessage,
    TargetAudioResponse,
    TimelineSegmentModel,
    entries_to_models,
    timeline_to_models,
)

__all__ = [
    "DiarizationEntryModel",
    "ProcessResponse",
    "StreamEntryMessage",
    "StreamErrorMessage",
    "StreamStoppedMessage",
    "TargetAudioResponse",
    "TimelineSegmentModel",
    "entries_to_models",
    "timeline_to_models",
]
