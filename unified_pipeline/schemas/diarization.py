"""
Interchange schemas for diarization results.

Entry: { speaker, start, end, text, confidence }.
Batch result: { diarization: [...], targetAudio: "<data uri>", duration, timeline, transcript }.
Timeline segments reference entries by index into `diarization`.
"""
from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

from unified_pipeline.diarization.models import DiarizationEntry
from unified_pipeline.diarization.timeline import TimelineSegment


class DiarizationEntryModel(BaseModel):
    """One speaker turn as sent to clients."""

    speaker: str
    start: float = Field(..., ge=0.0, description="Start time in seconds")
    end: float = Field(..., description="End time in seconds")
    text: str
    confidence: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_entry(cls, entry: DiarizationEntry) -> "DiarizationEntryModel":
        return cls(**entry.to_dict())

    def to_entry(self) -> DiarizationEntry:
        return DiarizationEntry(
            speaker=self.speaker, start=self.start, end=self.end, text=self.text, confidence=self.confidence
        )


class TimelineSegmentModel(BaseModel):
    left: float = Field(..., description="Left edge, percent of total duration")
    width: float = Field(..., description="Width, percent of total duration")
    index: int = Field(..., description="Index of the entry in `diarization`")


Timeline = dict[str, list[TimelineSegmentModel]]


class ProcessResponse(BaseModel):
    """Response body for POST /api/process."""

    model_config = ConfigDict(populate_by_name=True)

    diarization: list[DiarizationEntryModel]
    target_audio: str = Field("", alias="targetAudio")
    duration: float
    timeline: Timeline
    transcript: str = ""


class TargetAudioResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_audio: str = Field(..., alias="targetAudio")


class StreamEntryMessage(BaseModel):
    """One streamed turn plus the re-projected timeline."""

    type: Literal["entry"] = "entry"
    entry: DiarizationEntryModel
    duration: float
    timeline: Timeline


class StreamStoppedMessage(BaseModel):
    type: Literal["stopped"] = "stopped"
    cancelled: bool = False
    diarization: list[DiarizationEntryModel]
    transcript: str = ""


class StreamErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    code: str
    message: str


def entries_to_models(entries: Sequence[DiarizationEntry]) -> list[DiarizationEntryModel]:
    return [DiarizationEntryModel.from_entry(e) for e in entries]


def timeline_to_models(
    layout: dict[str, list[TimelineSegment]],
    entries: Sequence[DiarizationEntry],
) -> Timeline:
    """Replace each segment's entry with its position in `entries`."""
    # project() keeps input order within a speaker, so the n-th segment is the n-th entry of that speaker
    positions: dict[str, list[int]] = {}
    for i, e in enumerate(entries):
        positions.setdefault(e.speaker, []).append(i)
    return {
        speaker: [
            TimelineSegmentModel(left=s.left_percent, width=s.width_percent, index=index)
            for s, index in zip(segments, positions[speaker])
        ]
        for speaker, segments in layout.items()
    }
