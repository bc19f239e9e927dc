"""
TimelineProjector: per-speaker horizontal placement of diarization entries.

left = start / duration * 100, width = (end - start) / duration * 100.
Speakers keep first-seen order; entries keep input order within a speaker
(callers supply time-ordered entries, nothing is re-sorted here).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from unified_pipeline.diarization.models import DiarizationEntry
from unified_pipeline.errors import InvalidParameter


@dataclass(frozen=True)
class TimelineSegment:
    left_percent: float
    width_percent: float
    entry: DiarizationEntry


def project(
    entries: Sequence[DiarizationEntry],
    duration: float,
) -> dict[str, list[TimelineSegment]]:
    """Group entries by speaker and place them on a 0-100% track. Built fresh on every call."""
    if duration <= 0:
        raise InvalidParameter(f"duration must be > 0, got {duration}")
    for e in entries:
        if e.end > duration:
            raise InvalidParameter(f"entry end {e.end} exceeds timeline duration {duration}")

    speakers = list(dict.fromkeys(e.speaker for e in entries))
    return {
        speaker: [
            TimelineSegment(
                left_percent=e.start / duration * 100.0,
                width_percent=(e.end - e.start) / duration * 100.0,
                entry=e,
            )
            for e in entries
            if e.speaker == speaker
        ]
        for speaker in speakers
    }
