"""
Diarization entry: one labeled speaker turn.

- speaker: label as produced by the backend (e.g. "Target", "Speaker_B")
- start, end: seconds, session-relative; 0 <= start < end
- text: utterance transcript
- confidence: 0.0-1.0
Entries are immutable; sessions replace or append, never edit.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum

from unified_pipeline.errors import InvalidParameter


class SessionMode(str, Enum):
    BATCH = "batch"
    STREAMING = "streaming"


@dataclass(frozen=True)
class DiarizationEntry:
    """One speaker turn with time span, transcript and confidence."""

    speaker: str
    start: float
    end: float
    text: str
    confidence: float

    def __post_init__(self) -> None:
        if not self.speaker:
            raise InvalidParameter("speaker must be a non-empty string")
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise InvalidParameter(f"start/end must be finite, got {self.start}, {self.end}")
        if self.start < 0:
            raise InvalidParameter(f"start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise InvalidParameter(f"end must be > start, got start={self.start} end={self.end}")
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidParameter(f"confidence must be in [0, 1], got {self.confidence}")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> dict:
        return asdict(self)
