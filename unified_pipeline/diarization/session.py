"""
DiarizationSession: the ordered speaker turns of one run.

Batch mode: the whole sequence is substituted at once (replace_all).
Streaming mode: turns are appended one at a time; each new turn starts
exactly gap_seconds after the previous one ends, so entries are ordered and
non-overlapping by construction.

No locking: the session assumes a single writer (one scheduler per session).
"""
from __future__ import annotations

import logging
from typing import Iterable

from unified_pipeline.config import get_settings
from unified_pipeline.diarization.models import DiarizationEntry, SessionMode
from unified_pipeline.errors import InvalidParameter, InvalidState

logger = logging.getLogger(__name__)


class DiarizationSession:
    def __init__(
        self,
        gap_seconds: float | None = None,
        chars_per_second: float | None = None,
        minimum_duration: float | None = None,
        session_id: str | None = None,
    ) -> None:
        settings = get_settings()
        self._gap = gap_seconds if gap_seconds is not None else settings.STREAM_GAP_SECONDS
        self._chars_per_second = (
            chars_per_second if chars_per_second is not None else settings.STREAM_CHARS_PER_SECOND
        )
        self._min_duration = (
            minimum_duration if minimum_duration is not None else settings.STREAM_MIN_UTTERANCE_SECONDS
        )
        if self._gap < 0:
            raise InvalidParameter(f"gap_seconds must be >= 0, got {self._gap}")
        if self._chars_per_second <= 0:
            raise InvalidParameter(f"chars_per_second must be > 0, got {self._chars_per_second}")
        if self._min_duration <= 0:
            raise InvalidParameter(f"minimum_duration must be > 0, got {self._min_duration}")
        self._session_id = session_id or "-"
        self._entries: list[DiarizationEntry] = []
        self._mode = SessionMode.BATCH
        self._streaming = False
        self._current_time = 0.0

    @property
    def entries(self) -> tuple[DiarizationEntry, ...]:
        """Snapshot in append order."""
        return tuple(self._entries)

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    @property
    def current_time(self) -> float:
        """Start time of the next streamed turn."""
        return self._current_time

    @property
    def gap_seconds(self) -> float:
        return self._gap

    def replace_all(self, entries: Iterable[DiarizationEntry]) -> None:
        """Batch: substitute the whole sequence. Stops streaming if active."""
        new_entries = list(entries)
        for e in new_entries:
            if not isinstance(e, DiarizationEntry):
                raise InvalidParameter(f"expected DiarizationEntry, got {type(e).__name__}")
        if self._streaming:
            self.stop_streaming()
        self._mode = SessionMode.BATCH
        self._entries = new_entries
        logger.info("Session %s: batch result with %d entries", self._session_id, len(new_entries))

    def start_streaming(self) -> None:
        """Clear entries, enter streaming mode, rewind the cursor to 0."""
        self._entries = []
        self._mode = SessionMode.STREAMING
        self._streaming = True
        self._current_time = 0.0
        logger.info("Session %s: streaming started", self._session_id)

    def utterance_duration(self, text: str) -> float:
        """Speech-rate proxy: len(text) / chars_per_second, floored at minimum_duration."""
        return max(len(text) / self._chars_per_second, self._min_duration)

    def append_streamed(self, speaker: str, text: str, confidence: float) -> DiarizationEntry:
        """
        Append the next streamed turn at the cursor and advance it by
        duration + gap. Raises InvalidState when not streaming; a rejected
        entry leaves the session untouched.
        """
        if not self._streaming:
            raise InvalidState("append_streamed called while not streaming")
        start = self._current_time
        end = start + self.utterance_duration(text)
        entry = DiarizationEntry(speaker=speaker, start=start, end=end, text=text, confidence=confidence)
        self._entries.append(entry)
        self._current_time = end + self._gap
        logger.debug(
            "Session %s: +%s [%.2f-%.2f] conf=%.2f", self._session_id, speaker, start, end, confidence
        )
        return entry

    def stop_streaming(self) -> None:
        """Leave streaming mode; accumulated entries stay. Idempotent."""
        if not self._streaming:
            return
        self._streaming = False
        logger.info("Session %s: streaming stopped with %d entries", self._session_id, len(self._entries))

    def timeline_duration(self, padding: float | None = None) -> float:
        """Duration to project the timeline over: last end + padding (padding alone when empty)."""
        pad = padding if padding is not None else get_settings().TIMELINE_PADDING_SECONDS
        return max((e.end for e in self._entries), default=0.0) + pad
