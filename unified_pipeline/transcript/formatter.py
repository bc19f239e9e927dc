"""Transcript view: one line per diarization entry, in input order."""
from __future__ import annotations

from typing import Iterable

from unified_pipeline.diarization.models import DiarizationEntry


def format_line(entry: DiarizationEntry) -> str:
    """e.g. 'Target (0.45s - 5.62s): Hello, how are you?'"""
    return f"{entry.speaker} ({entry.start:.2f}s - {entry.end:.2f}s): {entry.text.strip()}"


def format_transcript(entries: Iterable[DiarizationEntry]) -> str:
    return "\n".join(format_line(e) for e in entries)
