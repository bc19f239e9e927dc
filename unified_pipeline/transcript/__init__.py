"""Transcript rendering of diarization entries."""
from .formatter import format_line, format_transcript

__all__ = ["format_line", "format_transcript"]
