"""Unified Neural Pipeline demo backend: tone/WAV/data-URI artifact and diarization timeline core."""

__version__ = "0.1.0"
