"""Pytest configuration for tests directory."""
import pytest

from unified_pipeline.diarization import DiarizationEntry


@pytest.fixture
def fast_settings(monkeypatch):
    """No batch delay and millisecond ticks so API/stream tests stay fast."""
    monkeypatch.setenv("BATCH_DELAY_SECONDS", "0")
    monkeypatch.setenv("STREAM_INTERVAL_SECONDS", "0.01")
    monkeypatch.setenv("CAPTURE_PERMISSION_GRANTED", "true")


@pytest.fixture
def sample_entries() -> list[DiarizationEntry]:
    return [
        DiarizationEntry("Target", 0.45, 5.62, "Hello, how are you?", 0.97),
        DiarizationEntry("Speaker_B", 5.63, 10.25, "I'm doing well, thank you.", 0.95),
        DiarizationEntry("Target", 10.50, 15.80, "Great.", 0.98),
        DiarizationEntry("Speaker_C", 16.10, 22.34, "I agree.", 0.92),
    ]
