"""
Batch inference stub: mixture + target sample -> diarization + isolated target audio.

No real model runs. After a fixed delay the canned diarization is returned
together with a synthesized tone standing in for the isolated speaker.
Handles are opaque and never inspected beyond "present and non-empty".
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import lru_cache

from unified_pipeline.audio import encode, synthesize, to_data_uri
from unified_pipeline.config import get_settings
from unified_pipeline.diarization.models import DiarizationEntry
from unified_pipeline.errors import InvalidParameter

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Please upload both mixture and target audio files."
WAV_MIME_TYPE = "audio/wav"

MOCK_DIARIZATION: tuple[DiarizationEntry, ...] = (
    DiarizationEntry("Target", 0.45, 5.62, "Hello, how are you? I wanted to talk about the project.", 0.97),
    DiarizationEntry("Speaker_B", 5.63, 10.25, "I'm doing well, thank you. Yes, let's discuss the new design.", 0.95),
    DiarizationEntry(
        "Target",
        10.50,
        15.80,
        "Great. I think the latest mockups look promising, but we need to adjust the color palette.",
        0.98,
    ),
    DiarizationEntry(
        "Speaker_C", 16.10, 22.34, "I agree. A darker theme might be more appropriate for the target audience.", 0.92
    ),
    DiarizationEntry(
        "Speaker_B", 22.50, 28.15, "Okay, I'll have the design team work on a few alternatives by end of day.", 0.96
    ),
)


@dataclass
class BatchResult:
    """Outcome of one offline processing run."""

    diarization: list[DiarizationEntry] = field(default_factory=list)
    target_audio: str = ""


def build_target_audio(
    frequency_hz: float | None = None,
    duration_seconds: float | None = None,
    sample_rate_hz: int | None = None,
    amplitude: float | None = None,
) -> str:
    """Tone -> WAV -> data URI. Arguments default to the TONE_* settings."""
    settings = get_settings()
    rate = sample_rate_hz if sample_rate_hz is not None else settings.TONE_SAMPLE_RATE
    samples = synthesize(
        frequency_hz if frequency_hz is not None else settings.TONE_FREQUENCY_HZ,
        duration_seconds if duration_seconds is not None else settings.TONE_DURATION_SECONDS,
        rate,
        amplitude if amplitude is not None else settings.TONE_AMPLITUDE,
    )
    return to_data_uri(encode(samples, rate), WAV_MIME_TYPE)


@lru_cache(maxsize=1)
def demo_target_audio() -> str:
    """Demo artifact, synthesized once per process."""
    uri = build_target_audio()
    logger.info("Demo target audio generated (%d chars)", len(uri))
    return uri


class InferenceStub:
    """Stands in for the inference backend. Callers serialize requests; there is no guard here."""

    def __init__(self, delay_seconds: float | None = None) -> None:
        settings = get_settings()
        self._delay = delay_seconds if delay_seconds is not None else settings.BATCH_DELAY_SECONDS

    async def process(self, mixture: bytes | None, target: bytes | None) -> BatchResult:
        if not mixture or not target:
            raise InvalidParameter(MISSING_INPUT_MESSAGE)
        logger.info("Batch run: mixture=%d bytes target=%d bytes", len(mixture), len(target))
        await asyncio.sleep(self._delay)
        return BatchResult(diarization=list(MOCK_DIARIZATION), target_audio=demo_target_audio())
