"""
ToneSynthesizer: deterministic sine tone as PCM 16-bit mono samples.

Used for the demo "isolated target speaker" artifact. Same arguments always
give the same buffer, so the artifact (and its data URI) is reproducible.
"""
from __future__ import annotations

import numpy as np

from unified_pipeline.errors import InvalidParameter

INT16_MIN = -32768
INT16_MAX = 32767


def synthesize(
    frequency_hz: float,
    duration_seconds: float,
    sample_rate_hz: int,
    amplitude: float,
) -> np.ndarray:
    """
    Return floor(duration_seconds * sample_rate_hz) int16 samples of
    round(sin(2*pi*f*i/rate) * amplitude * 32767).

    Rounding is half-up (not numpy's half-to-even) and the result is clamped
    to the int16 range.
    """
    if frequency_hz <= 0:
        raise InvalidParameter(f"frequency must be > 0, got {frequency_hz}")
    if duration_seconds <= 0:
        raise InvalidParameter(f"duration must be > 0, got {duration_seconds}")
    if sample_rate_hz <= 0:
        raise InvalidParameter(f"sample rate must be > 0, got {sample_rate_hz}")
    if not 0.0 < amplitude <= 1.0:
        raise InvalidParameter(f"amplitude must be in (0, 1], got {amplitude}")

    total = int(np.floor(duration_seconds * sample_rate_hz))
    t = np.arange(total, dtype=np.float64) / sample_rate_hz
    scaled = np.sin(2.0 * np.pi * frequency_hz * t) * amplitude * INT16_MAX
    rounded = np.floor(scaled + 0.5)
    return rounded.clip(INT16_MIN, INT16_MAX).astype(np.int16)
