"""
WavContainerEncoder: PCM 16-bit mono samples -> canonical 44-byte-header WAV.

Layout (little-endian): RIFF, 36 + data_len, WAVE, "fmt ", 16, PCM=1,
channels=1, sample_rate, byte_rate=rate*2, block_align=2, bits=16,
"data", data_len, samples. read_header() parses the same layout back.
"""
from __future__ import annotations

import io
import struct
import wave
from dataclasses import dataclass

import numpy as np

from unified_pipeline.errors import EmptyBuffer, InvalidParameter

# PCM contract: signed int16, little-endian, mono
SAMPLE_WIDTH = 2
NCHANNELS = 1
BITS_PER_SAMPLE = 16
PCM_FORMAT = 1

HEADER_SIZE = 44
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class WavHeader:
    """Fields of the canonical 44-byte header."""

    chunk_size: int
    fmt_chunk_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def sample_count(self) -> int:
        return self.data_size // self.block_align if self.block_align else 0


def encode(samples: np.ndarray, sample_rate_hz: int) -> bytes:
    """
    Pack samples into a WAV container. One open, header once, all frames, close once.
    Raises EmptyBuffer for zero samples (an empty data chunk is unplayable).
    """
    if sample_rate_hz <= 0:
        raise InvalidParameter(f"sample rate must be > 0, got {sample_rate_hz}")
    pcm = np.asarray(samples)
    if pcm.size == 0:
        raise EmptyBuffer("cannot encode an empty sample buffer")
    if pcm.dtype != np.int16:
        if not np.issubdtype(pcm.dtype, np.integer):
            raise InvalidParameter(f"samples must be integers, got dtype {pcm.dtype}")
        if pcm.min() < -32768 or pcm.max() > 32767:
            raise InvalidParameter("samples must fit in signed 16-bit range")
        pcm = pcm.astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(NCHANNELS)
        wav.setsampwidth(SAMPLE_WIDTH)
        wav.setframerate(sample_rate_hz)
        wav.writeframes(pcm.astype("<i2").tobytes())
    return buf.getvalue()


def read_header(data: bytes) -> WavHeader:
    """Parse the canonical header at the start of data. Raises InvalidParameter if it is not one."""
    if len(data) < HEADER_SIZE:
        raise InvalidParameter(f"WAV data too short: {len(data)} bytes < {HEADER_SIZE}")
    (
        riff,
        chunk_size,
        wave_id,
        fmt_id,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits,
        data_id,
        data_size,
    ) = _HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave_id != b"WAVE":
        raise InvalidParameter("not a RIFF/WAVE container")
    if fmt_id != b"fmt " or data_id != b"data":
        raise InvalidParameter("not a canonical 44-byte PCM header")
    return WavHeader(
        chunk_size=chunk_size,
        fmt_chunk_size=fmt_size,
        audio_format=audio_format,
        num_channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        data_size=data_size,
    )
