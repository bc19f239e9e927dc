"""Application configuration. Loads from env vars."""
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Demo "isolated target speaker" artifact: A4 sine, PCM 16-bit mono
    TONE_FREQUENCY_HZ: float = 440.0
    TONE_DURATION_SECONDS: float = 1.5
    TONE_SAMPLE_RATE: int = 44100
    TONE_AMPLITUDE: float = 0.2

    # Base64 is produced chunk by chunk; must be a multiple of 3 so output matches whole-buffer encoding
    DATA_URI_CHUNK_BYTES: int = 32766

    # Batch inference stub resolves after this delay (no progress in between)
    BATCH_DELAY_SECONDS: float = 2.5

    # Streaming: one scripted turn per tick
    STREAM_INTERVAL_SECONDS: float = 2.0
    STREAM_GAP_SECONDS: float = 0.5  # silence between consecutive streamed turns
    STREAM_CHARS_PER_SECOND: float = 15.0  # speech-rate proxy for utterance duration
    STREAM_MIN_UTTERANCE_SECONDS: float = 0.5  # floor so short texts never give zero-length turns
    STREAM_CONFIDENCE_MIN: float = 0.90
    STREAM_CONFIDENCE_MAX: float = 0.99

    # Timeline duration = last turn end + padding
    TIMELINE_PADDING_SECONDS: float = 2.0

    # Live capture gate: stands in for the browser microphone prompt
    CAPTURE_PERMISSION_GRANTED: bool = True

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path empty = console only
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.DATA_URI_CHUNK_BYTES <= 0 or self.DATA_URI_CHUNK_BYTES % 3 != 0:
            raise ValueError("DATA_URI_CHUNK_BYTES must be a positive multiple of 3")
        if self.STREAM_GAP_SECONDS < 0:
            raise ValueError("STREAM_GAP_SECONDS must be >= 0")
        if self.STREAM_CHARS_PER_SECOND <= 0:
            raise ValueError("STREAM_CHARS_PER_SECOND must be > 0")
        if not 0.0 <= self.STREAM_CONFIDENCE_MIN <= self.STREAM_CONFIDENCE_MAX <= 1.0:
            raise ValueError("STREAM_CONFIDENCE_MIN/MAX must satisfy 0 <= min <= max <= 1")
        return self


def get_settings() -> Settings:
    return Settings()
