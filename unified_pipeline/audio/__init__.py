"""Audio artifact pipeline: tone synthesis, WAV container, data URI."""
from .data_uri import from_data_uri, to_data_uri
from .tone import synthesize
from .wav import WavHeader, encode, read_header

__all__ = [
    "synthesize",
    "encode",
    "read_header",
    "WavHeader",
    "to_data_uri",
    "from_data_uri",
]
