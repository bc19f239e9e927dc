"""
PortableAudioEncoder: bytes -> data:<mime>;base64,<payload>.

Encodes in bounded chunks. Chunk size is a multiple of 3 bytes, so each
chunk maps to whole base64 quanta with no padding in between and the
joined output equals encoding the whole buffer at once.
"""
from __future__ import annotations

import base64
import binascii

from unified_pipeline.config import get_settings
from unified_pipeline.errors import EncodingError

_PREFIX = "data:"
_BASE64_MARKER = ";base64,"


def to_data_uri(data: bytes, mime_type: str, chunk_bytes: int | None = None) -> str:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodingError(f"expected a bytes-like object, got {type(data).__name__}")
    # parameters (";codecs=1") are allowed; a comma would end the mediatype early
    if not mime_type or "," in mime_type:
        raise EncodingError(f"invalid mime type: {mime_type!r}")
    size = chunk_bytes if chunk_bytes is not None else get_settings().DATA_URI_CHUNK_BYTES
    if size <= 0 or size % 3 != 0:
        raise EncodingError(f"chunk size must be a positive multiple of 3, got {size}")

    view = memoryview(data).cast("B")
    parts = [
        base64.b64encode(view[i : i + size]).decode("ascii")
        for i in range(0, len(view), size)
    ]
    return f"{_PREFIX}{mime_type}{_BASE64_MARKER}{''.join(parts)}"


def from_data_uri(uri: str) -> tuple[str, bytes]:
    """Inverse of to_data_uri: returns (mime_type, raw_bytes)."""
    if not uri.startswith(_PREFIX) or _BASE64_MARKER not in uri:
        raise EncodingError("not a base64 data URI")
    mime_type, payload = uri[len(_PREFIX) :].rsplit(_BASE64_MARKER, 1)
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise EncodingError(f"invalid base64 payload: {e}") from e
