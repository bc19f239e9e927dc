"""
Error taxonomy for the signal & timeline core.

Every error is local and recoverable: the operation is rejected and the
state it would have touched is left as it was. The HTTP layer maps these
to 4xx responses with a user-facing message.
"""
from __future__ import annotations


class PipelineError(Exception):
    """Base for all rejected core operations."""


class InvalidParameter(PipelineError, ValueError):
    """Bad synthesis/encoding/projection argument or out-of-range entry field."""


class EmptyBuffer(PipelineError, ValueError):
    """Attempt to encode a zero-length sample buffer."""


class InvalidState(PipelineError, RuntimeError):
    """Session operation called out of sequence (e.g. append while not streaming)."""


class CapabilityDenied(PipelineError, PermissionError):
    """Live capture was not granted; streaming may not start."""


class EncodingError(PipelineError, ValueError):
    """Input cannot be represented as a data URI (or a data URI cannot be parsed)."""
