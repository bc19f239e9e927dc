"""
Live capture gate. Streaming may only start after a granted capture request.

The platform permission prompt is modeled as one synchronous request that
answers granted/denied; the decision comes from config by default.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from unified_pipeline.config import get_settings
from unified_pipeline.errors import CapabilityDenied, InvalidParameter

logger = logging.getLogger(__name__)

DENIED_MESSAGE = (
    "Microphone access is required for streaming. Please enable it in your browser settings."
)
MISSING_TARGET_MESSAGE = "Please upload a target speaker sample before streaming."


class CapturePermission(ABC):
    """request() returns True when live capture is granted."""

    @abstractmethod
    def request(self) -> bool:
        ...


class StaticCapturePermission(CapturePermission):
    """Fixed answer; used for the demo and in tests."""

    def __init__(self, granted: bool) -> None:
        self._granted = granted

    def request(self) -> bool:
        return self._granted


def get_capture_permission() -> CapturePermission:
    """Return permission from config (CAPTURE_PERMISSION_GRANTED)."""
    settings = get_settings()
    return StaticCapturePermission(settings.CAPTURE_PERMISSION_GRANTED)


def require_capture(permission: CapturePermission, target_sample: bytes | None) -> None:
    """
    Gate for starting a stream: a target sample must be present and capture granted.
    Raises InvalidParameter / CapabilityDenied; nothing is started on failure.
    """
    if not target_sample:
        raise InvalidParameter(MISSING_TARGET_MESSAGE)
    if not permission.request():
        logger.warning("Live capture denied; streaming not started")
        raise CapabilityDenied(DENIED_MESSAGE)
