"""
StreamScheduler: drives a DiarizationSession from a finite script of turns.

Every interval one scripted (speaker, text) turn is appended via
append_streamed. After the last turn the scheduler stops itself and the
session. The timer is an asyncio.Task owned by the scheduler; cancel()
cancels that task and stops the session before returning, so nothing is
appended afterwards even if a tick was already due.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import random
from typing import Any, Awaitable, Callable, Sequence, Union

from unified_pipeline.config import get_settings
from unified_pipeline.diarization.models import DiarizationEntry
from unified_pipeline.diarization.session import DiarizationSession
from unified_pipeline.errors import InvalidParameter, InvalidState

logger = logging.getLogger(__name__)

ScriptTurn = tuple[str, str]
EntryCallback = Callable[[DiarizationEntry], Union[None, Awaitable[None]]]

# Turns emitted by the live demo, in order
DEMO_STREAM_SCRIPT: tuple[ScriptTurn, ...] = (
    ("Target", "Okay, starting the stream now. "),
    ("Speaker_B", "I can hear you clearly. "),
    ("Target", "Perfect. Let's begin the real-time test. "),
    ("Speaker_B", "The latency seems very low. "),
    ("Target", "This is a great result for our pipeline. "),
)


class StreamScheduler:
    """One periodic task bound to one session. Not reusable once finished or cancelled."""

    def __init__(
        self,
        session: DiarizationSession,
        script: Sequence[ScriptTurn] = DEMO_STREAM_SCRIPT,
        interval_seconds: float | None = None,
        on_entry: EntryCallback | None = None,
        rng: random.Random | None = None,
    ) -> None:
        settings = get_settings()
        self._session = session
        self._script = tuple(script)
        self._interval = interval_seconds if interval_seconds is not None else settings.STREAM_INTERVAL_SECONDS
        if self._interval <= 0:
            raise InvalidParameter(f"interval must be > 0, got {self._interval}")
        self._confidence_min = settings.STREAM_CONFIDENCE_MIN
        self._confidence_max = settings.STREAM_CONFIDENCE_MAX
        self._on_entry = on_entry
        self._rng = rng or random.Random()
        self._task: asyncio.Task[Any] | None = None
        self._index = 0
        self._cancelled = False

    @property
    def emitted(self) -> int:
        """Number of scripted turns appended so far."""
        return self._index

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        """Put the session in streaming mode and schedule the first tick. Needs a running loop."""
        if self._task is not None:
            raise InvalidState("scheduler already started")
        if self._cancelled:
            raise InvalidState("scheduler was cancelled before start")
        self._session.start_streaming()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Stream scheduler started: %d turns every %.2fs", len(self._script), self._interval)

    def cancel(self) -> None:
        """Stop future ticks now. Safe to call repeatedly or after the script finished."""
        if self._task is None:
            # start() refuses a scheduler cancelled up front
            self._cancelled = True
        elif not self._task.done() and not self._cancelled:
            self._task.cancel()
            self._cancelled = True
            logger.info("Stream scheduler cancelled after %d/%d turns", self._index, len(self._script))
        self._session.stop_streaming()

    async def wait(self) -> None:
        """Wait until the script is exhausted or the scheduler is cancelled."""
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    def _next_confidence(self) -> float:
        return self._confidence_min + self._rng.random() * (self._confidence_max - self._confidence_min)

    async def _tick(self) -> None:
        speaker, text = self._script[self._index]
        entry = self._session.append_streamed(speaker, text, self._next_confidence())
        self._index += 1
        if self._on_entry is not None:
            result = self._on_entry(entry)
            if inspect.isawaitable(result):
                await result

    async def _run(self) -> None:
        while self._index < len(self._script):
            await asyncio.sleep(self._interval)
            if not self._session.is_streaming:
                # session stopped or replaced by its owner; end quietly
                logger.info("Session stopped externally after %d/%d turns", self._index, len(self._script))
                return
            await self._tick()
        self._session.stop_streaming()
        logger.info("Stream script exhausted after %d turns", self._index)
