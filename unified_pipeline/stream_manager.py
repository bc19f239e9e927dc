"""
StreamManager: one WebSocket = one streaming diarization session.

Protocol:
- client sends the target speaker sample as one binary frame
- server checks the capture gate; on failure sends {"type": "error", ...} and closes
- server sends {"type": "started", "session_id": ...}
- each tick: {"type": "entry", "entry": {...}, "duration": s, "timeline": {...}}
- client may send text {"type": "stop"} at any time
- when the script ends or the client stops: {"type": "stopped", "diarization": [...], "transcript": "..."}
Disconnect cancels the scheduler; nothing is appended after that.
"""
from __future__ import annotations

import asyncio
import json
import logging
import random
import uuid
from typing import Any, Sequence

from fastapi import WebSocket

from unified_pipeline.capture import CapturePermission, get_capture_permission, require_capture
from unified_pipeline.config import get_settings
from unified_pipeline.diarization import (
    DEMO_STREAM_SCRIPT,
    DiarizationEntry,
    DiarizationSession,
    StreamScheduler,
    project,
)
from unified_pipeline.diarization.scheduler import ScriptTurn
from unified_pipeline.errors import CapabilityDenied, PipelineError
from unified_pipeline.schemas import (
    DiarizationEntryModel,
    StreamEntryMessage,
    StreamErrorMessage,
    StreamStoppedMessage,
    entries_to_models,
    timeline_to_models,
)
from unified_pipeline.transcript import format_transcript

logger = logging.getLogger(__name__)


class StreamManager:
    def __init__(
        self,
        websocket: WebSocket,
        permission: CapturePermission | None = None,
        script: Sequence[ScriptTurn] = DEMO_STREAM_SCRIPT,
        interval_seconds: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._ws = websocket
        self._permission = permission or get_capture_permission()
        self._script = script
        self._interval = interval_seconds
        self._rng = rng
        self._session_id = uuid.uuid4().hex[:12]
        self._padding = get_settings().TIMELINE_PADDING_SECONDS
        self._session: DiarizationSession | None = None
        self._scheduler: StreamScheduler | None = None
        self._closed = False

    async def _send_json(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._ws.send_text(json.dumps(payload))
        except Exception:
            self._closed = True
            if self._scheduler is not None:
                self._scheduler.cancel()

    async def _on_entry(self, entry: DiarizationEntry) -> None:
        """Scheduler callback: send the new turn with the timeline re-projected over all turns."""
        entries = self._session.entries
        duration = self._session.timeline_duration(self._padding)
        layout = project(entries, duration)
        msg = StreamEntryMessage(
            entry=DiarizationEntryModel.from_entry(entry),
            duration=duration,
            timeline=timeline_to_models(layout, entries),
        )
        await self._send_json(msg.model_dump())

    async def _receive_until_stop(self) -> None:
        """Return on client stop request or disconnect."""
        while True:
            msg = await self._ws.receive()
            if msg.get("type") == "websocket.disconnect":
                self._closed = True
                return
            text = msg.get("text")
            if not text:
                continue
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                logger.debug("Stream %s: ignoring non-JSON text frame", self._session_id)
                continue
            if isinstance(data, dict) and data.get("type") == "stop":
                logger.info("Stream %s: stop requested by client", self._session_id)
                return

    async def _receive_target_sample(self) -> bytes | None:
        msg = await self._ws.receive()
        if msg.get("type") == "websocket.disconnect":
            self._closed = True
            return None
        return msg.get("bytes")

    async def run(self) -> None:
        """Gate, stream until done/stop/disconnect, then report the final turns."""
        target = await self._receive_target_sample()
        if self._closed:
            return
        try:
            require_capture(self._permission, target)
        except PipelineError as e:
            code = "capability_denied" if isinstance(e, CapabilityDenied) else "invalid_parameter"
            logger.warning("Stream %s rejected: %s", self._session_id, e)
            await self._send_json(StreamErrorMessage(code=code, message=str(e)).model_dump())
            await self._close()
            return

        self._session = DiarizationSession(session_id=self._session_id)
        self._scheduler = StreamScheduler(
            self._session,
            self._script,
            interval_seconds=self._interval,
            on_entry=self._on_entry,
            rng=self._rng,
        )
        await self._send_json({"type": "started", "session_id": self._session_id})
        if self._closed:
            return
        self._scheduler.start()

        receiver = asyncio.create_task(self._receive_until_stop())
        runner = asyncio.create_task(self._scheduler.wait())
        try:
            await asyncio.wait({receiver, runner}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            self._scheduler.cancel()
            receiver.cancel()
            receiver_result, runner_result = await asyncio.gather(receiver, runner, return_exceptions=True)
        if isinstance(receiver_result, Exception):
            # socket is gone; nothing more can be sent
            logger.warning("Stream %s receive failed: %s", self._session_id, receiver_result)
            self._closed = True
        if isinstance(runner_result, Exception):
            logger.error("Stream %s scheduler failed: %s", self._session_id, runner_result)

        entries = self._session.entries
        stopped = StreamStoppedMessage(
            cancelled=self._scheduler.cancelled,
            diarization=entries_to_models(entries),
            transcript=format_transcript(entries),
        )
        await self._send_json(stopped.model_dump())
        await self._close()

    async def _close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._ws.close()
        except Exception:
            pass
