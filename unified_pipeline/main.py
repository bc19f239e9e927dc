"""
FastAPI app: offline (batch) diarization over HTTP, simulated live
diarization over WebSocket.

POST /api/process: multipart `mixture` + `target` -> canned diarization,
timeline layout and the isolated-target audio as a data URI.
WS /ws/stream: see unified_pipeline.stream_manager for the message protocol.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, UploadFile, WebSocket, WebSocketDisconnect

from unified_pipeline.config import Settings, get_settings
from unified_pipeline.diarization import DiarizationSession, project
from unified_pipeline.errors import InvalidParameter
from unified_pipeline.schemas import ProcessResponse, TargetAudioResponse, entries_to_models, timeline_to_models
from unified_pipeline.services import InferenceStub, demo_target_audio
from unified_pipeline.stream_manager import StreamManager
from unified_pipeline.transcript import format_transcript

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL and optional LOG_FILE (console always)."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings())
    # One batch run at a time; the core has no reentrancy guard of its own
    app.state.processing = False
    # Synthesize the demo artifact once at startup
    demo_target_audio()
    yield


app = FastAPI(
    title="Unified Neural Pipeline",
    description="Target speaker identification and multispeaker ASR (demo backend)",
    lifespan=lifespan,
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/api/target-audio", response_model=TargetAudioResponse)
async def target_audio() -> TargetAudioResponse:
    return TargetAudioResponse(target_audio=demo_target_audio())


@app.post("/api/process", response_model=ProcessResponse)
async def process(
    mixture: UploadFile | None = File(None),
    target: UploadFile | None = File(None),
) -> ProcessResponse:
    """
    Offline processing: mixture recording + target speaker reference clip.
    Handles are passed to the inference stub unread beyond their bytes.
    409 while another run is in flight.
    """
    if getattr(app.state, "processing", False):
        raise HTTPException(status_code=409, detail="Audio is already being processed")
    app.state.processing = True
    try:
        mixture_bytes = await mixture.read() if mixture is not None else None
        target_bytes = await target.read() if target is not None else None
        result = await InferenceStub().process(mixture_bytes, target_bytes)
    except InvalidParameter as e:
        logger.warning("Process rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Process failed: %s", e)
        raise HTTPException(status_code=502, detail="Processing failed")
    finally:
        app.state.processing = False

    session = DiarizationSession()
    session.replace_all(result.diarization)
    entries = session.entries
    duration = session.timeline_duration()
    layout = project(entries, duration)
    return ProcessResponse(
        diarization=entries_to_models(entries),
        target_audio=result.target_audio,
        duration=duration,
        timeline=timeline_to_models(layout, entries),
        transcript=format_transcript(entries),
    )


@app.websocket("/ws/stream")
async def websocket_stream(websocket: WebSocket) -> None:
    """
    WebSocket: client sends the target sample (binary), then optionally {"type": "stop"}.
    Server sends started / entry / stopped JSON messages.
    """
    await websocket.accept()
    manager = StreamManager(websocket)
    try:
        await manager.run()
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Stream failed")
        try:
            await websocket.close()
        except Exception:
            pass
