import asyncio
import random

import pytest

from unified_pipeline.diarization import DEMO_STREAM_SCRIPT, DiarizationSession, StreamScheduler
from unified_pipeline.errors import InvalidParameter, InvalidState

TICK = 0.01


def make_scheduler(session, script=DEMO_STREAM_SCRIPT, interval=TICK, **kwargs) -> StreamScheduler:
    return StreamScheduler(session, script, interval_seconds=interval, rng=random.Random(0), **kwargs)


@pytest.mark.asyncio
async def test_runs_script_to_completion_and_stops_session() -> None:
    session = DiarizationSession(gap_seconds=0.5)
    scheduler = make_scheduler(session)
    scheduler.start()
    assert session.is_streaming
    await scheduler.wait()

    entries = session.entries
    assert [(e.speaker, e.text) for e in entries] == list(DEMO_STREAM_SCRIPT)
    assert not session.is_streaming
    assert scheduler.done and not scheduler.cancelled
    assert scheduler.emitted == len(DEMO_STREAM_SCRIPT)
    for e in entries:
        assert 0.90 <= e.confidence <= 0.99
    for prev, nxt in zip(entries, entries[1:]):
        assert nxt.start == pytest.approx(prev.end + 0.5)


@pytest.mark.asyncio
async def test_two_turn_script_timings() -> None:
    script = [("Target", "Okay, starting the stream now. "), ("Speaker_B", "I can hear you clearly. ")]
    session = DiarizationSession(gap_seconds=0.5)
    scheduler = make_scheduler(session, script)
    scheduler.start()
    await scheduler.wait()
    first, second = session.entries
    assert first.start == 0.0
    assert first.end == pytest.approx(len(script[0][1]) / 15)
    assert second.start == pytest.approx(first.end + 0.5)


@pytest.mark.asyncio
async def test_callbacks_see_entries_in_append_order() -> None:
    seen = []

    async def on_entry(entry):
        seen.append(entry)

    session = DiarizationSession()
    scheduler = make_scheduler(session, on_entry=on_entry)
    scheduler.start()
    await scheduler.wait()
    assert seen == list(session.entries)


@pytest.mark.asyncio
async def test_sync_callback_supported() -> None:
    seen = []
    session = DiarizationSession()
    scheduler = make_scheduler(session, on_entry=seen.append)
    scheduler.start()
    await scheduler.wait()
    assert len(seen) == len(DEMO_STREAM_SCRIPT)


@pytest.mark.asyncio
async def test_cancel_from_callback_stops_after_first_entry() -> None:
    session = DiarizationSession()
    scheduler = None

    def on_entry(entry):
        scheduler.cancel()

    scheduler = make_scheduler(session, on_entry=on_entry)
    scheduler.start()
    await scheduler.wait()
    await asyncio.sleep(TICK * 5)
    assert len(session.entries) == 1
    assert scheduler.cancelled
    assert not session.is_streaming


@pytest.mark.asyncio
async def test_cancel_halts_further_appends() -> None:
    first = asyncio.Event()
    session = DiarizationSession()
    scheduler = make_scheduler(session, interval=0.05, on_entry=lambda e: first.set())
    scheduler.start()
    await first.wait()
    scheduler.cancel()
    count = len(session.entries)
    await asyncio.sleep(0.3)
    assert len(session.entries) == count
    assert count < len(DEMO_STREAM_SCRIPT)


@pytest.mark.asyncio
async def test_cancel_before_first_tick_appends_nothing() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session, interval=0.05)
    scheduler.start()
    scheduler.cancel()
    await scheduler.wait()
    await asyncio.sleep(0.1)
    assert session.entries == ()
    assert scheduler.done


@pytest.mark.asyncio
async def test_cancel_is_idempotent_and_safe_after_completion() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session)
    scheduler.start()
    await scheduler.wait()
    scheduler.cancel()
    scheduler.cancel()
    assert not scheduler.cancelled
    assert len(session.entries) == len(DEMO_STREAM_SCRIPT)


@pytest.mark.asyncio
async def test_cancel_twice_while_running() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session, interval=0.05)
    scheduler.start()
    scheduler.cancel()
    scheduler.cancel()
    await scheduler.wait()
    assert scheduler.cancelled


@pytest.mark.asyncio
async def test_start_twice_rejected() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session)
    scheduler.start()
    with pytest.raises(InvalidState):
        scheduler.start()
    scheduler.cancel()
    await scheduler.wait()


@pytest.mark.asyncio
async def test_empty_script_finishes_immediately() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session, script=[])
    scheduler.start()
    await scheduler.wait()
    assert session.entries == ()
    assert not session.is_streaming


def test_non_positive_interval_rejected() -> None:
    with pytest.raises(InvalidParameter):
        StreamScheduler(DiarizationSession(), DEMO_STREAM_SCRIPT, interval_seconds=0)


@pytest.mark.asyncio
async def test_same_seed_gives_same_confidences() -> None:
    runs = []
    for _ in range(2):
        session = DiarizationSession()
        scheduler = make_scheduler(session)
        scheduler.start()
        await scheduler.wait()
        runs.append([e.confidence for e in session.entries])
    assert runs[0] == runs[1]


def test_cancel_before_start_makes_start_fail() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session)
    scheduler.cancel()
    scheduler.cancel()
    assert scheduler.cancelled
    with pytest.raises(InvalidState):
        scheduler.start()
    assert not session.is_streaming
    assert session.entries == ()


@pytest.mark.asyncio
async def test_session_stopped_directly_ends_scheduler_quietly() -> None:
    session = DiarizationSession()
    scheduler = make_scheduler(session, on_entry=lambda e: session.stop_streaming())
    scheduler.start()
    await scheduler.wait()
    await asyncio.sleep(TICK * 5)
    assert len(session.entries) == 1
    assert scheduler.done
    assert not scheduler.cancelled
    assert scheduler.emitted == 1


@pytest.mark.asyncio
async def test_batch_replace_during_stream_ends_scheduler_quietly(sample_entries) -> None:
    first = asyncio.Event()
    session = DiarizationSession()
    scheduler = make_scheduler(session, interval=0.05, on_entry=lambda e: first.set())
    scheduler.start()
    await first.wait()
    session.replace_all(sample_entries)
    await scheduler.wait()
    assert scheduler.done
    assert session.entries == tuple(sample_entries)
