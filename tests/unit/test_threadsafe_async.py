from __future__ import annotations

import asyncio
import threading
from typing import Any

import pytest

from nodeify import EventEmitter
from nodeify.errors import EmitterClosedError
from nodeify.utils.threadsafe_async import destroy_threadsafe
from nodeify.utils.threadsafe_async import emit_threadsafe


def test_emit_threadsafe_delivers_on_loop_thread(
    background_event_loop: asyncio.AbstractEventLoop,
) -> None:
    ee = EventEmitter()
    seen: list[tuple[Any, str]] = []
    done = threading.Event()

    def listener(data=None):
        seen.append((data, threading.current_thread().name))
        done.set()

    ee.on("tick", listener)
    emit_threadsafe(ee, background_event_loop, "tick", 42).result(timeout=1.0)

    assert done.wait(timeout=1.0)
    assert seen == [(42, "nodeify-test-loop")]
    assert ee.event_count == 1
    destroy_threadsafe(ee, background_event_loop).result(timeout=1.0)


def test_emit_threadsafe_after_destroy_surfaces_closed_error(
    background_event_loop: asyncio.AbstractEventLoop,
) -> None:
    ee = EventEmitter()
    destroy_threadsafe(ee, background_event_loop).result(timeout=1.0)

    future = emit_threadsafe(ee, background_event_loop, "tick")

    assert future is not None
    with pytest.raises(EmitterClosedError):
        future.result(timeout=1.0)
    assert ee.event_count == 0


def test_destroy_threadsafe_runs_on_done(
    background_event_loop: asyncio.AbstractEventLoop,
) -> None:
    ee = EventEmitter()
    done: list[str] = []
    ee.on("tick", lambda data=None: None, on_done=lambda: done.append("done"))

    destroy_threadsafe(ee, background_event_loop).result(timeout=1.0)

    assert ee.closed
    assert done == ["done"]


def test_emit_threadsafe_raises_when_loop_not_running() -> None:
    loop = asyncio.new_event_loop()
    ee = EventEmitter()

    with pytest.raises(RuntimeError, match="not running"):
        emit_threadsafe(ee, loop, "tick")
    assert ee.event_count == 0

    loop.close()
