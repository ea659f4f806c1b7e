from __future__ import annotations

import asyncio
from collections.abc import Iterator
import threading

import pytest

from nodeify.config import reset_config


@pytest.fixture(autouse=True)
def _reset_nodeify_config() -> Iterator[None]:
    """Each test starts and ends with the default emitter config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def background_event_loop() -> Iterator[asyncio.AbstractEventLoop]:
    """An event loop running forever on a daemon thread."""
    loop = asyncio.new_event_loop()
    started = threading.Event()

    def _run() -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(started.set)
        loop.run_forever()

    thread = threading.Thread(target=_run, name="nodeify-test-loop", daemon=True)
    thread.start()
    assert started.wait(timeout=1.0)
    try:
        yield loop
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=1.0)
        loop.close()
