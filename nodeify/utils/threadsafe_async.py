from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING
from typing import Any

from nodeify.event_emitter.listeners import NO_PAYLOAD

if TYPE_CHECKING:
    import concurrent.futures

    from nodeify.event_emitter.emitter import EventEmitter


def _submit(
    coro: Coroutine[Any, Any, None],
    loop: asyncio.AbstractEventLoop,
) -> concurrent.futures.Future[None]:
    if loop.is_closed() or not loop.is_running():
        coro.close()
        raise RuntimeError("Target event loop is not running")
    try:
        return asyncio.run_coroutine_threadsafe(coro, loop)
    except Exception:
        coro.close()
        raise


def emit_threadsafe(
    emitter: EventEmitter,
    loop: asyncio.AbstractEventLoop,
    event_id: str,
    payload: Any = NO_PAYLOAD,
) -> concurrent.futures.Future[None]:
    """Emit on ``emitter`` from a thread that does not own ``loop``.

    The returned future raises ``EmitterClosedError`` when the emitter has
    been destroyed by the time the emit runs.

    Raises:
        RuntimeError: If ``loop`` is closed or not running.
    """
    return _submit(emitter.emit(event_id, payload), loop)


def destroy_threadsafe(
    emitter: EventEmitter,
    loop: asyncio.AbstractEventLoop,
) -> concurrent.futures.Future[None]:
    """Destroy ``emitter`` on ``loop`` from any thread."""
    return _submit(emitter.destroy(), loop)
