"""Asyncio broadcast channel used as the emitter's dispatch backbone.

Every published item is fanned out to all live subscriptions. Each
subscription owns a FIFO queue and a worker task, so one subscription sees
items in publish order while no order is kept between subscriptions.
Workers start lazily on the first publish, which lets callers subscribe
before an event loop is running.

All publishing, joining and closing must happen on the loop that owns the
workers.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any
from typing import Callable

from nodeify.errors import EmitterClosedError

logger = logging.getLogger(__name__)

# Queued after the last item when the channel closes.
_CLOSE = object()

DataHandler = Callable[[Any], Any]
ErrorHandler = Callable[[BaseException], Any]
DoneHandler = Callable[[], Any]


class Subscription:
    """One listener attached to a :class:`BroadcastChannel`."""

    def __init__(
        self,
        channel: BroadcastChannel,
        on_data: DataHandler,
        *,
        on_error: ErrorHandler | None = None,
        on_done: DoneHandler | None = None,
        cancel_on_error: bool = True,
        name: str | None = None,
    ) -> None:
        self._channel = channel
        self._on_data = on_data
        self._on_error = on_error
        self._on_done = on_done
        self._cancel_on_error = cancel_on_error
        self.name = name or f"subscription-{id(self):x}"
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False
        self._done = False

    @property
    def is_active(self) -> bool:
        return not (self._cancelled or self._done)

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> int:
        """Number of items queued but not yet handled."""
        return self._queue.qsize()

    def cancel(self) -> None:
        """Detach from the channel and drop anything still queued.

        ``on_done`` is not called for a cancelled subscription.
        """
        if not self.is_active:
            return
        self._cancelled = True
        self._channel._discard(self)
        self._drop_queued()

        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # A worker cancelling itself exits after its current item.
        if task is not current:
            task.cancel()

    def _deliver(self, item: Any) -> None:
        if not self.is_active:
            return
        self._queue.put_nowait(item)
        self._ensure_worker()

    def _close(self) -> asyncio.Task[None] | None:
        if not self.is_active:
            return None
        self._queue.put_nowait(_CLOSE)
        self._ensure_worker()
        return self._task

    def _ensure_worker(self) -> None:
        if self._task is None:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run(), name=f"nodeify:{self.name}")

    def _drop_queued(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()

    async def _run(self) -> None:
        while not self._cancelled:
            item = await self._queue.get()
            try:
                if item is _CLOSE:
                    self._finish()
                    return
                await self._dispatch(item)
            finally:
                self._queue.task_done()

    async def _dispatch(self, item: Any) -> None:
        try:
            result = self._on_data(item)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._report_error(exc)
            if self._cancel_on_error:
                logger.debug("Cancelling %s after listener error", self.name)
                self.cancel()

    def _report_error(self, exc: Exception) -> None:
        if self._on_error is None:
            logger.exception("Unhandled error in %s", self.name)
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("Error handler for %s failed", self.name)

    def _finish(self) -> None:
        self._done = True
        self._channel._discard(self)
        if self._on_done is None:
            return
        try:
            self._on_done()
        except Exception:
            logger.exception("Done handler for %s failed", self.name)

    def __repr__(self) -> str:
        state = "active" if self.is_active else ("cancelled" if self._cancelled else "done")
        return f"<Subscription {self.name} {state} pending={self.pending}>"


class BroadcastChannel:
    """Single-producer fan-out channel with per-subscription queues."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        on_data: DataHandler,
        *,
        on_error: ErrorHandler | None = None,
        on_done: DoneHandler | None = None,
        cancel_on_error: bool = True,
        name: str | None = None,
    ) -> Subscription:
        """Attach a new subscription.

        Raises:
            EmitterClosedError: If the channel has been closed.
        """
        if self._closed:
            raise EmitterClosedError()
        subscription = Subscription(
            self,
            on_data,
            on_error=on_error,
            on_done=on_done,
            cancel_on_error=cancel_on_error,
            name=name,
        )
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, item: Any) -> None:
        """Queue ``item`` for every live subscription.

        Raises:
            EmitterClosedError: If the channel has been closed.
            RuntimeError: If called outside a running event loop.
        """
        if self._closed:
            raise EmitterClosedError()
        asyncio.get_running_loop()
        for subscription in list(self._subscriptions):
            subscription._deliver(item)

    async def join(self) -> None:
        """Wait until every live subscription has handled all queued items.

        Must not be awaited from inside a listener; the listener's own queue
        can never drain while it waits.
        """
        queues = [subscription._queue for subscription in self._subscriptions]
        if queues:
            await asyncio.gather(*(queue.join() for queue in queues))

    async def close(self) -> None:
        """Close the channel and wait for the workers to finish.

        Items published before closing are still delivered, then each
        subscription's ``on_done`` runs. Closing twice is a no-op. When
        called from inside a listener, that listener's own worker is not
        awaited.
        """
        if self._closed:
            return
        self._closed = True
        current = asyncio.current_task()
        tasks = [
            task
            for task in (subscription._close() for subscription in list(self._subscriptions))
            if task is not None and task is not current
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._subscriptions.clear()

    def _discard(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass
