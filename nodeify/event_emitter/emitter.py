"""Asynchronous event emitter built on a single broadcast channel.

Typical flow::

    def greet(data=None):
        print("Hello world.")

    def count(counter, data=None):
        print(f"{data} has been called {counter} times.")

    async def main():
        async with EventEmitter() as ee:
            ee.on("test", greet)
            ee.on("test1", count, [5])
            await ee.emit("test")       # greet("test")
            await ee.emit("test1")      # count(5, "test1")
            ee.remove_listener("test", greet)
            await ee.emit("test")       # nothing runs
            await ee.drain()

Listeners are tracked by identity, so pass named functions or keep a
reference to the callable (or the :class:`ListenerHandle` returned by
:meth:`EventEmitter.on`) for later removal. Two closures built separately
are different listeners even if their code is the same.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable
from typing import Hashable
from typing import Iterable
from typing import Union

from nodeify.config import EmitterConfig
from nodeify.config import get_config
from nodeify.errors import CapacityExceededError
from nodeify.errors import EmitterClosedError
from nodeify.errors import ListenerError
from nodeify.errors import UnknownEventError
from nodeify.event_emitter.channel import BroadcastChannel
from nodeify.event_emitter.listeners import NO_PAYLOAD
from nodeify.event_emitter.listeners import EventEntry
from nodeify.event_emitter.listeners import ListenerHandle
from nodeify.event_emitter.listeners import Notification
from nodeify.event_emitter.listeners import describe_listener
from nodeify.event_emitter.listeners import listener_key

if TYPE_CHECKING:
    import types

    from nodeify.event_emitter.channel import Subscription

logger = logging.getLogger(__name__)

EventCallback = Callable[..., Any]
ListenerRef = Union[EventCallback, ListenerHandle]


def _check_event_id(event_id: Any) -> None:
    if not isinstance(event_id, str):
        raise TypeError(f"event_id must be a str, got {type(event_id).__name__}")
    if not event_id:
        raise ValueError("event_id must be a non-empty string")


def _resolve_key(event_id: str, listener: ListenerRef) -> Hashable:
    if isinstance(listener, ListenerHandle):
        if listener.event_id != event_id:
            raise ValueError(
                f"Handle was registered for {listener.event_id!r}, not {event_id!r}"
            )
        return listener.key
    return listener_key(listener)


class EventEmitter:
    """Registry of named listeners dispatched through a broadcast channel.

    Registration and removal are synchronous bookkeeping guarded by one lock
    per emitter. :meth:`emit`, :meth:`drain` and :meth:`destroy` are
    coroutines and must run on the event loop that delivers to listeners.
    """

    def __init__(
        self,
        max_listeners: int | None = None,
        *,
        config: EmitterConfig | None = None,
    ) -> None:
        config = config or get_config()
        self._lock = threading.RLock()
        self._channel = BroadcastChannel()
        self._events: dict[str, EventEntry] = {}
        self._subscriptions: dict[tuple[str, Hashable], Subscription] = {}
        self._duplicate_subscriptions = config.duplicate_subscriptions
        self._event_count = 0
        self._listener_count = 0
        self._max_listeners = 0
        self.max_listeners = config.max_listeners if max_listeners is None else max_listeners

    # -- counters -----------------------------------------------------------

    @property
    def event_count(self) -> int:
        """Number of successful :meth:`emit` calls."""
        return self._event_count

    @event_count.setter
    def event_count(self, value: int) -> None:
        with self._lock:
            self._event_count = value

    @property
    def listener_count(self) -> int:
        """Listeners currently counted as registered across all events."""
        return self._listener_count

    @listener_count.setter
    def listener_count(self, value: int) -> None:
        with self._lock:
            self._listener_count = value

    @property
    def max_listeners(self) -> int:
        return self._max_listeners

    @max_listeners.setter
    def max_listeners(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"max_listeners must be a non-negative integer, got {value!r}")
        with self._lock:
            self._max_listeners = value

    @property
    def closed(self) -> bool:
        return self._channel.is_closed

    # -- registration -------------------------------------------------------

    def on(
        self,
        event_id: str,
        callback: EventCallback,
        args: Iterable[Any] = (),
        on_error: Callable[[BaseException], Any] | None = None,
        on_done: Callable[[], Any] | None = None,
        cancel_on_error: bool = True,
    ) -> ListenerHandle | None:
        """Register ``callback`` to run whenever ``event_id`` is emitted.

        The callback is invoked as ``callback(*args, payload)``; the payload
        is the event identifier unless :meth:`emit` was given one. Coroutine
        functions are awaited before the same listener sees the next event.

        Args:
            event_id: Non-empty event identifier.
            callback: Listener; its identity is the unit of removal.
            args: Extra positional arguments placed before the payload.
            on_error: Receives exceptions raised by the callback. Without
                it, failures are logged.
            on_done: Called once when the emitter is destroyed.
            cancel_on_error: Stop delivering to this registration after its
                first failure.

        Returns:
            A handle usable with :meth:`remove_listener`, or ``None`` when
            the emitter has already been destroyed.

        Raises:
            CapacityExceededError: If one more listener would exceed
                :attr:`max_listeners`.
        """
        _check_event_id(event_id)
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")

        with self._lock:
            if self.closed:
                logger.warning("Ignoring listener for %r: emitter is closed", event_id)
                return None

            key = listener_key(callback)
            handle = ListenerHandle(event_id, key, callback)
            entry = self._events.get(event_id)
            existing = self._subscriptions.get((event_id, key))
            counted = entry is not None and key in entry.active
            if (
                counted
                and existing is not None
                and existing.is_active
                and not self._duplicate_subscriptions
            ):
                logger.debug("%s already listening to %r", describe_listener(callback), event_id)
                return handle

            # A counted listener whose subscription was cancelled after an
            # error only gets a fresh subscription.
            needs_slot = self._duplicate_subscriptions or not counted
            if needs_slot and self._listener_count + 1 > self._max_listeners:
                raise CapacityExceededError(
                    max_listeners=self._max_listeners,
                    listener_count=self._listener_count,
                    event_id=event_id,
                )

            if self._duplicate_subscriptions or existing is None or not existing.is_active:
                try:
                    self._subscriptions[(event_id, key)] = self._channel.subscribe(
                        self._make_dispatcher(event_id, key, callback, tuple(args)),
                        on_error=self._make_error_handler(event_id, callback, on_error),
                        on_done=on_done,
                        cancel_on_error=cancel_on_error,
                        name=f"{event_id}:{describe_listener(callback)}",
                    )
                except EmitterClosedError:
                    # destroy() closed the channel from another thread.
                    logger.warning("Ignoring listener for %r: emitter is closed", event_id)
                    return None

            if needs_slot:
                self._listener_count += 1
            if entry is None:
                entry = self._events[event_id] = EventEntry()
            entry.attach(key)
            logger.debug(
                "Registered %s for %r (%d/%d listeners)",
                describe_listener(callback),
                event_id,
                self._listener_count,
                self._max_listeners,
            )
            return handle

    add_listener = on

    def _make_dispatcher(
        self,
        event_id: str,
        key: Hashable,
        callback: EventCallback,
        args: tuple[Any, ...],
    ) -> Callable[[Notification], Any]:
        def dispatch(notification: Notification) -> Any:
            if notification.event_id != event_id:
                return None
            with self._lock:
                entry = self._events.get(event_id)
                if entry is None or not entry.is_eligible(key):
                    return None
            return callback(*args, notification.payload)

        return dispatch

    def _make_error_handler(
        self,
        event_id: str,
        callback: EventCallback,
        on_error: Callable[[BaseException], Any] | None,
    ) -> Callable[[BaseException], Any]:
        if on_error is not None:
            return on_error

        def log_error(exc: BaseException) -> None:
            error = ListenerError(event_id, listener=describe_listener(callback), cause=exc)
            logger.error("%s", error, exc_info=exc)

        return log_error

    # -- emission -----------------------------------------------------------

    async def emit(self, event_id: str, payload: Any = NO_PAYLOAD) -> None:
        """Publish ``event_id`` to every listener.

        Returns once the notification is queued; listeners run afterwards on
        the loop. Use :meth:`drain` to wait for them.

        Raises:
            EmitterClosedError: If the emitter has been destroyed.
        """
        with self._lock:
            if self.closed:
                raise EmitterClosedError(event_id)
            _check_event_id(event_id)
            if payload is NO_PAYLOAD:
                payload = event_id
            self._channel.publish(Notification(event_id, payload))
            self._event_count += 1
        await asyncio.sleep(0)

    async def drain(self) -> None:
        """Wait until listeners have handled every event emitted so far."""
        await self._channel.join()

    # -- detachment ---------------------------------------------------------

    def _entry(self, event_id: str) -> EventEntry:
        entry = self._events.get(event_id)
        if entry is None:
            raise UnknownEventError(event_id)
        return entry

    def remove_listener(self, event_id: str, listener: ListenerRef) -> None:
        """Stop ``listener`` from running for ``event_id``.

        The listener keeps running for any other event it is registered on.

        Raises:
            UnknownEventError: If nothing was ever registered for ``event_id``.
            ValueError: If ``listener`` is a handle for a different event.
        """
        with self._lock:
            entry = self._entry(event_id)
            entry.detach(_resolve_key(event_id, listener))
            self._listener_count -= 1
        logger.debug("Removed listener from %r", event_id)

    off = remove_listener

    def remove_listeners(self, event_id: str, listeners: Iterable[ListenerRef]) -> None:
        """Batch form of :meth:`remove_listener`."""
        keys = {_resolve_key(event_id, listener) for listener in listeners}
        with self._lock:
            entry = self._entry(event_id)
            for key in keys:
                entry.detach(key)
            self._listener_count -= len(keys)
        logger.debug("Removed %d listener(s) from %r", len(keys), event_id)

    def remove_all_listeners(self, event_id: str) -> None:
        """Detach every listener currently active for ``event_id``."""
        with self._lock:
            entry = self._entry(event_id)
            moved = list(entry.active)
            for key in moved:
                entry.detach(key)
            self._listener_count -= len(moved)
        logger.debug("Removed all %d listener(s) from %r", len(moved), event_id)

    # -- inspection ---------------------------------------------------------

    def event_ids(self) -> list[str]:
        with self._lock:
            return list(self._events)

    def listeners(self, event_id: str) -> frozenset[Hashable]:
        """Identities currently active for ``event_id``."""
        with self._lock:
            entry = self._events.get(event_id)
            return frozenset(entry.active) if entry else frozenset()

    def removed_listeners(self, event_id: str) -> frozenset[Hashable]:
        """Identities detached from ``event_id``."""
        with self._lock:
            entry = self._events.get(event_id)
            return frozenset(entry.removed) if entry else frozenset()

    def has_listeners(self, event_id: str) -> bool:
        return bool(self.listeners(event_id))

    # -- lifecycle ----------------------------------------------------------

    async def destroy(self) -> None:
        """Close the channel for good.

        Pending notifications are still delivered and ``on_done`` handlers
        run before this returns. Destroying twice is not an error.
        """
        if self.closed:
            return
        await self._channel.close()
        with self._lock:
            self._events.clear()
            self._subscriptions.clear()
        logger.debug("Emitter destroyed after %d event(s)", self._event_count)

    async def __aenter__(self) -> EventEmitter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        await self.destroy()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return (
            f"<EventEmitter {state} listeners={self._listener_count}/{self._max_listeners} "
            f"events={self._event_count}>"
        )
