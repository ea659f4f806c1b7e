"""Listener identity and per-event bookkeeping types."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable
from typing import Hashable
from typing import NamedTuple


class _NoPayload:
    def __repr__(self) -> str:
        return "NO_PAYLOAD"


# Default for ``emit``; the delivered payload becomes the event identifier.
NO_PAYLOAD: Any = _NoPayload()


class Notification(NamedTuple):
    """A single item published on the broadcast channel."""

    event_id: str
    payload: Any


@dataclass(frozen=True)
class _IdentityToken:
    """Stand-in key for callables that cannot be hashed."""

    object_id: int


def listener_key(callback: Callable[..., Any]) -> Hashable:
    """Return the identity used to track ``callback`` in the registry.

    Plain functions hash by identity and bound methods by their
    ``(instance, function)`` pair, so re-reading ``obj.method`` yields the
    same key. Closures created independently get distinct keys even when
    they are structurally identical.
    """
    try:
        hash(callback)
    except TypeError:
        return _IdentityToken(id(callback))
    return callback


def describe_listener(callback: Callable[..., Any]) -> str:
    """Short human-readable name for log messages."""
    name = getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None)
    return name or repr(callback)


@dataclass(frozen=True)
class ListenerHandle:
    """Returned by a successful registration.

    Pass it to ``remove_listener`` instead of re-passing the original
    callback.
    """

    event_id: str
    key: Hashable
    callback: Callable[..., Any] = field(compare=False, repr=False)


@dataclass
class EventEntry:
    """Active and removed listener identities for one event identifier."""

    active: set[Hashable] = field(default_factory=set)
    removed: set[Hashable] = field(default_factory=set)

    def detach(self, key: Hashable) -> None:
        self.active.discard(key)
        self.removed.add(key)

    def attach(self, key: Hashable) -> None:
        # A key in removed stays silenced even once it is active again.
        self.active.add(key)

    def is_eligible(self, key: Hashable) -> bool:
        return key not in self.removed
