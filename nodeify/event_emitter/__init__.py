"""Broadcast-channel based event emitter."""

from nodeify.event_emitter.channel import BroadcastChannel
from nodeify.event_emitter.channel import Subscription
from nodeify.event_emitter.emitter import EventCallback
from nodeify.event_emitter.emitter import EventEmitter
from nodeify.event_emitter.listeners import NO_PAYLOAD
from nodeify.event_emitter.listeners import EventEntry
from nodeify.event_emitter.listeners import ListenerHandle
from nodeify.event_emitter.listeners import Notification
from nodeify.event_emitter.listeners import listener_key

__all__ = [
    "NO_PAYLOAD",
    "BroadcastChannel",
    "EventCallback",
    "EventEmitter",
    "EventEntry",
    "ListenerHandle",
    "Notification",
    "Subscription",
    "listener_key",
]
