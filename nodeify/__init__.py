"""nodeify - asyncio event emitter with per-event listener removal."""

from nodeify.config import EmitterConfig
from nodeify.event_emitter import EventEmitter
from nodeify.event_emitter import ListenerHandle

__all__ = ["EmitterConfig", "EventEmitter", "ListenerHandle", "__version__"]
__version__ = "0.1.0"
