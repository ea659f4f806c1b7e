"""Error handling for the nodeify event emitter."""

from nodeify.errors.nodeify_errors import CapacityExceededError
from nodeify.errors.nodeify_errors import ConfigurationError
from nodeify.errors.nodeify_errors import EmitterClosedError
from nodeify.errors.nodeify_errors import ListenerError
from nodeify.errors.nodeify_errors import NodeifyError
from nodeify.errors.nodeify_errors import UnknownEventError

__all__ = [
    "CapacityExceededError",
    "ConfigurationError",
    "EmitterClosedError",
    "ListenerError",
    "NodeifyError",
    "UnknownEventError",
]
