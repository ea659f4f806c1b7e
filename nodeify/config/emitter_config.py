"""Centralized configuration for nodeify event emitters.

New emitters read their defaults from the active :class:`EmitterConfig`
(see :mod:`nodeify.config.config_manager`), so an application can raise the
listener ceiling or opt into legacy duplicate subscriptions in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Literal

from nodeify.errors import ConfigurationError

DEFAULT_MAX_LISTENERS = 50

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# camelCase spellings accepted by from_mapping.
_KEY_ALIASES = {
    "maxListeners": "max_listeners",
    "duplicateSubscriptions": "duplicate_subscriptions",
    "logLevel": "log_level",
}


@dataclass
class EmitterConfig:
    """Settings applied to every newly constructed emitter."""

    max_listeners: int = DEFAULT_MAX_LISTENERS

    # When True, every ``on`` call attaches its own subscription even for an
    # already-registered (event, listener) pair, so the listener runs once per
    # subscription per emit.
    duplicate_subscriptions: bool = False

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> EmitterConfig:
        """Create config from a plain mapping such as parsed JSON or TOML."""
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in {"max_listeners", "duplicate_subscriptions", "log_level"}:
                raise ConfigurationError(f"Unknown config key: {key}", config_key=key)
            kwargs[name] = value

        config = cls(**kwargs)
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid setups."""
        if (
            isinstance(self.max_listeners, bool)
            or not isinstance(self.max_listeners, int)
            or self.max_listeners < 0
        ):
            raise ConfigurationError(
                "max_listeners must be a non-negative integer",
                config_key="max_listeners",
                details={"max_listeners": self.max_listeners},
            )

        if not isinstance(self.duplicate_subscriptions, bool):
            raise ConfigurationError(
                "duplicate_subscriptions must be a boolean",
                config_key="duplicate_subscriptions",
                details={"duplicate_subscriptions": self.duplicate_subscriptions},
            )

        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}",
                config_key="log_level",
                details={"log_level": self.log_level},
            )


# Default configuration instance
DEFAULT_CONFIG = EmitterConfig()
