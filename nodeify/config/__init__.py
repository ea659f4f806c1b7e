"""Configuration management for nodeify."""

from nodeify.config.config_manager import ConfigContext
from nodeify.config.config_manager import config_context
from nodeify.config.config_manager import get_config
from nodeify.config.config_manager import reset_config
from nodeify.config.config_manager import set_config
from nodeify.config.config_manager import update_config
from nodeify.config.emitter_config import DEFAULT_CONFIG
from nodeify.config.emitter_config import DEFAULT_MAX_LISTENERS
from nodeify.config.emitter_config import EmitterConfig

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_MAX_LISTENERS",
    "ConfigContext",
    "EmitterConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
    "update_config",
]
