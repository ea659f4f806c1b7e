"""Console logging for scripts that embed nodeify."""

from __future__ import annotations

import logging

from nodeify.config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging at ``level`` or the configured ``log_level``."""
    logging.basicConfig(
        level=getattr(logging, level or get_config().log_level),
        format=LOG_FORMAT,
    )
