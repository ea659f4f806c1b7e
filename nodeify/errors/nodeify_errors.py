"""Centralized error types for the nodeify event emitter.

This module provides a hierarchy of exceptions for the failures an emitter
reports to its caller, along with a shared base class that carries an error
code and structured details.
"""

from __future__ import annotations

from typing import Any


class NodeifyError(Exception):
    """Base exception for all nodeify errors.

    All nodeify-specific exceptions inherit from this class so callers can
    catch emitter failures with a single ``except`` clause.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a plain dictionary."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause!s})"
        return self.message


class ConfigurationError(NodeifyError):
    """Raised when there's a configuration problem."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, error_code="ConfigurationError", details=details, **kwargs)
        self.config_key = config_key


class CapacityExceededError(NodeifyError):
    """Raised when a registration would push the listener count past the ceiling."""

    def __init__(
        self,
        *,
        max_listeners: int,
        listener_count: int,
        event_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["max_listeners"] = max_listeners
        details["listener_count"] = listener_count
        if event_id is not None:
            details["event_id"] = event_id
        message = (
            f"Too many listeners assigned: max listeners {max_listeners}, "
            f"total listeners {listener_count}. Raise max_listeners or remove "
            "a listener first."
        )
        super().__init__(message, error_code="CapacityExceeded", details=details, **kwargs)
        self.max_listeners = max_listeners
        self.listener_count = listener_count
        self.event_id = event_id


class EmitterClosedError(NodeifyError):
    """Raised when an emitter is used after ``destroy``."""

    def __init__(self, event_id: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if event_id is not None:
            details["event_id"] = event_id
            message = f"Cannot emit {event_id!r}: emitter is closed"
        else:
            message = "Emitter is closed"
        super().__init__(message, error_code="EmitterClosed", details=details, **kwargs)
        self.event_id = event_id


class UnknownEventError(NodeifyError):
    """Raised when detaching from an event that was never registered."""

    def __init__(self, event_id: str, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["event_id"] = event_id
        super().__init__(
            f"No listeners were ever registered for event {event_id!r}",
            error_code="UnknownEvent",
            details=details,
            **kwargs,
        )
        self.event_id = event_id


class ListenerError(NodeifyError):
    """Wraps an exception raised by a listener callback during dispatch."""

    def __init__(
        self,
        event_id: str,
        *,
        listener: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["event_id"] = event_id
        if listener:
            details["listener"] = listener
        super().__init__(
            f"Listener {listener or '<unknown>'} failed handling {event_id!r}",
            error_code="ListenerError",
            details=details,
            **kwargs,
        )
        self.event_id = event_id
        self.listener = listener
