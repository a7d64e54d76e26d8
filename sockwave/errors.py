"""Exceptions raised by the WebSocket machinery and a helper for non-blocking I/O."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

T = TypeVar("T")


class WebSocketError(Exception):
    """Base class of every error raised by this package."""


class ProtocolError(WebSocketError):
    """The peer (or the caller) broke the WebSocket protocol."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MessageTooLong(WebSocketError):
    """A message or frame exceeds the configured size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(f"Message too long: {size} > {max_size}")
        self.size = size
        self.max_size = max_size


class SendQueueFull(WebSocketError):
    """The send queue is full; the rejected message is kept on the exception."""

    def __init__(self, message: Any) -> None:
        super().__init__("Send queue is full")
        self.message = message


class ConnectionClosed(WebSocketError):
    """The connection was closed normally and may now be dropped."""

    def __init__(self) -> None:
        super().__init__("Connection closed normally")


class AlreadyClosed(WebSocketError):
    """An operation was attempted on a connection that is already closed."""

    def __init__(self) -> None:
        super().__init__("Trying to work with closed connection")


class Utf8Error(WebSocketError, ValueError):
    """Text data is not valid UTF-8."""

    def __init__(self, detail: str = "UTF-8 encoding error") -> None:
        super().__init__(detail)


def no_block(func: Callable[..., T], *args: Any, **kwargs: Any) -> T | None:
    """Call ``func``; return ``None`` instead of raising if the I/O would block.

    Any other exception propagates unchanged.
    """
    try:
        return func(*args, **kwargs)
    except BlockingIOError:
        return None