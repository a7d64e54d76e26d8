"""A WebSocket connection bound to its underlying stream."""

from __future__ import annotations

from typing import Any, Callable

from .context import Role, WebSocketConfig, WebSocketContext
from .frame import CloseFrame
from .message import Message


class WebSocket:
    """WebSocket message stream over an already upgraded byte stream.

    ``stream`` may be a socket or any object with ``read``/``write``
    (and optionally ``flush``) methods.
    """

    def __init__(self, stream: Any, context: WebSocketContext) -> None:
        self.stream = stream
        self.context = context

    @classmethod
    def from_raw_socket(
        cls, stream: Any, role: Role, config: WebSocketConfig | None = None
    ) -> WebSocket:
        """Wrap a stream without performing a handshake."""
        return cls(stream, WebSocketContext(role, config))

    @classmethod
    def from_partially_read(
        cls,
        stream: Any,
        part: bytes,
        role: Role,
        config: WebSocketConfig | None = None,
    ) -> WebSocket:
        """Wrap a stream whose first bytes ``part`` were already read from it."""
        return cls(stream, WebSocketContext.from_partially_read(part, role, config))

    @property
    def config(self) -> WebSocketConfig:
        """The configuration of this connection."""
        return self.context.config

    def set_config(self, set_func: Callable[[WebSocketConfig], Any]) -> None:
        """Change the configuration in place through ``set_func``."""
        self.context.set_config(set_func)

    def can_read(self) -> bool:
        """Whether messages may still be read.

        Reading stops after a close message was received; it remains possible
        after sending one, since the peer may still send data first.
        """
        return self.context.can_read()

    def can_write(self) -> bool:
        """Whether messages may still be written.

        Writing stops as soon as a close message was sent or received.
        """
        return self.context.can_write()

    def read_message(self) -> Message:
        """Read the next message, sending queued pong and close replies first.

        Keep calling it after a close message until :class:`ConnectionClosed`
        is raised; the stream may then be dropped.
        """
        return self.context.read_message(self.stream)

    def write_message(self, message: Message) -> None:
        """Queue ``message`` and try to send everything queued.

        Raises :class:`SendQueueFull` when the send queue limit is reached,
        :class:`ConnectionClosed` when the connection may be dropped and
        :class:`AlreadyClosed` on any use after that.
        """
        self.context.write_message(self.stream, message)

    def write_pending(self) -> None:
        """Flush the pending send queue."""
        self.context.write_pending(self.stream)

    def close(self, code: CloseFrame | None = None) -> None:
        """Queue a close frame, once, and try to send pending data.

        Continue calling :meth:`read_message` or :meth:`write_pending` to
        drive the close handshake to completion.
        """
        self.context.close(self.stream, code)