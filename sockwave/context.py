"""The state machine behind a WebSocket connection after the handshake."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .codec import FrameCodec
from .coding import CloseCode, OpCode
from .errors import (
    AlreadyClosed,
    ConnectionClosed,
    ProtocolError,
    SendQueueFull,
    no_block,
)
from .frame import CloseFrame, Frame
from .message import IncompleteMessage, Message, MessageKind

_log = logging.getLogger(__name__)

_MAX_CONTROL_PAYLOAD = 125


class Role(Enum):
    """Which side of the connection this endpoint is."""

    SERVER = "server"
    CLIENT = "client"


@dataclass
class WebSocketConfig:
    """Limits and options of a WebSocket connection.

    ``None`` for a size limit means no limit. ``accept_unmasked_frames``
    lets a server take unmasked frames from clients, against RFC 6455.
    """

    max_send_queue: int | None = None
    max_message_size: int | None = 64 << 20
    max_frame_size: int | None = 16 << 20
    accept_unmasked_frames: bool = False


class _State(Enum):
    ACTIVE = "active"
    CLOSED_BY_US = "closed by us"
    CLOSED_BY_PEER = "closed by peer"
    CLOSE_ACKNOWLEDGED = "close acknowledged"
    TERMINATED = "terminated"

    def is_active(self) -> bool:
        return self is _State.ACTIVE

    def can_read(self) -> bool:
        # After sending a close frame the peer may still send data before
        # it sees our close, so that data is still delivered.
        return self in (_State.ACTIVE, _State.CLOSED_BY_US)


class WebSocketContext:
    """Protocol state of a WebSocket connection, independent of its stream."""

    def __init__(self, role: Role, config: WebSocketConfig | None = None) -> None:
        self.role = Role(role)
        self.config = config if config is not None else WebSocketConfig()
        self._codec = FrameCodec()
        self._state = _State.ACTIVE
        self._incomplete: IncompleteMessage | None = None
        self._send_queue: deque[Frame] = deque()
        self._pong: Frame | None = None

    @classmethod
    def from_partially_read(
        cls, part: bytes, role: Role, config: WebSocketConfig | None = None
    ) -> WebSocketContext:
        """Create a context whose first bytes were already read from the stream."""
        context = cls(role, config)
        context._codec = FrameCodec(bytes(part))
        return context

    def set_config(self, set_func: Callable[[WebSocketConfig], Any]) -> None:
        """Change the configuration in place through ``set_func``."""
        set_func(self.config)

    def can_read(self) -> bool:
        """Whether messages may still be read.

        Reading stops once a close message was received.
        """
        return self._state.can_read()

    def can_write(self) -> bool:
        """Whether messages may still be written.

        Writing stops as soon as a close message was sent or received.
        """
        return self._state.is_active()

    def _check_not_terminated(self) -> None:
        if self._state is _State.TERMINATED:
            raise AlreadyClosed()

    def read_message(self, stream: Any) -> Message:
        """Read the next message from ``stream``.

        Pong and close replies are sent along the way; a blocking write
        does not stop the read.
        """
        self._check_not_terminated()
        while True:
            no_block(self.write_pending, stream)
            message = self._read_message_frame(stream)
            if message is not None:
                _log.debug("Received message %s", message)
                return message

    def write_message(self, stream: Any, message: Message) -> None:
        """Queue ``message`` and try to send everything queued.

        A pong replaces any pending pong and is sent ahead of the queue.
        Raises :class:`SendQueueFull` when the queue limit is reached.
        """
        self._check_not_terminated()
        if not self._state.is_active():
            raise ProtocolError("Sending after closing is not allowed")

        limit = self.config.max_send_queue
        if limit is not None:
            if len(self._send_queue) >= limit:
                no_block(self.write_pending, stream)
            if len(self._send_queue) >= limit:
                raise SendQueueFull(message)

        kind = message.kind
        if kind is MessageKind.TEXT:
            frame = Frame.message(message.payload.encode("utf-8"), OpCode.TEXT, True)
        elif kind is MessageKind.BINARY:
            frame = Frame.message(message.payload, OpCode.BINARY, True)
        elif kind is MessageKind.PING:
            frame = Frame.ping(message.payload)
        elif kind is MessageKind.PONG:
            self._pong = Frame.pong(message.payload)
            self.write_pending(stream)
            return
        elif kind is MessageKind.CLOSE:
            self.close(stream, message.payload)
            return
        else:
            frame = message.payload

        self._send_queue.append(frame)
        self.write_pending(stream)

    def write_pending(self, stream: Any) -> None:
        """Send pending data: the unfinished frame, a pong, then the queue.

        A server whose close handshake is over raises
        :class:`ConnectionClosed` once everything is sent.
        """
        self._codec.write_pending(stream)

        pong, self._pong = self._pong, None
        if pong is not None:
            _log.debug("Sending pong reply")
            self._send_one_frame(stream, pong)

        _log.debug("Frames still in queue: %d", len(self._send_queue))
        while self._send_queue:
            self._send_one_frame(stream, self._send_queue.popleft())

        # The server closes the underlying connection first (RFC 6455).
        if self.role is Role.SERVER and not self._state.can_read():
            self._state = _State.TERMINATED
            raise ConnectionClosed()

    def close(self, stream: Any, code: CloseFrame | None = None) -> None:
        """Queue a close frame, once, and try to send pending data."""
        if self._state is _State.ACTIVE:
            self._state = _State.CLOSED_BY_US
            self._send_queue.append(Frame.close(code))
        self.write_pending(stream)

    def _check_reset(self, exc: ConnectionResetError) -> None:
        if not self._state.can_read():
            raise ConnectionClosed() from exc

    def _read_message_frame(self, stream: Any) -> Message | None:
        try:
            frame = self._codec.read_frame(stream, self.config.max_frame_size)
        except ConnectionResetError as exc:
            self._check_reset(exc)
            raise

        if frame is None:
            previous, self._state = self._state, _State.TERMINATED
            if previous in (_State.CLOSED_BY_PEER, _State.CLOSE_ACKNOWLEDGED):
                raise ConnectionClosed()
            raise ProtocolError("Connection reset without closing handshake")

        if not self._state.can_read():
            raise ProtocolError("Remote sent after having closed")

        header = frame.header
        if header.rsv1 or header.rsv2 or header.rsv3:
            raise ProtocolError("Reserved bits are non-zero")

        if self.role is Role.SERVER:
            if frame.is_masked():
                frame.apply_mask()
            elif not self.config.accept_unmasked_frames:
                raise ProtocolError("Received an unmasked frame from client")
        elif frame.is_masked():
            raise ProtocolError("Received a masked frame from server")

        opcode = header.opcode
        if opcode.is_control():
            return self._handle_control(frame)
        return self._handle_data(frame)

    def _handle_control(self, frame: Frame) -> Message | None:
        opcode = frame.header.opcode
        if not frame.header.is_final:
            raise ProtocolError("Fragmented control frame")
        if len(frame.payload) > _MAX_CONTROL_PAYLOAD:
            raise ProtocolError("Control frame too big (payload must be 125 bytes or less)")
        if opcode is OpCode.CLOSE:
            deliver, close = self._do_close(frame.close_frame())
            return Message(MessageKind.CLOSE, close) if deliver else None
        if opcode is OpCode.PING:
            data = frame.payload
            if self._state.is_active():
                self._pong = Frame.pong(data)
            return Message(MessageKind.PING, data)
        if opcode is OpCode.PONG:
            return Message(MessageKind.PONG, frame.payload)
        raise ProtocolError(f"Unknown control frame type: {int(opcode)}")

    def _handle_data(self, frame: Frame) -> Message | None:
        opcode = frame.header.opcode
        fin = frame.header.is_final
        limit = self.config.max_message_size

        if opcode is OpCode.CONTINUE:
            if self._incomplete is None:
                raise ProtocolError("Continue frame but nothing to continue")
            self._incomplete.extend(frame.payload, limit)
            if fin:
                message, self._incomplete = self._incomplete, None
                return message.complete()
            return None

        if self._incomplete is not None:
            raise ProtocolError(f"While waiting for more fragments received: {opcode}")

        if opcode in (OpCode.TEXT, OpCode.BINARY):
            kind = MessageKind.TEXT if opcode is OpCode.TEXT else MessageKind.BINARY
            message = IncompleteMessage(kind)
            message.extend(frame.payload, limit)
            if fin:
                return message.complete()
            self._incomplete = message
            return None

        raise ProtocolError(f"Unknown data frame type: {int(opcode)}")

    def _do_close(self, close: CloseFrame | None) -> tuple[bool, CloseFrame | None]:
        """Handle a received close frame; say whether to hand it to the user."""
        _log.debug("Received close frame: %r", close)
        state = self._state
        if state is _State.ACTIVE:
            self._state = _State.CLOSED_BY_PEER
            if close is not None and not close.code.is_allowed():
                close = CloseFrame(CloseCode.PROTOCOL, "Protocol violation")
            reply = Frame.close(close)
            _log.debug("Replying to close with %r", reply)
            self._send_queue.append(reply)
            return True, close
        if state in (_State.CLOSED_BY_PEER, _State.CLOSE_ACKNOWLEDGED):
            return False, None
        if state is _State.CLOSED_BY_US:
            self._state = _State.CLOSE_ACKNOWLEDGED
            return True, close
        raise RuntimeError("close frame received on a terminated connection")

    def _send_one_frame(self, stream: Any, frame: Frame) -> None:
        if self.role is Role.CLIENT:
            # Frames sent by a client must be masked (RFC 6455).
            frame.set_random_mask()
        _log.debug("Sending frame: %r", frame)
        try:
            self._codec.write_frame(stream, frame)
        except ConnectionResetError as exc:
            self._check_reset(exc)
            raise