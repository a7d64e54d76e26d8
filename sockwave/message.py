"""Complete and partially received WebSocket messages."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import MessageTooLong, Utf8Error
from .frame import CloseFrame, Frame


class MessageKind(Enum):
    """The forms a WebSocket message may take."""

    TEXT = "text"
    BINARY = "binary"
    PING = "ping"
    PONG = "pong"
    CLOSE = "close"
    FRAME = "frame"


_BYTE_KINDS = (MessageKind.BINARY, MessageKind.PING, MessageKind.PONG)


class IncompleteMessage:
    """A text or binary message whose fragments are still arriving."""

    def __init__(self, kind: MessageKind) -> None:
        if kind not in (MessageKind.TEXT, MessageKind.BINARY):
            raise ValueError(f"incomplete message must be text or binary, not {kind}")
        self.kind = kind
        self._size = 0
        self._chunks: list = []
        self._decoder = codecs.getincrementaldecoder("utf-8")() if kind is MessageKind.TEXT else None

    def __len__(self) -> int:
        """Number of payload bytes collected so far."""
        return self._size

    def extend(self, tail: bytes, size_limit: int | None = None) -> None:
        """Append a fragment, refusing to grow beyond ``size_limit`` bytes."""
        tail = bytes(tail)
        if size_limit is not None:
            my_size = self._size
            if my_size > size_limit or len(tail) > size_limit - my_size:
                raise MessageTooLong(my_size + len(tail), size_limit)
        if self._decoder is None:
            self._chunks.append(tail)
        else:
            try:
                self._chunks.append(self._decoder.decode(tail))
            except UnicodeDecodeError as exc:
                raise Utf8Error(str(exc)) from exc
        self._size += len(tail)

    def complete(self) -> Message:
        """Turn the collected fragments into a message."""
        if self._decoder is None:
            return Message(MessageKind.BINARY, b"".join(self._chunks))
        try:
            rest = self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as exc:
            raise Utf8Error(str(exc)) from exc
        return Message(MessageKind.TEXT, "".join(self._chunks) + rest)


Payload = Union[str, bytes, CloseFrame, Frame, None]


@dataclass(frozen=True)
class Message:
    """A WebSocket message.

    The payload is a ``str`` for text, ``bytes`` for binary, ping and pong,
    an optional :class:`CloseFrame` for close and a :class:`Frame` for raw
    frames.
    """

    kind: MessageKind
    payload: Payload = None

    def __post_init__(self) -> None:
        kind = MessageKind(self.kind)
        object.__setattr__(self, "kind", kind)
        payload = self.payload
        if kind is MessageKind.TEXT:
            if not isinstance(payload, str):
                raise TypeError("text message payload must be str")
        elif kind in _BYTE_KINDS:
            if isinstance(payload, str):
                raise TypeError(f"{kind.value} message payload must be bytes")
            object.__setattr__(self, "payload", bytes(payload if payload is not None else b""))
        elif kind is MessageKind.CLOSE:
            if payload is not None and not isinstance(payload, CloseFrame):
                raise TypeError("close message payload must be a CloseFrame or None")
        elif not isinstance(payload, Frame):
            raise TypeError("frame message payload must be a Frame")

    @classmethod
    def text(cls, string: str) -> Message:
        """Create a text message."""
        return cls(MessageKind.TEXT, string)

    @classmethod
    def binary(cls, data: bytes) -> Message:
        """Create a binary message from anything ``bytes`` accepts."""
        return cls(MessageKind.BINARY, bytes(data))

    def is_text(self) -> bool:
        return self.kind is MessageKind.TEXT

    def is_binary(self) -> bool:
        return self.kind is MessageKind.BINARY

    def is_ping(self) -> bool:
        return self.kind is MessageKind.PING

    def is_pong(self) -> bool:
        return self.kind is MessageKind.PONG

    def is_close(self) -> bool:
        return self.kind is MessageKind.CLOSE

    def __len__(self) -> int:
        """Length of the message content in bytes."""
        if self.kind is MessageKind.TEXT:
            return len(self.payload.encode("utf-8"))
        if self.kind in _BYTE_KINDS:
            return len(self.payload)
        if self.kind is MessageKind.CLOSE:
            return 0 if self.payload is None else len(self.payload.reason.encode("utf-8"))
        return len(self.payload)

    def is_empty(self) -> bool:
        """True if the message has no content."""
        return len(self) == 0

    def data(self) -> bytes:
        """The message content as bytes."""
        if self.kind is MessageKind.TEXT:
            return self.payload.encode("utf-8")
        if self.kind in _BYTE_KINDS:
            return self.payload
        if self.kind is MessageKind.CLOSE:
            return b"" if self.payload is None else self.payload.reason.encode("utf-8")
        return self.payload.payload

    def to_text(self) -> str:
        """The message content as text; raises :class:`Utf8Error` if it is not UTF-8."""
        if self.kind is MessageKind.TEXT:
            return self.payload
        if self.kind in _BYTE_KINDS:
            try:
                return self.payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise Utf8Error(str(exc)) from exc
        if self.kind is MessageKind.CLOSE:
            return "" if self.payload is None else self.payload.reason
        return self.payload.text()

    def __str__(self) -> str:
        try:
            return self.to_text()
        except Utf8Error:
            return f"Binary Data<length={len(self)}>"