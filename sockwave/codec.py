"""Reading and writing WebSocket frames over byte streams."""

from __future__ import annotations

import logging
from typing import Any

from .errors import MessageTooLong
from .frame import Frame, parse_header

_log = logging.getLogger(__name__)

_READ_CHUNK = 4096
# Two fixed bytes, up to eight length bytes and a four byte mask.
_MAX_HEADER = 14


def _read_some(stream: Any, size: int) -> bytes:
    """Read up to ``size`` bytes from a file-like object or a socket."""
    reader = getattr(stream, "read", None)
    data = reader(size) if reader is not None else stream.recv(size)
    if data is None:
        raise BlockingIOError("read would block")
    return bytes(data)


def _write_some(stream: Any, data: bytes) -> int:
    """Write some of ``data`` to a file-like object or a socket."""
    writer = getattr(stream, "write", None)
    written = writer(data) if writer is not None else stream.send(data)
    if written is None:
        raise BlockingIOError("write would block")
    return written


def _flush(stream: Any) -> None:
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()


class FrameCodec:
    """Encoder and decoder of WebSocket frames with its own buffers.

    ``part`` holds bytes that were already read from the stream, for
    instance the tail of a handshake.
    """

    def __init__(self, part: bytes = b"") -> None:
        self._in_buffer = bytearray(part)
        self._out_buffer = bytearray()
        self._header = None

    def read_frame(self, stream: Any, max_size: int | None = None) -> Frame | None:
        """Read one frame from ``stream``.

        Returns ``None`` when the stream reaches its end before a whole frame
        arrived. Raises :class:`MessageTooLong` if the announced payload
        exceeds ``max_size``.
        """
        while True:
            if self._header is None:
                parsed = parse_header(bytes(self._in_buffer[:_MAX_HEADER]))
                if parsed is not None:
                    header, length, consumed = parsed
                    del self._in_buffer[:consumed]
                    self._header = (header, length)

            if self._header is not None:
                header, length = self._header
                if max_size is not None and length > max_size:
                    raise MessageTooLong(length, max_size)
                if length <= len(self._in_buffer):
                    payload = bytes(self._in_buffer[:length])
                    del self._in_buffer[:length]
                    self._header = None
                    frame = Frame(header, payload)
                    _log.debug("received frame %s", frame)
                    return frame

            chunk = _read_some(stream, _READ_CHUNK)
            if not chunk:
                _log.debug("no frame received")
                return None
            self._in_buffer += chunk

    def write_frame(self, stream: Any, frame: Frame) -> None:
        """Queue ``frame`` for sending and try to flush it to ``stream``.

        The frame stays queued whatever error is raised; call
        :meth:`write_pending` later to finish sending it.
        """
        _log.debug("writing frame %s", frame)
        self._out_buffer += frame.format()
        self.write_pending(stream)

    def write_pending(self, stream: Any) -> None:
        """Send everything still queued, then flush ``stream``."""
        while self._out_buffer:
            written = _write_some(stream, bytes(self._out_buffer))
            if written == 0:
                raise ConnectionResetError("Connection reset while sending")
            del self._out_buffer[:written]
        _flush(stream)

    def output_buffer_len(self) -> int:
        """Number of bytes queued but not yet sent."""
        return len(self._out_buffer)


class FrameSocket:
    """A stream paired with a :class:`FrameCodec`."""

    def __init__(self, stream: Any, part: bytes = b"") -> None:
        self.stream = stream
        self._codec = FrameCodec(part)

    def read_frame(self, max_size: int | None = None) -> Frame | None:
        """Read one frame; ``None`` at end of stream."""
        return self._codec.read_frame(self.stream, max_size)

    def write_frame(self, frame: Frame) -> None:
        """Queue a frame and try to send it."""
        self._codec.write_frame(self.stream, frame)

    def write_pending(self) -> None:
        """Finish sending queued frames."""
        self._codec.write_pending(self.stream)

    def into_inner(self) -> tuple[Any, bytes]:
        """The stream and the bytes read from it but not yet consumed."""
        return self.stream, bytes(self._codec._in_buffer)