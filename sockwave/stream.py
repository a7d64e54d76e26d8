"""A stream wrapper that may or may not be protected with TLS."""

from __future__ import annotations

import io
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Mode(Enum):
    """Stream mode, either plain TCP or TLS."""

    PLAIN = "plain"
    """Plain mode (``ws://`` URLs)."""
    TLS = "tls"
    """TLS mode (``wss://`` URLs)."""


@dataclass
class MaybeTlsStream:
    """A byte stream, plain or already wrapped in TLS.

    The wrapped object may be a socket (including ``ssl.SSLSocket``) or a
    file-like object with ``read``/``write``.
    """

    stream: Any
    mode: Mode = Mode.PLAIN

    def _is_socket(self) -> bool:
        return isinstance(self.stream, socket.socket)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of stream."""
        if self._is_socket():
            return self.stream.recv(size)
        data = self.stream.read(size)
        if data is None:
            raise BlockingIOError("read would block")
        return bytes(data)

    def write(self, data: bytes) -> int:
        """Write some of ``data`` and return how many bytes were taken."""
        if self._is_socket():
            return self.stream.send(data)
        written = self.stream.write(data)
        if written is None:
            raise BlockingIOError("write would block")
        return written

    def flush(self) -> None:
        """Flush the underlying stream, if it buffers."""
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def set_nodelay(self, nodelay: bool) -> None:
        """Switch the TCP_NODELAY option of the underlying socket."""
        if self._is_socket():
            self.stream.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, int(bool(nodelay)))
            return
        inner = getattr(self.stream, "set_nodelay", None)
        if inner is None:
            raise io.UnsupportedOperation("stream does not support TCP_NODELAY")
        inner(nodelay)