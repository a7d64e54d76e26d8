# sockwave

`sockwave` speaks the WebSocket protocol (RFC 6455) over a byte stream on
which the opening handshake has already taken place: a connected socket, a
socket already wrapped in TLS, or an in-memory buffer in tests. It handles
frames, message fragmentation, masking, ping/pong replies and the close
handshake.

## Installing

```
pip install sockwave
```

The package has no runtime dependencies.

## Sending and receiving messages

```python
from sockwave.websocket import WebSocket
from sockwave.context import Role, WebSocketConfig
from sockwave.message import Message

ws = WebSocket.from_raw_socket(stream, Role.CLIENT, WebSocketConfig())

ws.write_message(Message.text("hello"))
reply = ws.read_message()
print(reply)
```

`stream` is either an object with `read(size)` and `write(data)` (and, if it
has one, `flush()`), or a socket, which is used through `recv` and `send`.

A `Message` has a `kind` (`MessageKind.TEXT`, `BINARY`, `PING`, `PONG`,
`CLOSE` or `FRAME`) and a `payload`: a `str` for text, `bytes` for binary,
ping and pong, a `CloseFrame` or `None` for close, and a `Frame` for a raw
frame. `Message.text(...)` and `Message.binary(...)` build the common ones;
`str(message)` gives its text, or `Binary Data<length=N>` when the content is
not UTF-8.

A received ping is answered with a pong automatically; the pong goes out on
the next `read_message`, `write_message` or `write_pending`. A client masks
every frame it sends; a server refuses unmasked frames from clients unless
configured otherwise.

If some bytes past the handshake were already read from the stream, pass them
in with `WebSocket.from_partially_read(stream, part, role, config)`.

## Closing

```python
from sockwave.coding import CloseCode
from sockwave.frame import CloseFrame

ws.close(CloseFrame(CloseCode.NORMAL, "bye"))
```

`close` may also be given `None`. Then keep calling `read_message()` or
`write_pending()` until `ConnectionClosed` is raised. A server raises it as
soon as the close handshake is over and everything is sent; a client raises
it once the peer has ended the stream. After that, `read_message()` and
`write_message()` raise `AlreadyClosed`.

`can_read()` and `can_write()` tell whether reading and writing are still
allowed: writing stops as soon as a close was sent or received, reading stops
once a close was received.

## Configuration

`WebSocketConfig` has:

- `max_send_queue` – how many frames may wait in the send queue (`None`:
  unlimited, the default). When it is full, `write_message` raises
  `SendQueueFull`, which keeps the rejected message in `.message`.
- `max_message_size` – 64 MiB by default; a longer message raises
  `MessageTooLong` (with `.size` and `.max_size`). `None` means no limit.
- `max_frame_size` – 16 MiB by default, for a single frame's payload; also
  raises `MessageTooLong`.
- `accept_unmasked_frames` – let a server accept unmasked client frames
  (off by default, as the RFC requires).

Read it with `ws.config`; change it on a live connection with
`ws.set_config(func)`, where `func` receives the config to modify.

## Errors

All errors derive from `sockwave.errors.WebSocketError`: `ProtocolError`
(with `.reason`), `MessageTooLong`, `SendQueueFull`, `ConnectionClosed`,
`AlreadyClosed` and `Utf8Error` (also a `ValueError`). Errors of the
underlying stream, such as `ConnectionResetError`, pass through.

## Non-blocking streams

A stream whose `read` or `write` returns `None` is taken to have would
blocked, and `BlockingIOError` is raised; non-blocking sockets raise it
themselves. Queued frames stay queued, so call `write_pending()` again later.
`sockwave.errors.no_block(func, *args, **kwargs)` calls `func` and returns
`None` instead of raising when the operation would block.

## Lower layers

- `sockwave.frame` – `Frame`, `FrameHeader`, `CloseFrame` and `parse_header`.
- `sockwave.codec` – `FrameCodec` and `FrameSocket` for reading and writing
  whole frames on a stream.
- `sockwave.coding` – `OpCode` and `CloseCode`.
- `sockwave.mask` – `generate_mask` and `apply_mask`.
- `sockwave.stream` – `Mode` and `MaybeTlsStream`, a wrapper giving a socket
  or file-like object `read`, `write`, `flush` and `set_nodelay`.
- `sockwave.context` – `WebSocketContext`, the connection state on its own,
  with the stream passed to each call.

## What it does not do

`sockwave` does not perform the HTTP opening handshake, open or accept
connections, parse `ws://` or `wss://` URLs, or set up TLS. `Mode` only
records whether a stream is plain or TLS; wrap the socket with `ssl`
yourself before handing it over. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```