import pytest

from sockwave.errors import (
    AlreadyClosed,
    ConnectionClosed,
    MessageTooLong,
    ProtocolError,
    SendQueueFull,
    Utf8Error,
    WebSocketError,
    no_block,
)


def _would_block():
    raise BlockingIOError("would block")


def _reset():
    raise ConnectionResetError("reset")


def _protocol():
    raise ProtocolError("bad frame")


def _connection_closed():
    raise ConnectionClosed()


def _already_closed():
    raise AlreadyClosed()


def _bad_utf8():
    raise Utf8Error()


def test_no_block_passes_value_through():
    assert no_block(lambda a, b=0: a + b, 2, b=3) == 5


def test_no_block_turns_would_block_into_none():
    assert no_block(_would_block) is None


def test_no_block_keeps_other_os_errors():
    with pytest.raises(ConnectionResetError):
        no_block(_reset)


def test_no_block_keeps_websocket_errors():
    with pytest.raises(ProtocolError) as info:
        no_block(_protocol)
    assert info.value.reason == "bad frame"


def test_message_too_long_carries_sizes():
    err = MessageTooLong(size=13, max_size=10)
    assert (err.size, err.max_size) == (13, 10)
    assert "13" in str(err) and "10" in str(err)
    assert isinstance(err, WebSocketError)


def test_send_queue_full_keeps_message():
    payload = object()
    err = SendQueueFull(payload)
    assert err.message is payload


def test_closed_errors_are_distinct():
    with pytest.raises(WebSocketError) as closed:
        no_block(_connection_closed)
    assert isinstance(closed.value, ConnectionClosed)
    assert not isinstance(closed.value, AlreadyClosed)

    with pytest.raises(WebSocketError) as already:
        no_block(_already_closed)
    assert isinstance(already.value, AlreadyClosed)
    assert not isinstance(already.value, ConnectionClosed)


def test_utf8_error_is_value_error():
    with pytest.raises(ValueError) as info:
        no_block(_bad_utf8)
    assert isinstance(info.value, Utf8Error)