import pytest

from sockwave.coding import CloseCode, OpCode
from sockwave.errors import MessageTooLong, Utf8Error
from sockwave.frame import CloseFrame, Frame
from sockwave.message import IncompleteMessage, Message, MessageKind


def test_display():
    assert str(Message.text("test")) == "test"
    assert str(Message.binary([0, 1, 3, 4, 241])) == "Binary Data<length=5>"


def test_binary_convert():
    msg = Message.binary(bytes([6, 7, 8, 9, 10, 241]))
    assert msg.is_binary()
    with pytest.raises(Utf8Error):
        msg.to_text()


def test_binary_convert_list():
    msg = Message.binary([6, 7, 8, 9, 10, 241])
    assert msg.is_binary()
    with pytest.raises(Utf8Error):
        msg.to_text()


def test_binary_convert_into_data():
    data = bytes([6, 7, 8, 9, 10, 241])
    assert Message.binary(data).data() == data


def test_text_convert():
    msg = Message.text("kiwotsukete")
    assert msg.is_text()
    assert not msg.is_binary()


def test_text_length_counts_bytes():
    msg = Message.text("héllo")
    assert len(msg) == 6
    assert msg.data() == "héllo".encode("utf-8")


def test_close_message_content():
    msg = Message(MessageKind.CLOSE, CloseFrame(CloseCode.NORMAL, "bye"))
    assert msg.is_close()
    assert len(msg) == 3
    assert msg.to_text() == "bye"
    assert msg.data() == b"bye"
    empty = Message(MessageKind.CLOSE, None)
    assert empty.is_empty()
    assert empty.to_text() == ""


def test_ping_pong_predicates():
    ping = Message(MessageKind.PING, b"\x01\x02")
    pong = Message(MessageKind.PONG, b"\x03")
    assert ping.is_ping() and not ping.is_pong()
    assert pong.is_pong() and len(pong) == 1


def test_frame_message():
    frame = Frame.message(b"hi", OpCode.TEXT, True)
    msg = Message(MessageKind.FRAME, frame)
    assert len(msg) == 4
    assert msg.to_text() == "hi"
    assert msg.data() == b"hi"


def test_equality():
    assert Message.text("a") == Message(MessageKind.TEXT, "a")
    assert Message.binary(b"a") != Message.text("a")


def test_text_payload_must_be_str():
    with pytest.raises(TypeError):
        Message(MessageKind.TEXT, b"bytes")


def test_incomplete_binary():
    msg = IncompleteMessage(MessageKind.BINARY)
    msg.extend(b"\x01\x02", None)
    msg.extend(b"\x03", None)
    assert len(msg) == 3
    assert msg.complete() == Message.binary(b"\x01\x02\x03")


def test_incomplete_text_split_codepoint():
    encoded = "é!".encode("utf-8")
    msg = IncompleteMessage(MessageKind.TEXT)
    msg.extend(encoded[:1], None)
    assert len(msg) == 1
    msg.extend(encoded[1:], None)
    assert msg.complete() == Message.text("é!")


def test_incomplete_text_unfinished_codepoint():
    msg = IncompleteMessage(MessageKind.TEXT)
    msg.extend("é".encode("utf-8")[:1], None)
    with pytest.raises(Utf8Error):
        msg.complete()


def test_incomplete_text_invalid():
    msg = IncompleteMessage(MessageKind.TEXT)
    with pytest.raises(Utf8Error):
        msg.extend(b"ok\xff", None)


def test_incomplete_size_limit():
    msg = IncompleteMessage(MessageKind.TEXT)
    msg.extend(b"Hello, ", 10)
    with pytest.raises(MessageTooLong) as info:
        msg.extend(b"World!", 10)
    assert info.value.size == 13
    assert info.value.max_size == 10


def test_incomplete_rejects_control_kind():
    with pytest.raises(ValueError):
        IncompleteMessage(MessageKind.PING)