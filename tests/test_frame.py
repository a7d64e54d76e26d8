import pytest

from sockwave.coding import CloseCode, OpCode
from sockwave.errors import ProtocolError, Utf8Error
from sockwave.frame import CloseFrame, Frame, FrameHeader, parse_header


def test_parse():
    raw = bytes([0x82, 0x07, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07])
    header, length, consumed = parse_header(raw)
    assert length == 7
    frame = Frame(header, raw[consumed:])
    assert frame.payload == bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07])
    assert header.opcode == OpCode.BINARY
    assert header.is_final is True


def test_format():
    frame = Frame.ping(bytes([0x01, 0x02]))
    buf = frame.format()
    assert buf == bytes([0x89, 0x02, 0x01, 0x02])
    assert len(buf) == len(frame)


def test_display():
    f = Frame.message(b"hi there", OpCode.TEXT, True)
    view = str(f)
    assert "payload:" in view
    assert "opcode: TEXT" in view
    assert "final: true" in view


def test_parse_incomplete_returns_none():
    assert parse_header(b"") is None
    assert parse_header(bytes([0x82])) is None
    assert parse_header(bytes([0x82, 126, 0x00])) is None
    assert parse_header(bytes([0x82, 0x81, 0x01, 0x02])) is None


def test_parse_extended_lengths():
    header, length, consumed = parse_header(bytes([0x82, 126, 0x01, 0x00]))
    assert (length, consumed) == (256, 4)
    raw = bytes([0x82, 127]) + (70000).to_bytes(8, "big")
    header, length, consumed = parse_header(raw)
    assert (length, consumed) == (70000, 10)


def test_parse_reserved_opcode():
    with pytest.raises(ProtocolError):
        parse_header(bytes([0x83, 0x00]))
    with pytest.raises(ProtocolError):
        parse_header(bytes([0x8B, 0x00]))


def test_header_format_bits_and_lengths():
    header = FrameHeader(is_final=False, rsv1=True, opcode=OpCode.TEXT)
    assert header.format(0) == bytes([0x41, 0x00])
    assert FrameHeader(opcode=OpCode.BINARY).format(126) == bytes([0x82, 126, 0x00, 126])
    assert header.encoded_len(125) == 2
    assert header.encoded_len(126) == 4
    assert header.encoded_len(65536) == 10


def test_header_roundtrip_with_mask():
    header = FrameHeader(opcode=OpCode.PONG, rsv3=True)
    header.set_random_mask()
    encoded = header.format(300)
    parsed, length, consumed = parse_header(encoded)
    assert parsed == header
    assert length == 300
    assert consumed == len(encoded) == header.encoded_len(300)


def test_masked_frame_roundtrip():
    frame = Frame.message(b"hello", OpCode.BINARY, True)
    frame.set_random_mask()
    assert frame.is_masked()
    wire = frame.format()
    header, length, consumed = parse_header(wire)
    received = Frame(header, wire[consumed:consumed + length])
    assert received.is_masked()
    received.apply_mask()
    assert not received.is_masked()
    assert received.payload == b"hello"


def test_close_frame_roundtrip():
    frame = Frame.close(CloseFrame(CloseCode.NORMAL, "bye"))
    assert frame.payload == b"\x03\xe8bye"
    assert frame.header.opcode == OpCode.CLOSE
    assert frame.close_frame() == CloseFrame(CloseCode.NORMAL, "bye")


def test_close_frame_empty_and_invalid():
    assert Frame.close(None).payload == b""
    assert Frame.close(None).close_frame() is None
    with pytest.raises(ProtocolError):
        Frame(FrameHeader(), b"\x03").close_frame()
    with pytest.raises(Utf8Error):
        Frame(FrameHeader(), b"\x03\xe8\xff").close_frame()


def test_close_frame_display():
    assert str(CloseFrame(CloseCode.AWAY, "later")) == "later (1001)"


def test_text():
    assert Frame.message("kiwotsukete".encode(), OpCode.TEXT, True).text() == "kiwotsukete"
    with pytest.raises(Utf8Error):
        Frame.message(bytes([0xF1, 0x80]), OpCode.BINARY, True).text()


def test_message_rejects_control_opcode():
    with pytest.raises(ValueError):
        Frame.message(b"x", OpCode.PING, True)


def test_pong_format():
    assert Frame.pong(bytes([0x01])).format() == bytes([0x8A, 0x01, 0x01])