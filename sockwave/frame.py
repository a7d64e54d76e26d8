"""WebSocket frames, frame headers and close frames."""

from __future__ import annotations

from dataclasses import dataclass, field

from .coding import CloseCode, OpCode
from .errors import ProtocolError, Utf8Error
from .mask import apply_mask, generate_mask


@dataclass(frozen=True)
class CloseFrame:
    """The payload of a close frame: a status code and a textual reason."""

    code: CloseCode
    reason: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.code, CloseCode):
            object.__setattr__(self, "code", CloseCode(self.code))

    def __str__(self) -> str:
        return f"{self.reason} ({self.code})"


def _extra_length_bytes(length_byte: int) -> int:
    """Number of extended payload length bytes announced by the 7-bit length."""
    length_byte &= 0x7F
    if length_byte == 126:
        return 2
    if length_byte == 127:
        return 8
    return 0


def _length_encoding(length: int) -> tuple[int, bytes]:
    """The 7-bit length value and the extended length bytes for ``length``."""
    if length < 126:
        return length, b""
    if length < 65536:
        return 126, length.to_bytes(2, "big")
    return 127, length.to_bytes(8, "big")


@dataclass
class FrameHeader:
    """The header of a WebSocket frame."""

    is_final: bool = True
    rsv1: bool = False
    rsv2: bool = False
    rsv3: bool = False
    opcode: OpCode = OpCode.CLOSE
    mask: bytes | None = None

    def __post_init__(self) -> None:
        self.opcode = OpCode(self.opcode)
        if self.mask is not None:
            self.mask = bytes(self.mask)
            if len(self.mask) != 4:
                raise ValueError("mask must be exactly 4 bytes long")

    def encoded_len(self, length: int) -> int:
        """Size of this header when formatted for a payload of ``length`` bytes."""
        _, extended = _length_encoding(length)
        return 2 + len(extended) + (4 if self.mask is not None else 0)

    def format(self, length: int) -> bytes:
        """Encode the header for a payload of ``length`` bytes."""
        first = int(self.opcode)
        if self.is_final:
            first |= 0x80
        if self.rsv1:
            first |= 0x40
        if self.rsv2:
            first |= 0x20
        if self.rsv3:
            first |= 0x10
        length_byte, extended = _length_encoding(length)
        second = length_byte | (0x80 if self.mask is not None else 0)
        return bytes((first, second)) + extended + (self.mask or b"")

    def set_random_mask(self) -> None:
        """Store a fresh random mask; the payload itself is not touched."""
        self.mask = generate_mask()


def parse_header(data: bytes | bytearray | memoryview) -> tuple[FrameHeader, int, int] | None:
    """Parse a frame header from the start of ``data``.

    Returns ``(header, payload_length, header_size)``, or ``None`` when
    ``data`` does not yet hold a complete header.
    """
    view = memoryview(data)
    if len(view) < 2:
        return None
    first, second = view[0], view[1]
    pos = 2

    extra = _extra_length_bytes(second)
    if extra:
        if len(view) < pos + extra:
            return None
        length = int.from_bytes(view[pos:pos + extra], "big")
        pos += extra
    else:
        length = second & 0x7F

    mask = None
    if second & 0x80:
        if len(view) < pos + 4:
            return None
        mask = bytes(view[pos:pos + 4])
        pos += 4

    opcode = OpCode(first & 0x0F)
    if opcode.is_reserved():
        raise ProtocolError(f"Encountered invalid opcode: {int(opcode)}")

    header = FrameHeader(
        is_final=bool(first & 0x80),
        rsv1=bool(first & 0x40),
        rsv2=bool(first & 0x20),
        rsv3=bool(first & 0x10),
        opcode=opcode,
        mask=mask,
    )
    return header, length, pos


@dataclass
class Frame:
    """A WebSocket frame: a header and its payload."""

    header: FrameHeader = field(default_factory=FrameHeader)
    payload: bytes = b""

    def __post_init__(self) -> None:
        self.payload = bytes(self.payload)

    def __len__(self) -> int:
        """Length of the encoded frame: header plus payload."""
        size = len(self.payload)
        return self.header.encoded_len(size) + size

    def is_masked(self) -> bool:
        """Whether the header carries a mask."""
        return self.header.mask is not None

    def set_random_mask(self) -> None:
        """Give the frame a random mask; masking happens on :meth:`format`."""
        self.header.set_random_mask()

    def apply_mask(self) -> None:
        """Unmask the payload in place and drop the mask from the header."""
        mask = self.header.mask
        if mask is not None:
            self.header.mask = None
            self.payload = apply_mask(self.payload, mask)

    def text(self) -> str:
        """The payload decoded as UTF-8."""
        try:
            return self.payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8Error(str(exc)) from exc

    def close_frame(self) -> CloseFrame | None:
        """Interpret the payload as the body of a close frame."""
        if not self.payload:
            return None
        if len(self.payload) == 1:
            raise ProtocolError("Invalid close sequence")
        code = CloseCode(int.from_bytes(self.payload[:2], "big"))
        try:
            reason = self.payload[2:].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8Error(str(exc)) from exc
        return CloseFrame(code, reason)

    @classmethod
    def message(cls, data: bytes, opcode: OpCode, is_final: bool) -> Frame:
        """Create a data frame."""
        opcode = OpCode(opcode)
        if not opcode.is_data():
            raise ValueError("Invalid opcode for data frame.")
        return cls(FrameHeader(is_final=is_final, opcode=opcode), data)

    @classmethod
    def ping(cls, data: bytes) -> Frame:
        """Create a ping control frame."""
        return cls(FrameHeader(opcode=OpCode.PING), data)

    @classmethod
    def pong(cls, data: bytes) -> Frame:
        """Create a pong control frame."""
        return cls(FrameHeader(opcode=OpCode.PONG), data)

    @classmethod
    def close(cls, msg: CloseFrame | None) -> Frame:
        """Create a close control frame."""
        if msg is None:
            payload = b""
        else:
            payload = int(msg.code).to_bytes(2, "big") + msg.reason.encode("utf-8")
        return cls(FrameHeader(), payload)

    def format(self) -> bytes:
        """Encode the frame for the wire, masking the payload if a mask is set."""
        head = self.header.format(len(self.payload))
        mask = self.header.mask
        body = apply_mask(self.payload, mask) if mask is not None else self.payload
        return head + body

    def __str__(self) -> str:
        def flag(value: bool) -> str:
            return "true" if value else "false"

        hexed = "".join(f"{byte:x}" for byte in self.payload)
        return (
            "\n<FRAME>\n"
            f"final: {flag(self.header.is_final)}\n"
            f"reserved: {flag(self.header.rsv1)} {flag(self.header.rsv2)} "
            f"{flag(self.header.rsv3)}\n"
            f"opcode: {self.header.opcode}\n"
            f"length: {len(self)}\n"
            f"payload length: {len(self.payload)}\n"
            f"payload: 0x{hexed}\n"
            "            "
        )