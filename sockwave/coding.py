"""Opcodes and close codes defined by RFC 6455."""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class OpCode(IntEnum):
    """A frame opcode; values 0-7 are data opcodes, 8-15 control opcodes."""

    CONTINUE = 0
    TEXT = 1
    BINARY = 2
    RESERVED_DATA_3 = 3
    RESERVED_DATA_4 = 4
    RESERVED_DATA_5 = 5
    RESERVED_DATA_6 = 6
    RESERVED_DATA_7 = 7
    CLOSE = 8
    PING = 9
    PONG = 10
    RESERVED_CONTROL_11 = 11
    RESERVED_CONTROL_12 = 12
    RESERVED_CONTROL_13 = 13
    RESERVED_CONTROL_14 = 14
    RESERVED_CONTROL_15 = 15

    def is_control(self) -> bool:
        """True for close, ping, pong and reserved control opcodes."""
        return self.value >= 8

    def is_data(self) -> bool:
        """True for continue, text, binary and reserved data opcodes."""
        return self.value < 8

    def is_reserved(self) -> bool:
        """True for opcodes that RFC 6455 leaves reserved."""
        return 3 <= self.value <= 7 or self.value >= 11

    def __str__(self) -> str:
        return self.name


_NAMED_CODES = {
    1000: "NORMAL",
    1001: "AWAY",
    1002: "PROTOCOL",
    1003: "UNSUPPORTED",
    1005: "STATUS",
    1006: "ABNORMAL",
    1007: "INVALID",
    1008: "POLICY",
    1009: "SIZE",
    1010: "EXTENSION",
    1011: "ERROR",
    1012: "RESTART",
    1013: "AGAIN",
    1015: "TLS",
}

_FORBIDDEN = frozenset({"BAD", "RESERVED", "STATUS", "ABNORMAL", "TLS"})


class CloseCode(int):
    """Status code explaining why an endpoint closes the connection."""

    NORMAL: ClassVar[CloseCode]
    AWAY: ClassVar[CloseCode]
    PROTOCOL: ClassVar[CloseCode]
    UNSUPPORTED: ClassVar[CloseCode]
    STATUS: ClassVar[CloseCode]
    ABNORMAL: ClassVar[CloseCode]
    INVALID: ClassVar[CloseCode]
    POLICY: ClassVar[CloseCode]
    SIZE: ClassVar[CloseCode]
    EXTENSION: ClassVar[CloseCode]
    ERROR: ClassVar[CloseCode]
    RESTART: ClassVar[CloseCode]
    AGAIN: ClassVar[CloseCode]
    TLS: ClassVar[CloseCode]

    def __new__(cls, code: int) -> CloseCode:
        code = int(code)
        if not 0 <= code <= 0xFFFF:
            raise ValueError(f"close code out of range: {code}")
        return super().__new__(cls, code)

    def category(self) -> str:
        """Name of the code, or its range: RESERVED, IANA, LIBRARY or BAD."""
        code = int(self)
        if code in _NAMED_CODES:
            return _NAMED_CODES[code]
        if 1 <= code <= 999:
            return "BAD"
        if 1016 <= code <= 2999:
            return "RESERVED"
        if 3000 <= code <= 3999:
            return "IANA"
        if 4000 <= code <= 4999:
            return "LIBRARY"
        return "BAD"

    def is_allowed(self) -> bool:
        """Whether the code may appear in a close frame on the wire."""
        return self.category() not in _FORBIDDEN

    def __repr__(self) -> str:
        name = _NAMED_CODES.get(int(self))
        if name is not None:
            return f"CloseCode.{name}"
        return f"CloseCode({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


for _code, _name in _NAMED_CODES.items():
    setattr(CloseCode, _name, CloseCode(_code))
del _code, _name