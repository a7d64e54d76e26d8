"""Frame masking as described in RFC 6455, section 5.3."""

from __future__ import annotations

import secrets


def generate_mask() -> bytes:
    """Return a fresh random 4-byte masking key."""
    return secrets.token_bytes(4)


def apply_mask(buf: bytes | bytearray | memoryview, mask: bytes) -> bytes:
    """Return ``buf`` XOR-ed with the repeating 4-byte ``mask``.

    Masking is its own inverse, so the same call also unmasks.
    """
    key = bytes(mask)
    if len(key) != 4:
        raise ValueError("mask must be exactly 4 bytes long")
    data = bytes(buf)
    size = len(data)
    if size == 0:
        return b""
    stream = (key * (size // 4 + 1))[:size]
    masked = int.from_bytes(data, "big") ^ int.from_bytes(stream, "big")
    return masked.to_bytes(size, "big")