"""Bit-order reversal of bytes (MSB-first to LSB-first and back)."""

from __future__ import annotations

_TABLE = bytes(int(f"{value:08b}"[::-1], 2) for value in range(256))


def bitrev_byte(value: int) -> int:
    """Return ``value`` (0..255) with its eight bits in reverse order."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value}")
    return _TABLE[value]


def reverse_bits(data: bytes | bytearray | memoryview) -> bytes:
    """Return a copy of ``data`` with the bit order of every byte reversed."""
    return bytes(data).translate(_TABLE)