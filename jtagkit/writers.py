"""Writing a BitFile out as .bit, binary, hex dump, raw hex or MCS/Intel HEX."""

from __future__ import annotations

from typing import BinaryIO

from .bitfile import BitFile, BitFileError, FileStyle, style_to_string
from .bitrev import reverse_bits

_BIT_HEADER = bytes(
    (0x00, 0x09, 0x0F, 0xF0, 0x0F, 0xF0, 0x0F, 0xF0, 0x0F, 0xF0, 0x00, 0x00, 0x01)
)
_RECORD_BYTES = 16


def record_checksum(record: str) -> int:
    """Return the Intel HEX checksum of the hex digit pairs in ``record``.

    Pairs are summed until one fails to parse; the result is the two's
    complement of the sum, modulo 256.
    """
    total = 0
    for pos in range(0, len(record), 2):
        try:
            total += int(record[pos:pos + 2], 16)
        except ValueError:
            break
    return (-total) & 0xFF


def _clip_length(bitfile: BitFile) -> int:
    """Length to write: an explicit read length, else data without trailing 0xff."""
    if bitfile.rlength:
        return bitfile.rlength
    return max(len(bitfile.data.rstrip(b"\xff")), 1)


def _payload(bitfile: BitFile, clip: int) -> bytes:
    return bytes(bitfile.data[:clip]).ljust(clip, b"\xff")


def _bit_header(bitfile: BitFile, clip: int) -> bytes:
    fields = (
        (b"a", bitfile.ncd_field),
        (b"b", bitfile.part_field),
        (b"c", bitfile.date_field),
        (b"d", bitfile.time_field),
    )
    parts = [_BIT_HEADER]
    for key, value in fields:
        parts.append(key + (len(value) & 0xFFFF).to_bytes(2, "big") + value)
    parts.append(b"e" + (clip & 0xFFFFFFFF).to_bytes(4, "big"))
    return b"".join(parts)


def _hex_dump(data: bytes) -> str:
    parts: list[str] = []
    for i, value in enumerate(data):
        column = i % 16
        if column == 0:
            parts.append(f"{i:7d}:  ")
        parts.append(f"{value:02x} ")
        if column == 7:
            parts.append(" ")
        if column == 15:
            parts.append("\n")
    return "".join(parts)


def _hex_raw(data: bytes) -> str:
    parts: list[str] = []
    for i, value in enumerate(data):
        parts.append(f"{value:02x}")
        if i % 4 == 3:
            parts.append("\n")
    if len(data) % 4 != 3:
        parts.append("\n")
    return "".join(parts)


def _record(text: str) -> str:
    return f":{text}{record_checksum(text):02X}\r\n"


def _intel_hex(data: bytes) -> str:
    parts: list[str] = []
    base = None
    for start in range(0, len(data), _RECORD_BYTES):
        if start >> 16 != base:
            base = start >> 16
            parts.append(_record(f"02000004{base:04X}"))
        chunk = data[start:start + _RECORD_BYTES]
        parts.append(
            _record(f"{len(chunk):02X}{start & 0xFFFF:04X}00{chunk.hex().upper()}")
        )
    parts.append(_record("00000001"))
    return "".join(parts)


def save_as(bitfile: BitFile, style: FileStyle, device: str, stream: BinaryIO) -> int:
    """Write ``bitfile`` to the binary ``stream`` in ``style``.

    Returns the number of data bytes written (trailing 0xff bytes are left
    out unless an explicit read length is set); 0 when there is no data.
    """
    style = FileStyle(style)
    if not bitfile.data:
        return 0
    bitfile.set_ncd_fields(device)
    clip = _clip_length(bitfile)
    payload = _payload(bitfile, clip)

    if style is FileStyle.BIT:
        stream.write(_bit_header(bitfile, clip) + reverse_bits(payload))
    elif style is FileStyle.BIN:
        stream.write(reverse_bits(payload))
    elif style is FileStyle.BPI:
        stream.write(payload)
    elif style is FileStyle.HEX:
        stream.write(_hex_dump(reverse_bits(payload)).encode("ascii"))
    elif style is FileStyle.HEX_RAW:
        stream.write(_hex_raw(reverse_bits(payload)).encode("ascii"))
    elif style is FileStyle.MCS:
        stream.write(_intel_hex(reverse_bits(payload)).encode("ascii"))
    elif style is FileStyle.IHEX:
        stream.write(_intel_hex(payload).encode("ascii"))
    else:
        raise BitFileError(f"Style not yet implemented: {style_to_string(style)}")
    return clip