"""Reading and manipulation of Xilinx .bit, binary, raw hex and MCS/Intel HEX files.

The in-memory data is kept bit-reversed with respect to the .bit file, since
Xilinx bitstreams are MSB first while JTAG shifts LSB first.
"""

from __future__ import annotations

import enum
import logging
import re
import string
from pathlib import Path
from time import localtime, strftime
from typing import BinaryIO

from .bitrev import reverse_bits

_log = logging.getLogger(__name__)

_HEADER_LEN = 13
_FIELD_KEYS = {
    b"a": "ncd_field",
    b"b": "part_field",
    b"c": "date_field",
    b"d": "time_field",
}
_HEXDIGITS = frozenset(string.hexdigits)
_RAW_HEX_END = re.compile(r"[\r\n /]")


class FileStyle(enum.Enum):
    """Supported bitstream file formats."""

    BIT = "BIT"
    BIN = "BIN"
    BPI = "BPI"
    HEX = "HEX"
    HEX_RAW = "HEXRAW"
    MCS = "MCS"
    IHEX = "IHEX"
    JEDEC = "JEDEC"
    AUTO = "AUTO"


class BitFileError(Exception):
    """Raised when a bitstream file cannot be read or accessed."""


def style_to_string(style: FileStyle) -> str:
    """Return the display name of a file style."""
    return FileStyle(style).value


def style_from_string(text: str) -> FileStyle:
    """Parse a style name; anything after a ':' is ignored.

    The given text may be an abbreviation: the first style whose name starts
    with it (case-insensitively) is chosen.
    """
    prefix = text.split(":", 1)[0].upper()
    for style in FileStyle:
        if style.value.startswith(prefix):
            return style
    raise ValueError(f"Unknown format {text!r}")


def _hex_field(line: str, pos: int, width: int, what: str) -> int:
    chunk = line[pos:pos + width]
    if len(chunk) != width or not set(chunk) <= _HEXDIGITS:
        raise BitFileError(f"{what}: {line[:9]!r}")
    return int(chunk, 16)


def _field_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


class BitFile:
    """A bitstream held in memory together with its .bit header fields."""

    def __init__(self) -> None:
        self.ncd_field = b""
        self.part_field = b""
        self.date_field = b""
        self.time_field = b""
        self.data = bytearray()
        self.offset = 0
        self.rlength = 0
        self.warnings: list[str] = []

    @property
    def ncd_filename(self) -> str:
        return _field_text(self.ncd_field)

    @property
    def part_name(self) -> str:
        return _field_text(self.part_field)

    @property
    def date(self) -> str:
        return _field_text(self.date_field)

    @property
    def time(self) -> str:
        return _field_text(self.time_field)

    @property
    def length_bits(self) -> int:
        return len(self.data) * 8

    @property
    def length_bytes(self) -> int:
        return len(self.data)

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        _log.warning("%s", message)

    def read_file(self, stream: BinaryIO, style: FileStyle) -> None:
        """Load the bitstream from a binary stream in the given format."""
        if stream is None:
            raise BitFileError("No input stream")
        style = FileStyle(style)
        if style is FileStyle.BIT:
            self._read_bit(stream)
        elif style is FileStyle.MCS:
            self._read_mcs(stream)
            self.data = bytearray(reverse_bits(self.data))
        elif style is FileStyle.IHEX:
            # PROMGen MCS files are already bit-reversed; keep them as they are.
            self._read_mcs(stream)
        elif style is FileStyle.HEX_RAW:
            self._read_hex_raw(stream)
        elif style is FileStyle.BIN:
            self.data = bytearray(reverse_bits(stream.read()))
        elif style is FileStyle.BPI:
            self.data = bytearray(stream.read())
        else:
            raise BitFileError(f"Unhandled style {style_to_string(style)}")

    def _read_exact(self, stream: BinaryIO, count: int) -> bytes:
        chunk = stream.read(count)
        if len(chunk) < count:
            raise BitFileError("Unexpected end of file")
        return chunk

    def _read_bit(self, stream: BinaryIO) -> None:
        stream.read(_HEADER_LEN)
        while True:
            key = stream.read(1)
            if not key:
                raise BitFileError("Unexpected end of file")
            if key == b"e":
                self._read_data(stream)
                return
            length = int.from_bytes(self._read_exact(stream, 2), "big")
            value = self._read_exact(stream, length)
            attr = _FIELD_KEYS.get(key)
            if attr is None:
                _log.warning("Ignoring unknown field %r", key.decode("latin-1"))
            else:
                setattr(self, attr, getattr(self, attr) + value)

    def _read_data(self, stream: BinaryIO) -> None:
        length = int.from_bytes(self._read_exact(stream, 4), "big")
        self.data = bytearray(reverse_bits(self._read_exact(stream, length)))
        if stream.read(1):
            self._warn("Ignoring extra data at end of file")

    def _read_hex_raw(self, stream: BinaryIO) -> None:
        out = bytearray()
        for raw in stream:
            text = _RAW_HEX_END.split(raw.decode("ascii", errors="replace"), 1)[0]
            for pos in range(0, len(text), 2):
                chunk = text[pos:pos + 2]
                if not set(chunk) <= _HEXDIGITS:
                    raise BitFileError(f"Invalid hex data {chunk!r}")
                out.append(int(chunk, 16))
        self.data = bytearray(reverse_bits(out))

    def _read_mcs(self, stream: BinaryIO) -> None:
        buf = bytearray()
        full_address = 0
        for raw in stream:
            line = raw.decode("ascii", errors="replace").rstrip()
            if not line.startswith(":"):
                raise BitFileError(f"Invalid signature {line[:9]!r}")
            count = _hex_field(line, 1, 2, "Invalid signature")
            address = _hex_field(line, 3, 4, "Invalid signature")
            record_type = _hex_field(line, 7, 2, "Invalid signature")
            pos = 9
            checksum = count + (address >> 8) + (address & 0xFF) + record_type

            if record_type == 0:
                if (full_address & 0xFFFF) != address:
                    full_address = (full_address & 0xFFFF0000) | address
                values = bytes(
                    _hex_field(line, pos + 2 * n, 2, "Invalid data record")
                    for n in range(count)
                )
                pos += 2 * count
                end = full_address + count
                if end > len(buf):
                    buf.extend(b"\xff" * (end - len(buf)))
                buf[full_address:end] = values
                checksum += sum(values)
                full_address = end & 0xFFFFFFFF
            elif record_type == 1:
                if full_address > len(buf):
                    buf.extend(b"\xff" * (full_address - len(buf)))
                self.data = buf[:full_address]
                return
            elif record_type in (2, 4):
                upper = _hex_field(line, pos, 4, "Invalid address record")
                pos += 4
                checksum += (upper >> 8) + (upper & 0xFF)
                shift = 4 if record_type == 2 else 16
                if (full_address >> shift) != upper:
                    full_address = ((full_address & 0xFFFF) | (upper << shift)) & 0xFFFFFFFF
            elif record_type == 3:
                # Start segment address: consumed but otherwise unsupported.
                for _ in range(count):
                    checksum += _hex_field(line, pos, 2, "Invalid record")
                    pos += 2
            elif record_type == 5:
                start = _hex_field(line, pos, 8, "Invalid start address record")
                pos += 8
                checksum += sum(start.to_bytes(4, "big"))
            else:
                raise BitFileError(f"unhandled MCS record type: {record_type}")

            found = _hex_field(line, pos, 2, "Missing record checksum")
            if found != (-checksum) & 0xFF:
                raise BitFileError("incorrect record checksum found in MCS file")
        raise BitFileError("premature end of MCS file, no end-of-file record found")

    def append_word(self, value: int, count: int) -> None:
        """Append ``count`` copies of the 32-bit big-endian word ``value``."""
        word = (value & 0xFFFFFFFF).to_bytes(4, "big")
        self.data.extend(reverse_bits(word * count))

    def append_file(self, path: str | Path) -> None:
        """Append the whole content of the file at ``path``."""
        try:
            content = Path(path).read_bytes()
        except OSError as exc:
            raise BitFileError(f"Cannot open file {path}") from exc
        self.data.extend(reverse_bits(content))

    def set_length(self, bit_count: int) -> None:
        """Reset the data to enough 0xff bytes to hold ``bit_count`` bits."""
        self.data = bytearray(b"\xff" * -(-bit_count // 8))

    def set_ncd_fields(self, partname: str) -> None:
        """Fill empty header fields with defaults and the current date and time."""
        if not self.ncd_field:
            self.ncd_field = b"XC3SPROG\0"
        if not self.part_field:
            self.part_field = partname.encode("latin-1") + b"\0"
        now = localtime()
        if not self.time_field:
            self.date_field = strftime("%Y/%m/%d", now).encode("ascii") + b"\0"
        if not self.time_field:
            self.time_field = strftime("%H:%M:%S", now).encode("ascii") + b"\0"

    def _locate(self, idx: int, what: str) -> tuple[int, int]:
        index, bit = divmod(idx, 8)
        if idx < 0 or index >= len(self.data):
            raise BitFileError(f"{what}: invalid index {idx} length {self.length_bits}")
        return index, bit

    def get_bit(self, idx: int) -> int:
        """Return bit ``idx`` of the data (LSB-first within each byte)."""
        index, bit = self._locate(idx, "bit_get_fuse")
        return (self.data[index] >> bit) & 1

    def set_bit(self, idx: int, blow: bool) -> None:
        """Set bit ``idx`` when ``blow`` is true, clear it otherwise."""
        index, bit = self._locate(idx, "bit_set_fuse")
        if blow:
            self.data[index] |= 1 << bit
        else:
            self.data[index] &= ~(1 << bit) & 0xFF