import io

import pytest

from jtagkit.bitfile import BitFile, BitFileError, FileStyle
from jtagkit.bitrev import reverse_bits
from jtagkit.writers import record_checksum, save_as


def _make(data: bytes) -> BitFile:
    bf = BitFile()
    bf.data = bytearray(data)
    return bf


def _save(bf: BitFile, style: FileStyle, device: str = "xc3s200") -> tuple[int, bytes]:
    out = io.BytesIO()
    written = save_as(bf, style, device, out)
    return written, out.getvalue()


def _reload(raw: bytes, style: FileStyle) -> BitFile:
    bf = BitFile()
    bf.read_file(io.BytesIO(raw), style)
    return bf


def test_checksum_of_end_record():
    assert record_checksum("00000001") == 0xFF


@pytest.mark.parametrize("record", ["020000040001", "10000000" + "AB" * 16, "0300100001020304"])
def test_checksum_makes_record_sum_zero(record):
    total = sum(bytes.fromhex(record)) + record_checksum(record)
    assert total % 256 == 0


def test_empty_data_writes_nothing():
    written, raw = _save(BitFile(), FileStyle.BIT)
    assert written == 0
    assert raw == b""


def test_bit_header_prefix_and_default_name():
    _, raw = _save(_make(b"\x01\x02"), FileStyle.BIT)
    header = bytes((0x00, 0x09, 0x0F, 0xF0, 0x0F, 0xF0, 0x0F, 0xF0, 0x0F, 0xF0, 0x00, 0x00, 0x01))
    assert raw.startswith(header)
    assert b"XC3SPROG\0" in raw


def test_bit_round_trip():
    data = bytes(range(1, 40))
    _, raw = _save(_make(data), FileStyle.BIT, "xc3s200")
    back = _reload(raw, FileStyle.BIT)
    assert bytes(back.data) == data
    assert back.part_name == "xc3s200"
    assert back.ncd_filename == "XC3SPROG"


def test_bin_and_bpi_outputs():
    data = b"\x01\x80\x33"
    _, bin_raw = _save(_make(data), FileStyle.BIN)
    _, bpi_raw = _save(_make(data), FileStyle.BPI)
    assert bin_raw == reverse_bits(data)
    assert bpi_raw == data
    assert bytes(_reload(bin_raw, FileStyle.BIN).data) == data


def test_trailing_ff_is_clipped():
    data = b"\x12\x34\xff\xff\xff"
    written, raw = _save(_make(data), FileStyle.BPI)
    assert written == len(data.rstrip(b"\xff"))
    assert raw == data.rstrip(b"\xff")


def test_all_ff_keeps_one_byte():
    written, raw = _save(_make(b"\xff" * 8), FileStyle.BPI)
    assert written == 1
    assert raw == b"\xff"


def test_read_length_overrides_clip():
    bf = _make(b"\x01\x02\x03\x04")
    bf.rlength = 2
    written, raw = _save(bf, FileStyle.BPI)
    assert written == 2
    assert raw == b"\x01\x02"


def test_hex_dump_layout():
    bf = _make(reverse_bits(bytes(range(1, 18))))
    _, raw = _save(bf, FileStyle.HEX)
    text = raw.decode("ascii")
    assert text.startswith("      0:  01 02 ")
    first, second = text.split("\n")
    assert first.count(" ") > 16
    assert second.strip().split() == ["16:", "11"]


@pytest.mark.parametrize("size", range(1, 10))
def test_hex_raw_round_trip(size):
    data = bytes(range(1, size + 1))
    written, raw = _save(_make(data), FileStyle.HEX_RAW)
    assert written == size
    assert bytes(_reload(raw, FileStyle.HEX_RAW).data) == data


@pytest.mark.parametrize("style", [FileStyle.MCS, FileStyle.IHEX])
@pytest.mark.parametrize("size", [1, 15, 16, 17, 40])
def test_intel_hex_round_trip(style, size):
    data = bytes((n * 7 + 1) % 255 for n in range(size))
    written, raw = _save(_make(data), style)
    assert written == size
    assert bytes(_reload(raw, style).data) == data


def test_intel_hex_crosses_segment():
    data = bytes(range(256)) * 257 + b"\x01"
    _, raw = _save(_make(data), FileStyle.IHEX)
    lines = raw.decode("ascii").split("\r\n")
    assert ":020000040001F9" in lines
    assert bytes(_reload(raw, FileStyle.IHEX).data) == data


def test_mcs_ends_with_eof_record_and_valid_checksums():
    _, raw = _save(_make(bytes(range(1, 50))), FileStyle.MCS)
    assert raw.endswith(b":00000001FF\r\n")
    for line in raw.decode("ascii").split("\r\n"):
        if line:
            assert sum(bytes.fromhex(line[1:])) % 256 == 0


def test_unsupported_style_raises():
    with pytest.raises(BitFileError):
        save_as(_make(b"\x01"), FileStyle.JEDEC, "dev", io.BytesIO())