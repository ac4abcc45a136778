import io

import pytest

from jtagkit.iodebug import IODebug


def _bits_text(data, length):
    return " ".join(str((data[i // 8] >> (i % 8)) & 1) for i in range(length)) + "\n"


def test_tx_output():
    out = io.StringIO()
    IODebug(io.StringIO(), out).tx(True, False)
    assert out.getvalue() == "tx(1,0)\n"


def test_txrx_reads_value():
    out = io.StringIO()
    dev = IODebug(io.StringIO("1\n0\n"), out)
    assert dev.txrx(False, True) is True
    assert dev.txrx(True, False) is False
    assert out.getvalue() == "txrx(0,1) enter tdo>txrx(1,0) enter tdo>"


def test_txrx_eof():
    dev = IODebug(io.StringIO(""), io.StringIO())
    with pytest.raises(EOFError):
        dev.txrx(False, False)


def test_txrx_bad_value():
    dev = IODebug(io.StringIO("x\n"), io.StringIO())
    with pytest.raises(ValueError):
        dev.txrx(False, False)


def test_block_echo_round_trip():
    tdi = bytes([0x3A, 0xA3])
    out = io.StringIO()
    dev = IODebug(io.StringIO(_bits_text(tdi, 16)), out)
    assert dev.shift_tdi_tdo(tdi, 16, True) == tdi
    prompts = out.getvalue().split(">")[:-1]
    assert len(prompts) == 16
    assert all(p.startswith("txrx(0,") for p in prompts[:-1])
    assert prompts[-1].startswith("txrx(1,")


def test_block_without_last_keeps_tms_low():
    out = io.StringIO()
    dev = IODebug(io.StringIO("0 0 0\n"), out)
    assert dev.txrx_block(b"\x07", 3, False) == bytes(1)
    assert "txrx(1," not in out.getvalue()
    assert out.getvalue().count("txrx(0,1)") == 3


def test_shift_tdo_sends_zeros():
    out = io.StringIO()
    dev = IODebug(io.StringIO("1 1 1 1 1 1 1 1 1\n"), out)
    result = dev.shift_tdo(9, False)
    assert result == bytes([0xFF, 0x01])
    assert ",1)" not in out.getvalue()


def test_tx_tms_lines():
    out = io.StringIO()
    dev = IODebug(io.StringIO(), out)
    dev.tx_tms(bytes([0x05]), 3, False)
    assert out.getvalue().splitlines() == ["tx(1,0)", "tx(0,0)", "tx(1,0)"]


def test_buffered_tms_flushed_through_set_tms():
    out = io.StringIO()
    dev = IODebug(io.StringIO(), out)
    dev.set_tms(True)
    dev.set_tms(True)
    dev.flush_tms(True)
    assert out.getvalue().splitlines() == ["tx(1,0)", "tx(1,0)"]
    assert dev.pending_tms == 0