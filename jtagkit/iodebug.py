"""A cable that shows JTAG signals on a text stream and asks for TDO values."""

from __future__ import annotations

import sys
from collections import deque
from typing import TextIO

from .iobase import IOBase


class IODebug(IOBase):
    """Monitor JTAG signals instead of driving a physical cable."""

    def __init__(self, input_stream: TextIO | None = None,
                 output_stream: TextIO | None = None) -> None:
        super().__init__()
        self._input = input_stream
        self._output = output_stream
        self._tokens: deque[str] = deque()

    @property
    def _out(self) -> TextIO:
        return self._output if self._output is not None else sys.stderr

    @property
    def _in(self) -> TextIO:
        return self._input if self._input is not None else sys.stdin

    def _read_int(self) -> int:
        while not self._tokens:
            line = self._in.readline()
            if not line:
                raise EOFError("no TDO value available")
            self._tokens.extend(line.split())
        return int(self._tokens.popleft())

    def tx(self, tms: bool, tdi: bool) -> None:
        """Show one clock with the given TMS and TDI."""
        self._out.write(f"tx({int(tms)},{int(tdi)})\n")

    def txrx(self, tms: bool, tdi: bool) -> bool:
        """Show one clock and read its TDO value from the input."""
        self._out.write(f"txrx({int(tms)},{int(tdi)}) enter tdo>")
        self._out.flush()
        return self._read_int() != 0

    def txrx_block(self, tdi: bytes | None, length: int, last: bool) -> bytes:
        """Clock ``length`` bits, TMS set on the final bit if ``last``; return TDO."""
        tdo = bytearray((length + 7) // 8)
        for i, bit in enumerate(self._bits(tdi, length)):
            tms = last and i == length - 1
            if self.txrx(tms, bit):
                tdo[i >> 3] |= 1 << (i & 7)
        return bytes(tdo)

    def tx_tms(self, pattern: bytes, length: int, force: bool) -> None:
        """Show ``length`` TMS clocks from ``pattern``, LSB first."""
        for bit in self._bits(pattern, length):
            self.tx(bit, False)