"""Base class for JTAG cables: TMS buffering and TDI/TDO shifting."""

from __future__ import annotations

import abc
import time
from collections.abc import Iterator

BLOCK_SIZE = 65536
CHUNK_SIZE = 128
TICK_COUNT = 2048


class IOBase(abc.ABC):
    """A JTAG cable; subclasses implement ``txrx_block`` and ``tx_tms``."""

    def __init__(self) -> None:
        self.verbose = False
        self._ones = b"\xff" * CHUNK_SIZE
        self._zeros = bytes(CHUNK_SIZE)
        self._tms_buf = bytearray(CHUNK_SIZE)
        self._tms_len = 0

    @property
    def pending_tms(self) -> int:
        """Number of buffered TMS bits not yet sent."""
        return self._tms_len

    @staticmethod
    def _bits(data: bytes | None, length: int) -> Iterator[bool]:
        """Yield ``length`` bits of ``data`` LSB first; None means all zeros."""
        for i in range(length):
            yield bool(data is not None and (data[i >> 3] >> (i & 7)) & 1)

    def flush_tms(self, force: bool = False) -> None:
        """Send any buffered TMS bits."""
        if self._tms_len:
            self.tx_tms(bytes(self._tms_buf), self._tms_len, force)
        self._tms_buf = bytearray(CHUNK_SIZE)
        self._tms_len = 0

    def set_tms(self, value: bool) -> None:
        """Buffer one TMS bit, flushing first when the buffer is full."""
        if self._tms_len + 1 > CHUNK_SIZE * 8:
            self.flush_tms(False)
        if value:
            self._tms_buf[self._tms_len >> 3] |= 1 << (self._tms_len & 7)
        self._tms_len += 1

    def shift_tdi_tdo(self, tdi: bytes | None, length: int, last: bool = True) -> bytes:
        """Shift ``length`` bits of ``tdi`` in and return the TDO bits read."""
        if length == 0:
            return b""
        self.flush_tms(False)
        return self.txrx_block(tdi, length, last)

    def shift_tdi(self, tdi: bytes | None, length: int, last: bool = True) -> None:
        """Shift ``length`` bits of ``tdi`` in, ignoring TDO."""
        self.shift_tdi_tdo(tdi, length, last)

    def shift_tdo(self, length: int, last: bool = True) -> bytes:
        """Shift zeros in and return ``length`` TDO bits."""
        return self.shift_tdi_tdo(None, length, last)

    def shift(self, tdi: bool, length: int, last: bool = True) -> None:
        """Shift ``length`` copies of one TDI value, ignoring TDO."""
        block = self._ones if tdi else self._zeros
        self.flush_tms(False)
        remaining = length
        while remaining > CHUNK_SIZE * 8:
            self.txrx_block(block, CHUNK_SIZE * 8, False)
            remaining -= CHUNK_SIZE * 8
        self.shift_tdi_tdo(block, remaining, last)

    def flush(self) -> None:
        """Push out anything the cable has buffered."""

    def usleep(self, usec: int) -> None:
        """Flush pending output and wait ``usec`` microseconds."""
        self.flush_tms(False)
        self.flush()
        time.sleep(usec / 1_000_000)

    @abc.abstractmethod
    def txrx_block(self, tdi: bytes | None, length: int, last: bool) -> bytes:
        """Clock ``length`` TDI bits out (TMS set on the final bit if ``last``)."""

    @abc.abstractmethod
    def tx_tms(self, pattern: bytes, length: int, force: bool) -> None:
        """Clock out ``length`` TMS bits from ``pattern``, LSB first."""