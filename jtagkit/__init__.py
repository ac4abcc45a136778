"""FPGA bitstream files, JTAG cable and device databases, a JTAG cable base class, and navigation helpers."""

__version__ = "0.1.0"