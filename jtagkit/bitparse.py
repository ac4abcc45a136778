"""Command-line tool that reads a bitstream file, reports on it and converts it."""

from __future__ import annotations

import getopt
import sys
from collections.abc import Sequence

from .bitfile import BitFile, BitFileError, FileStyle, style_from_string, style_to_string
from .writers import save_as

_USAGE = (
    "\nUsage:bitparse [-i input format] [-o output format ][-O outfile] infile\n"
    "   -h\t\tprint this help\n"
    "   -v\t\tverbose output\n"
    "   -O\t\toutput file (parse input file only if not given\n"
    "   -i\t\tinput  file format (BIT|BIN|BPI|HEX|MCS|IHEX)\n"
    "   -o\t\toutput file format (BIT|BIN|BPI|HEX|MCS|IHEX)\n"
)


def byte_sum(data: bytes | bytearray) -> int:
    """Sum of all bytes inverted, so unprogrammed 0xff bytes count nothing."""
    return sum(value ^ 0xFF for value in data)


def _usage() -> None:
    sys.stderr.write(_USAGE)
    raise SystemExit(255)


def _style(text: str) -> FileStyle:
    try:
        return style_from_string(text)
    except ValueError:
        print(f'Unknown format "{text}"', file=sys.stderr)
        _usage()
        raise


def _load(name: str, style: FileStyle) -> BitFile:
    bitfile = BitFile()
    if name.startswith("-"):
        bitfile.read_file(sys.stdin.buffer, style)
    else:
        with open(name, "rb") as stream:
            bitfile.read_file(stream, style)
    return bitfile


def _save(bitfile: BitFile, style: FileStyle, outfile: str) -> None:
    if outfile.startswith("-"):
        save_as(bitfile, style, bitfile.part_name, sys.stdout.buffer)
        sys.stdout.buffer.flush()
    else:
        try:
            stream = open(outfile, "wb")
        except OSError as exc:
            print(f" Can't open {outfile}: {exc.strerror}  ", file=sys.stderr)
            return
        with stream:
            save_as(bitfile, style, bitfile.part_name, stream)
    print(
        f"Bitstream saved in format {style_to_string(style)} as file: {outfile}",
        file=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bitstream parser; returns the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    in_style = FileStyle.BIT
    out_style = FileStyle.BIT
    outfile = None
    try:
        opts, rest = getopt.gnu_getopt(args, "hi:vo:O:")
    except getopt.GetoptError:
        _usage()
    for flag, value in opts:
        if flag == "-i":
            in_style = _style(value)
        elif flag == "-o":
            out_style = _style(value)
        elif flag == "-O":
            outfile = value
        elif flag == "-h":
            _usage()
    if not rest:
        _usage()

    infile = rest[0]
    try:
        bitfile = _load(infile, in_style)
    except OSError as exc:
        print(f"Can't open datafile {infile}: {exc.strerror}", file=sys.stderr)
        return 1
    except BitFileError as exc:
        print(f"IOException: {exc}", file=sys.stderr)
        return 1

    bits = bitfile.length_bits
    print(f"Created from NCD file: {bitfile.ncd_filename}", file=sys.stderr)
    print(f"Target device: {bitfile.part_name}", file=sys.stderr)
    print(f"Created: {bitfile.date} {bitfile.time}", file=sys.stderr)
    print(
        f"Bitstream length: {bits} bits {bits // 8} bytes(0x{bits // 8:06x})",
        file=sys.stderr,
    )
    print(f"64-bit sum: {byte_sum(bitfile.data)}", file=sys.stderr)

    if outfile:
        try:
            _save(bitfile, out_style, outfile)
        except BitFileError as exc:
            print(f"IOException: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())