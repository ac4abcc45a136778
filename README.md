# jtagkit

Tools for working with FPGA configuration bitstreams and JTAG chains:

- read Xilinx `.bit` files, raw binary, BPI, raw hex, MCS and Intel HEX
  images into memory (`jtagkit.bitfile`), and write them out again in those
  formats or as a readable hex dump (`jtagkit.writers`);
- a programming-cable database and a JTAG device (IDCODE) database
  (`jtagkit.cabledb`, `jtagkit.devicedb`);
- an abstract base class for JTAG cable drivers that buffers TMS bits and
  shifts TDI/TDO data (`jtagkit.iobase`), with a debug cable that prints every
  clock and reads TDO values from a text stream (`jtagkit.iodebug`);
- small matrix and quaternion helpers on plain lists (`jtagkit.matrices`) and
  attitude/strapdown navigation equations (`jtagkit.nav`).

Bitstream data is held bit-reversed in memory (`BitFile.data`), because the
`.bit` format is MSB first while JTAG shifts LSB first.

## Installation

```
pip install .
```

## Command line

`bitparse` reads a bitstream, prints its header fields, its length and the
sum of its bytes inverted (so unprogrammed `0xff` bytes count nothing), and
can write it out in another format:

```
bitparse [-i FORMAT] [-o FORMAT] [-O OUTFILE] INFILE
```

- `-i` input format: `BIT` (default), `BIN`, `BPI`, `HEXRAW`, `MCS`, `IHEX`
- `-o` output format: `BIT` (default), `BIN`, `BPI`, `HEX`, `HEXRAW`, `MCS`, `IHEX`
- `-O` output file; without it the input is only parsed and reported
- `-h` print usage

Format names are case-insensitive and may be abbreviated; text after a `:`
is ignored. Give `-` as `INFILE` to read standard input, or as `OUTFILE` to
write standard output. Reports go to standard error. The exit status is 1
when the input cannot be opened or read, 255 on a usage error.

```
bitparse -i BIT -o MCS -O design.mcs design.bit
```

When writing, trailing `0xff` bytes are left out unless `BitFile.rlength` is
set, and empty `.bit` header fields are filled with a default design name,
the part name and the current date and time.

## Library

```python
from jtagkit.bitfile import BitFile, FileStyle
from jtagkit.writers import save_as

bitfile = BitFile()
with open("design.bit", "rb") as stream:
    bitfile.read_file(stream, FileStyle.BIT)
print(bitfile.part_name, bitfile.length_bytes)

with open("design.mcs", "wb") as out:
    save_as(bitfile, FileStyle.MCS, "xc3s200", out)
```

Reading errors raise `BitFileError`. `BitFile` also offers `append_word`,
`append_file`, `set_length`, `get_bit` and `set_bit`.

Device lists hold one device per line, `idcode irlength idcommand
description`; lines starting with `#` are comments. The four revision bits of
an IDCODE are ignored when looking a device up:

```python
from jtagkit.devicedb import DeviceDB

db = DeviceDB("devlist.txt")
print(db.id_to_description(0x0A001093), db.id_to_ir_length(0x0A001093))
```

`DeviceDB()` and `CableDB()` without a path use the `XCDB` and `CABLEDB`
environment variables, falling back to `devlist.txt` and `cablelist.txt`.
`CableDB.get_cable(name)` raises `KeyError` for an unknown alias.

## What is not included

- No cable drivers for real hardware (parallel port, FTDI, FX2 or GPIO
  cables): `IOBase` must be subclassed to talk to a cable, and `IODebug` is
  the only concrete cable.
- No JTAG chain detection or device programming command; `bitparse` is the
  only command.
- No built-in cable or device list: when the list file cannot be opened, the
  database holds only the text passed as `builtin` (empty by default).

## Tests

```
pip install .[test]
pytest
```