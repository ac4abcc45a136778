"""Database of JTAG devices keyed by IDCODE, read from a device list file."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

DEFAULT_DEVICEDB = "devlist.txt"
BUILTIN_NAME = "built-in device list"

# The top four bits of an IDCODE hold the device revision and are ignored.
IDCODE_MASK = 0x0FFFFFFF

_LINE = re.compile(
    r"\s*(?:0[xX])?([0-9a-fA-F]{1,8})"
    r"\s*([+-]?\d+)"
    r"\s*((?:0[xX])?[0-9a-fA-F]+)"
    r"\s*(\S+)"
)


@dataclass(frozen=True)
class Device:
    """One device entry: masked IDCODE, IR length, IDCODE instruction, description."""

    idcode: int
    irlen: int
    id_cmd: int
    text: str


class DeviceDB:
    """Device list loaded from a file, or from built-in text if the file is missing."""

    def __init__(self, path: str | Path | None = None, builtin: str = "") -> None:
        if path is None:
            path = os.environ.get("XCDB", DEFAULT_DEVICEDB)
        self.devices: list[Device] = []
        self._used: dict[int, Device] = {}
        try:
            stream = open(path, encoding="latin-1")
        except OSError:
            self.file = BUILTIN_NAME
            for lineno, line in enumerate(builtin.split(";"), start=1):
                if not line:
                    continue
                try:
                    self.parse_line(line)
                except ValueError:
                    print(
                        f"ERROR: Invalid syntax in built-in device list line {lineno}",
                        file=sys.stderr,
                    )
        else:
            self.file = str(path)
            with stream:
                for lineno, line in enumerate(stream, start=1):
                    try:
                        self.parse_line(line)
                    except ValueError:
                        print(
                            f"ERROR: Invalid syntax in device list '{path}' line {lineno}",
                            file=sys.stderr,
                        )

    def parse_line(self, line: str) -> None:
        """Add the device described by ``line``; comments and blank lines are skipped.

        Raises ValueError when the line is not of the form
        ``idcode irlength idcommand description``.
        """
        if line.startswith("#") or not line.strip():
            return
        match = _LINE.match(line)
        if not match:
            raise ValueError(f"Invalid device line: {line.rstrip()!r}")
        idcode, irlen, id_cmd, text = match.groups()
        self.devices.append(
            Device(
                idcode=int(idcode, 16) & IDCODE_MASK,
                irlen=int(irlen),
                id_cmd=int(id_cmd, 16) & 0xFFFFFFFF,
                text=text,
            )
        )

    def find_device(self, idcode: int) -> Device | None:
        """Return the first device matching ``idcode`` (revision ignored), or None."""
        key = idcode & IDCODE_MASK
        device = self._used.get(key)
        if device is not None:
            return device
        for device in self.devices:
            if device.idcode == key:
                self._used[key] = device
                return device
        return None

    def id_to_ir_length(self, idcode: int) -> int:
        """Return the IR length of the device, or 0 if it is unknown."""
        device = self.find_device(idcode)
        return device.irlen if device else 0

    def id_to_id_cmd(self, idcode: int) -> int:
        """Return the IDCODE instruction of the device, or 0 if it is unknown."""
        device = self.find_device(idcode)
        return device.id_cmd if device else 0

    def id_to_description(self, idcode: int) -> str | None:
        """Return the description of the device, or None if it is unknown."""
        device = self.find_device(idcode)
        return device.text if device else None

    def dump_devices(self, stream: TextIO) -> None:
        """Write one formatted line per device to ``stream``."""
        for device in self.devices:
            stream.write(
                f"{device.idcode:08x} {device.irlen:6d} 0x{device.id_cmd:04x} {device.text}\n"
            )