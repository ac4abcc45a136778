"""Database of programming cables, read from a cable list file."""

from __future__ import annotations

import enum
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

DEFAULT_CABLEDB = "cablelist.txt"
BUILTIN_NAME = "built-in cable list"

_FILE_LINE = re.compile(r"\s*(\S+)\s+(\S+)\s+(\S+)\s+([^;]{1,255})")
_BUILTIN_LINE = re.compile(r"\s*(\S+)\s+(\S+)\s+([+-]?\d+)\s*([^;]{1,255})")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class CableType(enum.Enum):
    """Kinds of programming cable."""

    NONE = "none"
    UNKNOWN = "unknown"
    PP = "pp"
    FTDI = "ftdi"
    FX2 = "fx2"
    XPC = "xpc"
    SYSFS_GPIO_CREATOR = "sysfsgpio_creator"
    SYSFS_GPIO_VOICE = "sysfsgpio_voice"
    MATRIX_CREATOR = "matrix_creator"
    MATRIX_VOICE = "matrix_voice"


_SELECTABLE = {
    kind.value: kind
    for kind in CableType
    if kind not in (CableType.NONE, CableType.UNKNOWN)
}


def cable_type_from_name(name: str) -> CableType:
    """Map a cable type name (case-insensitive) to its type, or UNKNOWN."""
    return _SELECTABLE.get(name.lower(), CableType.UNKNOWN)


def cable_type_name(cable_type: CableType) -> str:
    """Return the name of a cable type."""
    return CableType(cable_type).value


@dataclass(frozen=True)
class Cable:
    """One cable entry: alias, type, option string and JTAG frequency."""

    alias: str
    cable_type: CableType
    optstring: str
    freq: int


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class CableDB:
    """Cable list loaded from a file, or from built-in text if the file is missing."""

    def __init__(self, path: str | Path | None = None, builtin: str = "") -> None:
        if path is None:
            path = os.environ.get("CABLEDB", DEFAULT_CABLEDB)
        self.cables: list[Cable] = []
        try:
            stream = open(path, encoding="latin-1")
        except OSError:
            self.file = BUILTIN_NAME
            self._load_builtin(builtin)
        else:
            self.file = str(path)
            with stream:
                self._load_file(stream)

    def _load_file(self, stream: TextIO) -> None:
        for raw in stream:
            line = raw.rstrip()
            if line.startswith("#"):
                continue
            match = _FILE_LINE.match(line)
            if not match:
                continue
            alias, kind, freq_text, options = match.groups()
            if ":" in freq_text:
                print(f"{self.file} has wrong format!", file=sys.stderr)
                break
            self.cables.append(
                Cable(alias, cable_type_from_name(kind), options, _atoi(freq_text))
            )

    def _load_builtin(self, text: str) -> None:
        for chunk in text.split(";"):
            line = chunk.rstrip()
            if not line or line.startswith("#"):
                continue
            match = _BUILTIN_LINE.match(line)
            if not match:
                continue
            alias, kind, freq_text, options = match.groups()
            self.cables.append(
                Cable(alias, cable_type_from_name(kind), options, int(freq_text))
            )

    def get_cable(self, name: str) -> Cable:
        """Return the cable whose alias matches ``name`` case-insensitively."""
        wanted = name.lower()
        for cable in self.cables:
            if cable.alias.lower() == wanted:
                return cable
        raise KeyError(name)

    def dump_cables(self, stream: TextIO) -> None:
        """Write one formatted line per cable to ``stream``."""
        if stream is None:
            raise ValueError("No valid file to dump Cablelist")
        for cable in self.cables:
            stream.write(
                f"{cable.alias:<20}{cable_type_name(cable.cable_type):<8}"
                f"{cable.freq:<10d}{cable.optstring:<60}\n"
            )