import io

import pytest

from jtagkit.cabledb import (
    BUILTIN_NAME,
    CableDB,
    CableType,
    cable_type_from_name,
    cable_type_name,
)

LIST_TEXT = (
    "# alias type freq options\n"
    "myftdi ftdi 6000000 0x0403:0x6010\n"
    "#hidden pp 0 none\n"
    "short pp\n"
    "spaced   pp   0   a b c;rest\n"
    "badfreq xpc abc opts\n"
    "broken fx2 1:2 opts\n"
    "after ftdi 0 x\n"
)


@pytest.fixture
def db(tmp_path):
    path = tmp_path / "cablelist.txt"
    path.write_text(LIST_TEXT)
    return CableDB(path)


def test_lookup_is_case_insensitive(db):
    cable = db.get_cable("MYFTDI")
    assert cable.alias == "myftdi"
    assert cable.cable_type is CableType.FTDI
    assert cable.freq == 6000000
    assert cable.optstring == "0x0403:0x6010"


def test_comment_and_short_lines_are_skipped(db):
    with pytest.raises(KeyError):
        db.get_cable("#hidden")
    with pytest.raises(KeyError):
        db.get_cable("short")


def test_options_stop_at_semicolon(db):
    assert db.get_cable("spaced").optstring == "a b c"


def test_non_numeric_frequency_is_zero(db):
    assert db.get_cable("badfreq").freq == 0


def test_colon_in_frequency_stops_reading(db, capsys):
    with pytest.raises(KeyError):
        db.get_cable("after")
    assert [c.alias for c in db.cables] == ["myftdi", "spaced", "badfreq"]


def test_file_name_is_recorded(tmp_path):
    path = tmp_path / "cables.txt"
    path.write_text("x pp 0 y\n")
    assert CableDB(path).file == str(path)


def test_environment_selects_file(tmp_path, monkeypatch):
    path = tmp_path / "env.txt"
    path.write_text("envcable fx2 100 opt\n")
    monkeypatch.setenv("CABLEDB", str(path))
    assert CableDB().get_cable("envcable").cable_type is CableType.FX2


def test_builtin_text_used_when_file_missing(tmp_path):
    db = CableDB(tmp_path / "absent.txt", builtin="# c;first pp 0 opt;;second ftdi 1000 x:y;")
    assert db.file == BUILTIN_NAME
    second = db.get_cable("second")
    assert second.freq == 1000
    assert second.optstring == "x:y"
    assert db.get_cable("first").cable_type is CableType.PP


def test_dump_layout(db):
    out = io.StringIO()
    db.dump_cables(out)
    lines = out.getvalue().splitlines()
    assert len(lines) == len(db.cables)
    first = lines[0]
    assert first.split() == ["myftdi", "ftdi", "6000000", "0x0403:0x6010"]
    assert first[:20].rstrip() == "myftdi"
    assert first[20:28].rstrip() == "ftdi"
    assert len(first) >= 20 + 8 + 10 + 60


def test_dump_without_stream_raises(db):
    with pytest.raises(ValueError):
        db.dump_cables(None)


def test_type_names():
    assert cable_type_from_name("FTDI") is CableType.FTDI
    assert cable_type_from_name("none") is CableType.UNKNOWN
    assert cable_type_from_name("bogus") is CableType.UNKNOWN
    assert cable_type_name(CableType.NONE) == "none"


@pytest.mark.parametrize(
    "kind", [k for k in CableType if k not in (CableType.NONE, CableType.UNKNOWN)]
)
def test_type_name_round_trip(kind):
    assert cable_type_from_name(cable_type_name(kind).upper()) is kind