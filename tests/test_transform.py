import os
import sys

import pytest

from xyutools.p2p import transform


def test_byte_to_string_stops_at_zero():
    assert transform.byte_to_string(b"abc\x00def") == "abc"
    assert transform.byte_to_string(b"abc") == "abc"
    assert transform.byte_to_string(b"\x00abc") == ""


def test_substr_counts_characters():
    assert transform.substr("héllo", 1, 3) == "él"
    assert transform.substr("##0012{}**", 4, 10) == "12{}**"


@pytest.mark.parametrize("start,end", [(-1, 2), (6, 6), (0, 9), (0, -1), (3, 1)])
def test_substr_bounds(start, end):
    with pytest.raises(ValueError):
        transform.substr("hello", start, end)


def test_str_to_time():
    assert transform.str_to_time("2016030313000000") == "2016-03-03 13:00:00"


def test_str_to_time_too_short():
    with pytest.raises(ValueError):
        transform.str_to_time("20160303130000")


def test_get_server_path():
    assert transform.get_server_path("/usr/bin/app") == "/usr/bin/"
    assert transform.get_server_path("C:\\a\\b.exe") == "C:\\a\\"


@pytest.mark.parametrize("path", ["app", "/app", ""])
def test_get_server_path_errors(path):
    with pytest.raises(ValueError):
        transform.get_server_path(path)


def test_get_local_path(tmp_path, monkeypatch):
    program = tmp_path / "prog"
    program.write_text("")
    monkeypatch.setattr(sys, "argv", [str(program)])
    assert transform.get_local_path() == os.path.abspath(str(program))


def test_get_local_path_missing(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "missing" / "prog")])
    with pytest.raises(FileNotFoundError):
        transform.get_local_path()


def test_is_exist_path_reports_missing(tmp_path):
    assert transform.is_exist_path(str(tmp_path)) is False
    assert transform.is_exist_path(str(tmp_path / "nothing")) is True


def test_create_ini_dir(tmp_path):
    target = tmp_path / "config" / "sub"
    transform.create_ini_dir(str(target))
    assert target.is_dir()


def test_create_file_keeps_content(tmp_path):
    path = tmp_path / "f.txt"
    transform.create_file(str(path))
    assert path.read_bytes() == b""
    path.write_text("keep")
    transform.create_file(str(path))
    assert path.read_text() == "keep"