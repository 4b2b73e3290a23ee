import struct

import pytest

from xyutools import modbus


def test_check_sum_known_value():
    assert modbus.check_sum(bytes([0x01, 0x04, 0x02, 0xFF, 0xFF])) == b"\xb8\x80"
    assert modbus.check_sum_value(bytes([0x01, 0x04, 0x02, 0xFF, 0xFF])) == 0x80B8


def test_check_sum_of_empty_is_initial_value():
    assert modbus.check_sum(b"") == b"\xff\xff"


def test_check_crc_round_trip():
    payload = bytes([0x01, 0x06, 0x00, 0x0A, 0x01, 0x10])
    frame = payload + modbus.check_sum(payload)
    assert modbus.check_crc(frame, 6) is True
    corrupted = frame[:-1] + bytes([frame[-1] ^ 0xFF])
    assert modbus.check_crc(corrupted, 6) is False


def test_check_crc_short_data():
    assert modbus.check_crc(bytes([0x01, 0x06, 0x00]), 6) is False


@pytest.mark.parametrize(
    "text, expected",
    [
        ("40 00", b"\x40\x00"),
        ("4000", b"\x40\x00"),
        ("0102030", b"\x01\x02\x03"),
        ("zz 01", b"\x00\x01"),
        ("40  00", b"\x40\x00\x00"),
    ],
)
def test_string_to_bytes(text, expected):
    assert modbus.string_to_bytes(text) == expected


def test_int16_to_bytes():
    assert modbus.int16_to_bytes(1024) == b"\x00\x04"
    assert modbus.int16_to_bytes(1) == b"\x01\x00"
    assert modbus.int16_to_bytes(-1) == b"\xff\xff"


def test_int32_to_bytes():
    assert modbus.int32_to_bytes(1024) == b"\x00\x04\x00\x00"


def test_uint16_to_bytes():
    assert modbus.uint16_to_bytes(1024) == b"\x00\x04"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1", b"\x00\x00\x00\x01"),
        ("10", b"\x00\x00\x00\x0a"),
        ("1024", b"\x00\x00\x04\x00"),
        ("2048", b"\x00\x00\x08\x00"),
        ("", b"\x00\x00\x00\x00"),
        ("A", b"\x00\x00\x00\x00"),
    ],
)
def test_int32_string_to_bytes(text, expected):
    assert modbus.int32_string_to_bytes(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1", b"\x00\x01"),
        ("10", b"\x00\x0a"),
        ("1024", b"\x04\x00"),
        ("4096", b"\x10\x00"),
        ("", b"\x00\x00"),
        ("A", b"\x00\x00"),
    ],
)
def test_int16_string_to_bytes(text, expected):
    assert modbus.int16_string_to_bytes(text) == expected


def test_bytes_to_int():
    assert modbus.bytes_to_int(modbus.uint16_to_bytes(1024)) == 1024
    assert modbus.bytes_to_int(modbus.int32_to_bytes(70000)) == 70000
    assert modbus.bytes_to_int(b"\x01") == 0


def test_bytes_to_string_big_endian():
    assert modbus.bytes_to_string(modbus.int32_string_to_bytes("1024")) == "1024"
    assert modbus.bytes_to_string(b"\xff\xfe") == "-2"


def test_bytes_to_string_little_endian():
    assert modbus.bytes_to_string_le(modbus.int32_to_bytes(1024)) == "1024"


def test_bytes_to_float32():
    data = struct.pack("<f", 3.14)
    assert modbus.bytes_to_float32(data) == pytest.approx(3.14, rel=1e-6)


def test_bytes_to_float32_short():
    with pytest.raises(ValueError):
        modbus.bytes_to_float32(b"\x00\x01")