import struct

from xyutools.mbserver.crc import crc_modbus


def test_crc_known_value():
    assert crc_modbus(bytes([0x01, 0x04, 0x02, 0xFF, 0xFF])) == 0x80B8


def test_crc_of_empty_data_is_initial_value():
    assert crc_modbus(b"") == 0xFFFF


def test_crc_over_message_with_appended_crc_is_zero():
    message = bytes([0x01, 0x04, 0x02, 0xFF, 0xFF])
    framed = message + struct.pack("<H", crc_modbus(message))
    assert crc_modbus(framed) == 0


def test_crc_accepts_bytearray():
    data = bytearray([0x01, 0x04, 0x02, 0xFF, 0xFF])
    assert crc_modbus(data) == crc_modbus(bytes(data))