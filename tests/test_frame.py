from xyutools.mbserver.exceptions import ExceptionCode
from xyutools.mbserver.frame import (
    bytes_to_uint16,
    get_exception,
    register_address_and_number,
    register_address_and_value,
    set_data_with_register_and_number,
    set_data_with_register_and_number_and_bytes,
    set_data_with_register_and_number_and_values,
    uint16_to_bytes,
)
from xyutools.mbserver.frametcp import TCPFrame


def test_set_data_with_register_and_number():
    frame = TCPFrame()
    set_data_with_register_and_number(frame, 0, 64)
    assert frame.data == bytes([0, 0, 0, 64])


def test_set_data_with_register_and_number_and_values():
    frame = TCPFrame()
    set_data_with_register_and_number_and_values(frame, 7, 2, [3, 4])
    assert frame.data == bytes([0, 7, 0, 2, 4, 0, 3, 0, 4])


def test_set_data_with_register_and_number_and_bytes():
    frame = TCPFrame()
    set_data_with_register_and_number_and_bytes(frame, 1, 2, [3])
    assert frame.data == bytes([0, 1, 0, 2, 1, 3])


def test_bytes_to_uint16():
    assert bytes_to_uint16(bytes([1, 2, 3, 4])) == [258, 772]


def test_uint16_to_bytes():
    assert uint16_to_bytes([1, 2, 3]) == bytes([0, 1, 0, 2, 0, 3])


def test_uint16_round_trip():
    values = [0, 1, 258, 65535]
    assert bytes_to_uint16(uint16_to_bytes(values)) == values


def test_register_address_and_number_round_trip():
    frame = TCPFrame()
    set_data_with_register_and_number(frame, 100, 3)
    assert register_address_and_number(frame) == (100, 3, 103)


def test_register_address_and_value():
    frame = TCPFrame()
    set_data_with_register_and_number(frame, 5, 6)
    assert register_address_and_value(frame) == (5, 6)


def test_register_address_ignores_trailing_bytes():
    frame = TCPFrame(data=b"\x00\x01\x00\x02\xff\xee")
    assert register_address_and_number(frame) == (1, 2, 3)


def test_get_exception_success_for_plain_function():
    frame = TCPFrame(function=3, data=bytes([6]))
    assert get_exception(frame) is ExceptionCode.SUCCESS


def test_get_exception_after_set_exception():
    frame = TCPFrame(function=1)
    frame.set_exception(ExceptionCode.ILLEGAL_DATA_ADDRESS)
    assert get_exception(frame) is ExceptionCode.ILLEGAL_DATA_ADDRESS


def test_unsupported_function_code_reads_back():
    frame = TCPFrame(function=255, data=bytes([ExceptionCode.ILLEGAL_FUNCTION]))
    assert get_exception(frame) is ExceptionCode.ILLEGAL_FUNCTION