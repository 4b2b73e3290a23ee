import pytest

from xyutools.mbserver.exceptions import ExceptionCode
from xyutools.mbserver.frame import get_exception
from xyutools.mbserver.frametcp import TCPFrame, parse_tcp_frame


def test_wire_bytes():
    frame = TCPFrame(
        transaction_identifier=1, protocol_identifier=0, device=255, function=3,
        data=bytes([0, 100, 0, 3]),
    )
    assert frame.to_bytes() == bytes([0, 1, 0, 0, 0, 6, 255, 3, 0, 100, 0, 3])


def test_parse_fields():
    frame = parse_tcp_frame(bytes([0, 7, 0, 0, 0, 3, 1, 2, 9]))
    assert frame.transaction_identifier == 7
    assert frame.protocol_identifier == 0
    assert frame.length == 3
    assert frame.device == 1
    assert frame.function == 2
    assert frame.data == bytes([9])


def test_round_trip():
    frame = TCPFrame(transaction_identifier=42, device=17, function=16, data=bytes([0, 1, 0, 2, 4, 0, 3, 0, 4]))
    parsed = parse_tcp_frame(frame.to_bytes())
    assert parsed.to_bytes() == frame.to_bytes()
    assert parsed.data == frame.data
    assert parsed.length == len(frame.data) + 2


def test_parse_short_packet():
    with pytest.raises(ValueError):
        parse_tcp_frame(bytes([0, 1, 0, 0, 0, 2, 1, 3]))


def test_parse_length_mismatch():
    with pytest.raises(ValueError, match="length"):
        parse_tcp_frame(bytes([0, 1, 0, 0, 0, 9, 1, 3, 0]))


def test_set_data_updates_length():
    frame = TCPFrame(function=3)
    frame.set_data(bytes([1, 2, 3, 4, 5]))
    assert frame.length == len(frame.data) + 2


def test_set_exception():
    frame = TCPFrame(function=4, data=bytes([0, 200, 0, 3]))
    frame.set_exception(ExceptionCode.ILLEGAL_DATA_ADDRESS)
    assert get_exception(frame) is ExceptionCode.ILLEGAL_DATA_ADDRESS
    assert frame.data == bytes([ExceptionCode.ILLEGAL_DATA_ADDRESS])
    assert frame.length == len(frame.data) + 2


def test_copy_is_independent():
    frame = TCPFrame(transaction_identifier=5, function=3, data=bytes([0, 1, 0, 1]))
    duplicate = frame.copy()
    duplicate.set_data(bytes([7]))
    assert frame.data == bytes([0, 1, 0, 1])
    assert duplicate.data == bytes([7])
    assert duplicate.transaction_identifier == frame.transaction_identifier