import pytest

from xyutools.mbserver.exceptions import ExceptionCode


@pytest.mark.parametrize(
    "code, text",
    [
        (ExceptionCode.SUCCESS, "Success"),
        (ExceptionCode.ILLEGAL_FUNCTION, "IllegalFunction"),
        (ExceptionCode.ILLEGAL_DATA_ADDRESS, "IllegalDataAddress"),
        (ExceptionCode.ILLEGAL_DATA_VALUE, "IllegalDataValue"),
        (ExceptionCode.SLAVE_DEVICE_FAILURE, "SlaveDeviceFailure"),
        (ExceptionCode.ACKNOWLEDGE_SLAVE, "AcknowledgeSlave"),
        (ExceptionCode.SLAVE_DEVICE_BUSY, "SlaveDeviceBusy"),
        (ExceptionCode.NEGATIVE_ACKNOWLEDGE, "NegativeAcknowledge"),
        (ExceptionCode.MEMORY_PARITY_ERROR, "MemoryParityError"),
        (ExceptionCode.GATEWAY_PATH_UNAVAILABLE, "GatewayPathUnavailable"),
        (
            ExceptionCode.GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND,
            "GatewayTargetDeviceFailedtoRespond",
        ),
    ],
)
def test_display_names(code, text):
    assert str(code) == text


@pytest.mark.parametrize(
    "value, code",
    [
        (0, ExceptionCode.SUCCESS),
        (1, ExceptionCode.ILLEGAL_FUNCTION),
        (2, ExceptionCode.ILLEGAL_DATA_ADDRESS),
        (10, ExceptionCode.GATEWAY_PATH_UNAVAILABLE),
        (11, ExceptionCode.GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND),
    ],
)
def test_codes_from_wire_values(value, code):
    assert ExceptionCode(value) is code


def test_unknown_code_keeps_value():
    code = ExceptionCode(9)
    assert code == 9
    assert str(code) == "unknown"


def test_out_of_byte_range_is_rejected():
    with pytest.raises(ValueError):
        ExceptionCode(256)