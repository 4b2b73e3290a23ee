"""Modbus exception codes."""

from __future__ import annotations

from enum import IntEnum


class ExceptionCode(IntEnum):
    """Exception code carried in a Modbus response; SUCCESS means none."""

    SUCCESS = 0
    ILLEGAL_FUNCTION = 1
    ILLEGAL_DATA_ADDRESS = 2
    ILLEGAL_DATA_VALUE = 3
    SLAVE_DEVICE_FAILURE = 4
    ACKNOWLEDGE_SLAVE = 5
    SLAVE_DEVICE_BUSY = 6
    NEGATIVE_ACKNOWLEDGE = 7
    MEMORY_PARITY_ERROR = 8
    GATEWAY_PATH_UNAVAILABLE = 10
    GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND = 11

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFF:
            member = int.__new__(cls, value)
            member._name_ = "UNKNOWN"
            member._value_ = value
            return member
        return None

    def __str__(self) -> str:
        return _DISPLAY_NAMES.get(self._name_, "unknown")


_DISPLAY_NAMES = {
    "SUCCESS": "Success",
    "ILLEGAL_FUNCTION": "IllegalFunction",
    "ILLEGAL_DATA_ADDRESS": "IllegalDataAddress",
    "ILLEGAL_DATA_VALUE": "IllegalDataValue",
    "SLAVE_DEVICE_FAILURE": "SlaveDeviceFailure",
    "ACKNOWLEDGE_SLAVE": "AcknowledgeSlave",
    "SLAVE_DEVICE_BUSY": "SlaveDeviceBusy",
    "NEGATIVE_ACKNOWLEDGE": "NegativeAcknowledge",
    "MEMORY_PARITY_ERROR": "MemoryParityError",
    "GATEWAY_PATH_UNAVAILABLE": "GatewayPathUnavailable",
    "GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND": "GatewayTargetDeviceFailedtoRespond",
}