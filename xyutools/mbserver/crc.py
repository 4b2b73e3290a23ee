"""CRC-16/Modbus checksum used by RTU frames."""

from __future__ import annotations

from ..modbus import check_sum_value


def crc_modbus(data: bytes) -> int:
    """CRC-16/Modbus of ``data`` (initial value 0xFFFF, reflected poly 0xA001)."""
    return check_sum_value(bytes(data))