"""Modbus RTU frames: address, function, data and a CRC-16 trailer."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass

from .crc import crc_modbus
from .exceptions import ExceptionCode
from .frame import Framer


@dataclass
class RTUFrame(Framer):
    """A Modbus RTU frame."""

    address: int = 0
    function: int = 0
    data: bytes = b""
    crc: int = 0

    def copy(self) -> "RTUFrame":
        return dataclasses.replace(self)

    def to_bytes(self) -> bytes:
        body = bytes([self.address & 0xFF, self.function & 0xFF]) + bytes(self.data)
        return body + struct.pack("<H", crc_modbus(body))

    def set_data(self, data: bytes) -> None:
        self.data = bytes(data)

    def set_exception(self, exception: ExceptionCode) -> None:
        self.function |= 0x80
        self.data = bytes([int(exception) & 0xFF])


def parse_rtu_frame(packet: bytes) -> RTUFrame:
    """Parse a raw RTU packet; ValueError when it is short or its CRC is wrong."""
    packet = bytes(packet)
    if len(packet) < 5:
        raise ValueError(f"RTU Frame error: packet less than 5 bytes: {list(packet)}")
    (crc_expect,) = struct.unpack("<H", packet[-2:])
    crc_calc = crc_modbus(packet[:-2])
    if crc_calc != crc_expect:
        raise ValueError(
            f"RTU Frame error: CRC (expected 0x{crc_expect:x}, got 0x{crc_calc:x})"
        )
    return RTUFrame(address=packet[0], function=packet[1], data=packet[2:-2], crc=crc_expect)