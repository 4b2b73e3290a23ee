"""Modbus TCP frames with an MBAP header."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass

from .exceptions import ExceptionCode
from .frame import Framer

_HEADER = struct.Struct(">HHHBB")


@dataclass
class TCPFrame(Framer):
    """A Modbus TCP frame; ``length`` counts device, function and data bytes."""

    transaction_identifier: int = 0
    protocol_identifier: int = 0
    length: int = 0
    device: int = 0
    function: int = 0
    data: bytes = b""

    def copy(self) -> "TCPFrame":
        return dataclasses.replace(self)

    def to_bytes(self) -> bytes:
        header = _HEADER.pack(
            self.transaction_identifier & 0xFFFF,
            self.protocol_identifier & 0xFFFF,
            (2 + len(self.data)) & 0xFFFF,
            self.device & 0xFF,
            self.function & 0xFF,
        )
        return header + bytes(self.data)

    def set_data(self, data: bytes) -> None:
        self.data = bytes(data)
        self._set_length()

    def set_exception(self, exception: ExceptionCode) -> None:
        self.function |= 0x80
        self.data = bytes([int(exception) & 0xFF])
        self._set_length()

    def _set_length(self) -> None:
        self.length = (len(self.data) + 2) & 0xFFFF


def parse_tcp_frame(packet: bytes) -> TCPFrame:
    """Parse a raw TCP packet; ValueError when short or its length field disagrees."""
    packet = bytes(packet)
    if len(packet) < 9:
        raise ValueError("TCP Frame error: packet less than 9 bytes")
    transaction, protocol, length, device, function = _HEADER.unpack_from(packet)
    frame = TCPFrame(
        transaction_identifier=transaction,
        protocol_identifier=protocol,
        length=length,
        device=device,
        function=function,
        data=packet[_HEADER.size:],
    )
    if frame.length != len(frame.data) + 2:
        raise ValueError("specified packet length does not match actual packet length")
    return frame