"""Modbus frame interface and helpers for the register fields of frame data."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import Iterable

from .exceptions import ExceptionCode


class Framer(ABC):
    """A Modbus frame with a function code and a data field."""

    function: int
    data: bytes

    @abstractmethod
    def to_bytes(self) -> bytes:
        """The frame as it is sent on the wire."""

    @abstractmethod
    def copy(self) -> "Framer":
        """A shallow copy of the frame."""

    @abstractmethod
    def set_data(self, data: bytes) -> None:
        """Replace the data field."""

    @abstractmethod
    def set_exception(self, exception: ExceptionCode) -> None:
        """Turn the frame into an exception response."""


def get_exception(frame: Framer) -> ExceptionCode:
    """The exception carried by the frame, or SUCCESS when there is none."""
    if frame.function & 0x80:
        return ExceptionCode(frame.data[0])
    return ExceptionCode.SUCCESS


def register_address_and_number(frame: Framer) -> tuple[int, int, int]:
    """(first register, register count, end register) from the frame data."""
    register, number = struct.unpack_from(">HH", frame.data)
    return register, number, register + number


def register_address_and_value(frame: Framer) -> tuple[int, int]:
    """(register, value) from the frame data."""
    register, value = struct.unpack_from(">HH", frame.data)
    return register, value


def set_data_with_register_and_number(frame: Framer, register: int, number: int) -> None:
    frame.set_data(struct.pack(">HH", register & 0xFFFF, number & 0xFFFF))


def set_data_with_register_and_number_and_values(
    frame: Framer, register: int, number: int, values: Iterable[int]
) -> None:
    payload = uint16_to_bytes(values)
    header = struct.pack(">HHB", register & 0xFFFF, number & 0xFFFF, len(payload) & 0xFF)
    frame.set_data(header + payload)


def set_data_with_register_and_number_and_bytes(
    frame: Framer, register: int, number: int, data: bytes
) -> None:
    payload = bytes(data)
    header = struct.pack(">HHB", register & 0xFFFF, number & 0xFFFF, len(payload) & 0xFF)
    frame.set_data(header + payload)


def bytes_to_uint16(data: bytes) -> list[int]:
    """Big-endian byte pairs to integers; a trailing odd byte is ignored."""
    count = len(data) // 2
    return list(struct.unpack(f">{count}H", bytes(data[: count * 2])))


def uint16_to_bytes(values: Iterable[int]) -> bytes:
    """Integers to big-endian byte pairs."""
    values = [value & 0xFFFF for value in values]
    return struct.pack(f">{len(values)}H", *values)