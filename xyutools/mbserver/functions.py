"""Default handlers for the Modbus function codes a server answers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .exceptions import ExceptionCode
from .frame import (
    Framer,
    bytes_to_uint16,
    register_address_and_number,
    register_address_and_value,
    uint16_to_bytes,
)

if TYPE_CHECKING:
    from .server import Server

HandlerResult = tuple[bytes, ExceptionCode]


def _pack_bits(bits: Sequence[int]) -> bytes:
    """Byte count followed by the bits packed least significant first."""
    size = (len(bits) + 7) // 8
    packed = bytearray(1 + size)
    packed[0] = size & 0xFF
    for i, value in enumerate(bits):
        if value:
            packed[1 + i // 8] |= 1 << (i % 8)
    return bytes(packed)


def read_coils(server: "Server", frame: Framer) -> HandlerResult:
    """Function 1: read coils from server memory."""
    register, _, end = register_address_and_number(frame)
    if end > 65535:
        return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS
    return _pack_bits(server.coils[register:end]), ExceptionCode.SUCCESS


def read_discrete_inputs(server: "Server", frame: Framer) -> HandlerResult:
    """Function 2: read discrete inputs from server memory."""
    register, _, end = register_address_and_number(frame)
    if end > 65535:
        return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS
    return _pack_bits(server.discrete_inputs[register:end]), ExceptionCode.SUCCESS


def read_holding_registers(server: "Server", frame: Framer) -> HandlerResult:
    """Function 3: read holding registers from server memory."""
    register, number, end = register_address_and_number(frame)
    if end > 65536:
        return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS
    payload = uint16_to_bytes(server.holding_registers[register:end])
    return bytes([(number * 2) & 0xFF]) + payload, ExceptionCode.SUCCESS


def read_input_registers(server: "Server", frame: Framer) -> HandlerResult:
    """Function 4: read input registers from server memory."""
    register, number, end = register_address_and_number(frame)
    if end > 65536:
        return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS
    payload = uint16_to_bytes(server.input_registers[register:end])
    return bytes([(number * 2) & 0xFF]) + payload, ExceptionCode.SUCCESS


def write_single_coil(server: "Server", frame: Framer) -> HandlerResult:
    """Function 5: set one coil; any non-zero value switches it on."""
    register, value = register_address_and_value(frame)
    server.coils[register] = 1 if value else 0
    return bytes(frame.data[:4]), ExceptionCode.SUCCESS


def write_holding_register(server: "Server", frame: Framer) -> HandlerResult:
    """Function 6: set one holding register."""
    register, value = register_address_and_value(frame)
    server.holding_registers[register] = value
    return bytes(frame.data[:4]), ExceptionCode.SUCCESS


def write_multiple_coils(server: "Server", frame: Framer) -> HandlerResult:
    """Function 15: set consecutive coils from packed bits."""
    register, number, end = register_address_and_number(frame)
    value_bytes = frame.data[5:]
    if end > 65536:
        return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS

    written = 0
    for i, byte in enumerate(value_bytes):
        for position in range(8):
            server.coils[register + i * 8 + position] = (byte >> position) & 0x01
            written += 1
            if written >= number:
                return bytes(frame.data[:4]), ExceptionCode.SUCCESS
    return bytes(frame.data[:4]), ExceptionCode.SUCCESS


def write_holding_registers(server: "Server", frame: Framer) -> HandlerResult:
    """Function 16: set consecutive holding registers.

    Values are stored as far as memory reaches; the request only succeeds
    when exactly the announced number of registers was written.
    """
    register, number, _ = register_address_and_number(frame)
    values = bytes_to_uint16(frame.data[5:])
    room = max(len(server.holding_registers) - register, 0)
    stored = values[:room]
    server.holding_registers[register:register + len(stored)] = stored
    if len(stored) == number:
        return bytes(frame.data[:4]), ExceptionCode.SUCCESS
    return b"", ExceptionCode.ILLEGAL_DATA_ADDRESS