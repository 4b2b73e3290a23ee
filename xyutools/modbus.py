"""Modbus RTU checksums and byte/number conversions."""

from __future__ import annotations

import re
import struct

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HEX = re.compile(r"[+-]?[0-9a-fA-F]+")


def _build_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc, c = 0, i
        for _ in range(8):
            crc = (crc >> 1) ^ 0xA001 if (crc ^ c) & 1 else crc >> 1
            c >>= 1
        table.append(crc)
    return tuple(table)


_CRC_TABLE = _build_table()


def check_sum_value(data: bytes) -> int:
    """CRC-16/Modbus of ``data`` as an integer."""
    crc = 0xFFFF
    for byte in data:
        crc = (crc >> 8) ^ _CRC_TABLE[(crc ^ byte) & 0xFF]
    return crc


def check_sum(data: bytes) -> bytes:
    """CRC-16/Modbus of ``data`` as two bytes, low byte first."""
    return uint16_to_bytes(check_sum_value(data))


def check_crc(data: bytes, data_len: int) -> bool:
    """Check that the two bytes after ``data[:data_len]`` hold its CRC."""
    if len(data) < data_len + 2:
        return False
    return check_sum(data[:data_len]) == bytes(data[data_len:data_len + 2])


def _parse_int(text: str, base: int) -> int:
    """Parse like the lenient integer parsing the wire tools use: 0 on error."""
    pattern = _HEX if base == 16 else _DECIMAL
    if not pattern.fullmatch(text):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(text, base)))


def _wrap_signed(n: int, bits: int) -> int:
    n &= (1 << bits) - 1
    if n >= 1 << (bits - 1):
        n -= 1 << bits
    return n


def string_to_bytes(data: str) -> bytes:
    """Hex text to bytes, either space separated or as packed digit pairs."""
    if " " in data:
        tokens = data.split(" ")
    else:
        tokens = [data[i:i + 2] for i in range(0, len(data) - 1, 2)]
    return bytes(_parse_int(token, 16) & 0xFF for token in tokens)


def int16_to_bytes(n: int) -> bytes:
    return struct.pack("<h", _wrap_signed(n, 16))


def int32_to_bytes(n: int) -> bytes:
    return struct.pack("<i", _wrap_signed(n, 32))


def uint16_to_bytes(n: int) -> bytes:
    return struct.pack("<H", n & 0xFFFF)


def int32_string_to_bytes(n: str) -> bytes:
    """Decimal text to four big-endian bytes; unparsable text gives zero."""
    return struct.pack(">i", _wrap_signed(_parse_int(n, 10), 32))


def int16_string_to_bytes(n: str) -> bytes:
    """Decimal text to two big-endian bytes; unparsable text gives zero."""
    return struct.pack(">h", _wrap_signed(_parse_int(n, 10), 16))


def _decode_int(data: bytes, order: str) -> int:
    if len(data) == 2:
        return struct.unpack(order + "h", bytes(data))[0]
    if len(data) >= 4:
        return struct.unpack_from(order + "i", bytes(data))[0]
    return 0


def bytes_to_int(data: bytes) -> int:
    """Little-endian int16 for two bytes, int32 otherwise; 0 if too short."""
    return _decode_int(data, "<")


def bytes_to_string(data: bytes) -> str:
    """Big-endian int16/int32 as decimal text."""
    return str(_decode_int(data, ">"))


def bytes_to_string_le(data: bytes) -> str:
    """Little-endian int16/int32 as decimal text."""
    return str(_decode_int(data, "<"))


def bytes_to_float32(data: bytes) -> float:
    """Little-endian IEEE-754 single from the first four bytes."""
    if len(data) < 4:
        raise ValueError("float32 needs four bytes")
    return struct.unpack_from("<f", bytes(data))[0]