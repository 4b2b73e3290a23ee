"""AMF3 encoding of Python values."""

from __future__ import annotations

import dataclasses
import struct
from collections.abc import Mapping, Sequence
from enum import IntEnum
from typing import Any, BinaryIO


class Marker(IntEnum):
    """AMF3 type markers."""

    UNDEFINED = 0x00
    NULL = 0x01
    FALSE = 0x02
    TRUE = 0x03
    INTEGER = 0x04
    DOUBLE = 0x05
    STRING = 0x06
    XMLDOC = 0x07
    DATE = 0x08
    ARRAY = 0x09
    OBJECT = 0x0A
    XML = 0x0B
    BYTEARRAY = 0x0C


class AMFError(ValueError):
    """Raised for values or data that cannot be encoded or decoded."""


DYNAMIC_ANONYMOUS_TRAITS = 0x0B
U29_LIMIT = 0x20000000
_INT29_MAX = 0x0FFFFFFF
_INT29_MIN = -0x0FFFFFFF
_DOUBLE_NEGATIVE_LIMIT = -0x7FFFFFFF
_UINT32_MAX = 0xFFFFFFFF


def _u29_bytes(value: int) -> bytes:
    if value < 0 or value >= U29_LIMIT:
        raise AMFError("u29 over flow")
    if value < 0x80:
        return bytes([value])
    if value < 0x4000:
        return bytes([(value >> 7) | 0x80, value & 0x7F])
    if value < 0x200000:
        return bytes([(value >> 14) | 0x80, ((value >> 7) & 0x7F) | 0x80, value & 0x7F])
    return bytes(
        [
            (value >> 22) | 0x80,
            ((value >> 15) & 0x7F) | 0x80,
            ((value >> 8) & 0x7F) | 0x80,
            value & 0xFF,
        ]
    )


class Encoder:
    """Writes values as AMF3 to a binary stream.

    Supported values are None, bool, int, float, str, mappings with string
    keys, sequences and dataclass instances. Integers outside the signed
    29-bit range are written as doubles, or as decimal strings when even a
    double cannot carry them.
    """

    def __init__(self, stream: BinaryIO, reserve_struct: bool = False) -> None:
        self._stream = stream
        self.reserve_struct = reserve_struct
        self.reset()

    def reset(self) -> None:
        """Forget the strings written so far, so no references are made to them."""
        self._strings: dict[str, int] = {}

    def encode(self, value: Any) -> None:
        """Write one value."""
        if value is None:
            self._write_marker(Marker.NULL)
        elif isinstance(value, bool):
            self._write_marker(Marker.TRUE if value else Marker.FALSE)
        elif isinstance(value, int):
            self._encode_int(value)
        elif isinstance(value, float):
            self._encode_float(value)
        elif isinstance(value, str):
            self._encode_string(value)
        elif isinstance(value, Mapping):
            self._encode_map(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            self._encode_struct(value)
        elif isinstance(value, (Sequence, bytearray, memoryview)):
            self._encode_sequence(value)
        else:
            raise AMFError(f"unsupported type:{type(value).__name__}")

    def _encode_int(self, value: int) -> None:
        if value >= 0:
            if value > _INT29_MAX:
                if value <= _UINT32_MAX:
                    self._encode_float(float(value))
                else:
                    self._encode_string(str(value))
                return
            self._write_marker(Marker.INTEGER)
            self._write_u29(value)
            return
        if value < _INT29_MIN:
            if value > _DOUBLE_NEGATIVE_LIMIT:
                self._encode_float(float(value))
            else:
                self._encode_string(str(value))
            return
        self._write_marker(Marker.INTEGER)
        self._write_u29(value & (U29_LIMIT - 1))

    def _encode_float(self, value: float) -> None:
        self._write_bytes(bytes([Marker.DOUBLE]) + struct.pack(">d", value))

    def _encode_string(self, value: str) -> None:
        self._write_marker(Marker.STRING)
        self._write_string(value)

    def _begin_object(self) -> None:
        self._write_marker(Marker.OBJECT)
        self._write_marker(DYNAMIC_ANONYMOUS_TRAITS)
        self._write_string("")

    def _encode_map(self, value: Mapping) -> None:
        self._begin_object()
        for key, item in value.items():
            if not isinstance(key, str):
                raise AMFError("only string key allowed in map")
            self._write_string(key)
            self.encode(item)
        self._write_string("")

    def _field_name(self, field: dataclasses.Field) -> str:
        if field.name.startswith("_"):
            return ""
        tagged = field.metadata.get("amf.name")
        if tagged:
            return tagged
        if not self.reserve_struct:
            return field.name[:1].lower() + field.name[1:]
        return field.name

    def _encode_struct(self, value: Any) -> None:
        self._begin_object()
        for field in dataclasses.fields(value):
            key = self._field_name(field)
            if not key:
                continue
            self._write_string(key)
            self.encode(getattr(value, field.name))
        self._write_string("")

    def _encode_sequence(self, value: Sequence) -> None:
        items = list(value)
        self._write_marker(Marker.ARRAY)
        self._write_u29((len(items) << 1) | 0x01)
        self._write_string("")
        for item in items:
            self.encode(item)

    def _write_string(self, value: str) -> None:
        index = self._strings.get(value)
        if index is not None:
            self._write_u29(index << 1)
            return
        data = value.encode("utf-8")
        self._write_u29((len(data) << 1) | 0x01)
        if value:
            self._strings[value] = len(self._strings)
        self._write_bytes(data)

    def _write_marker(self, marker: int) -> None:
        self._write_bytes(bytes([marker]))

    def _write_u29(self, value: int) -> None:
        self._write_bytes(_u29_bytes(value))

    def _write_bytes(self, data: bytes) -> None:
        written = self._stream.write(data)
        if written is not None and written != len(data):
            raise AMFError("write data failed")