"""AMF3 decoding into Python values, optionally shaped by a target type."""

from __future__ import annotations

import dataclasses
import re
import struct
import types
import typing
from typing import Any, BinaryIO, Optional, Union

from .encoder import DYNAMIC_ANONYMOUS_TRAITS, AMFError, Marker

_DYNAMIC = object()
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_NONE_TYPE = type(None)
_SIMPLE_NAMES: dict[str, Any] = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "Any": None,
    "typing.Any": None,
    "object": None,
    "None": _NONE_TYPE,
}


def _split_top_level(text: str, separator: str) -> list[str]:
    """Split text on a separator that is not inside brackets."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    parts.append(current.strip())
    return parts


def _inner(text: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        if text.startswith(prefix + "[") and text.endswith("]"):
            return text[len(prefix) + 1 : -1]
    return None


def _resolve_annotation(annotation: Any, owner: type) -> Any:
    """Turn a field annotation, possibly written as text, into a type."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip().strip("'\"")

    alternatives = _split_top_level(text, "|")
    if len(alternatives) > 1:
        resolved = [_resolve_annotation(part, owner) for part in alternatives]
        rest = [part for part in resolved if part is not _NONE_TYPE]
        if len(rest) == 1 and len(rest) < len(resolved) and rest[0] is not None:
            return Optional[rest[0]]
        return None

    inner = _inner(text, ("Optional", "typing.Optional"))
    if inner is not None:
        resolved = _resolve_annotation(inner, owner)
        return None if resolved is None else Optional[resolved]

    inner = _inner(text, ("list", "List", "typing.List"))
    if inner is not None:
        element = _resolve_annotation(inner, owner)
        return list[element] if element is not None else list

    inner = _inner(text, ("dict", "Dict", "typing.Dict"))
    if inner is not None:
        arguments = _split_top_level(inner, ",")
        if len(arguments) == 2:
            value = _resolve_annotation(arguments[1], owner)
            return dict[str, value] if value is not None else dict
        return dict

    if text in _SIMPLE_NAMES:
        return _SIMPLE_NAMES[text]
    if text == owner.__name__:
        return owner
    return None


def _unwrap(tp: Any) -> tuple[bool, Any]:
    """Split an optional type into (accepts None, inner type)."""
    if tp is None or tp is Any or tp is object:
        return True, _DYNAMIC
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(tp)
        has_none = _NONE_TYPE in args
        rest = [arg for arg in args if arg is not _NONE_TYPE]
        if len(rest) == 1:
            return has_none, _unwrap(rest[0])[1]
        return True, _DYNAMIC
    return False, tp


def _kind(tp: Any) -> str:
    if tp is _DYNAMIC:
        return "dynamic"
    if tp is bool:
        return "bool"
    if tp is int:
        return "int"
    if tp is float:
        return "float"
    if tp is str:
        return "str"
    origin = typing.get_origin(tp) or tp
    if origin is list:
        return "list"
    if origin is dict:
        return "dict"
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return "struct"
    return "other"


def _type_name(tp: Any) -> str:
    if tp is _DYNAMIC:
        return "interface"
    return getattr(tp, "__name__", repr(tp))


def _element_type(tp: Any, position: int) -> Any:
    args = typing.get_args(tp)
    return args[position] if len(args) > position else None


def _new_instance(cls: type) -> Any:
    obj = object.__new__(cls)
    for field in dataclasses.fields(cls):
        if field.default is not dataclasses.MISSING:
            value = field.default
        elif field.default_factory is not dataclasses.MISSING:
            value = field.default_factory()
        else:
            value = None
        object.__setattr__(obj, field.name, value)
    return obj


def _find_field(cls: type, key: str) -> dataclasses.Field | None:
    upper_key = key[0].upper() + key[1:] if key and key[0].islower() else key
    for field in dataclasses.fields(cls):
        if field.name.startswith("_"):
            continue
        if field.name in (key, upper_key) or field.metadata.get("amf.name") == key:
            return field
    return None


class Decoder:
    """Reads AMF3 values from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.reset()

    def reset(self) -> None:
        """Forget the strings and objects read so far."""
        self._strings: list[str] = []
        self._objects: list[Any] = []

    def decode(self, target_type: Any = None) -> Any:
        """Read one value.

        Without a target type, arrays become lists and objects dicts. A
        target may be bool, int, float, str, list[...], dict[str, ...], a
        dataclass, or any of these made optional.
        """
        return self._decode(target_type)

    def _decode(self, target_type: Any) -> Any:
        marker = self._read_marker()
        nullable, tp = _unwrap(target_type)
        kind = _kind(tp)
        if marker == Marker.NULL:
            if nullable or kind in ("dynamic", "list", "dict", "struct"):
                return None
            raise AMFError(f"invalid type:{_type_name(tp)} for nil")
        if marker == Marker.FALSE:
            return self._bool(tp, kind, False)
        if marker == Marker.TRUE:
            return self._bool(tp, kind, True)
        if marker == Marker.STRING:
            return self._read_string(tp, kind)
        if marker == Marker.DOUBLE:
            return self._read_float(tp, kind)
        if marker == Marker.INTEGER:
            return self._read_integer(tp, kind)
        if marker == Marker.ARRAY:
            return self._read_array(tp, kind)
        if marker == Marker.OBJECT:
            return self._read_object(tp, kind)
        raise AMFError(f"unsupported marker:{marker}")

    @staticmethod
    def _bool(tp: Any, kind: str, value: bool) -> bool:
        if kind in ("bool", "dynamic"):
            return value
        raise AMFError(f"invalid type:{_type_name(tp)} for bool")

    def _read_float(self, tp: Any, kind: str) -> Any:
        (value,) = struct.unpack(">d", self._read_bytes(8))
        if kind in ("float", "dynamic"):
            return value
        if kind == "int":
            try:
                return int(value)
            except (OverflowError, ValueError) as exc:
                raise AMFError(f"cannot store {value} as int") from exc
        raise AMFError(f"invalid type:{_type_name(tp)} for double")

    def _read_integer(self, tp: Any, kind: str) -> int:
        raw = self._read_u29()
        value = raw - 0x20000000 if raw > 0x0FFFFFFF else raw
        if kind in ("int", "dynamic"):
            return value
        raise AMFError(f"invalid type:{_type_name(tp)} for integer")

    def _read_string(self, tp: Any, kind: str) -> Any:
        text = self._read_string_raw()
        if kind == "int":
            if not _DECIMAL.fullmatch(text):
                raise AMFError(f"invalid integer text: {text!r}")
            return int(text)
        if kind in ("str", "dynamic"):
            return text
        raise AMFError(f"invalid type:{_type_name(tp)} for string")

    def _read_string_raw(self) -> str:
        index = self._read_u29()
        if not index & 0x01:
            try:
                return self._strings[index >> 1]
            except IndexError:
                raise AMFError("string reference out of range") from None
        data = self._read_bytes(index >> 1)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise AMFError("string is not valid UTF-8") from exc
        if text:
            self._strings.append(text)
        return text

    def _object_reference(self, index: int) -> Any:
        try:
            return self._objects[index]
        except IndexError:
            raise AMFError("object reference out of range") from None

    def _read_object(self, tp: Any, kind: str) -> Any:
        index = self._read_u29()
        if not index & 0x01:
            return self._object_reference(index >> 1)
        if index != DYNAMIC_ANONYMOUS_TRAITS:
            raise AMFError("invalid object type")
        if self._read_marker() != 0x01:
            raise AMFError("type object not allowed")

        if kind in ("dynamic", "dict"):
            value_type = _element_type(tp, 1) if kind == "dict" else None
            result: dict[str, Any] = {}
            self._objects.append(result)
            while key := self._read_string_raw():
                result[key] = self._decode(value_type)
            return result

        if kind != "struct":
            raise AMFError(f"struct type expected, found:{_type_name(tp)}")

        instance = _new_instance(tp)
        self._objects.append(instance)
        while key := self._read_string_raw():
            field = _find_field(tp, key)
            if field is None:
                raise AMFError(f"key:{key} not found in struct:{tp.__name__}")
            value = self._decode(_resolve_annotation(field.type, tp))
            object.__setattr__(instance, field.name, value)
        return instance

    def _read_array(self, tp: Any, kind: str) -> Any:
        index = self._read_u29()
        if not index & 0x01:
            return self._object_reference(index >> 1)
        count = index >> 1
        if self._read_marker() != 0x01:
            raise AMFError("ecma array not allowed")
        if kind == "dynamic":
            element_type = None
        elif kind == "list":
            element_type = _element_type(tp, 0)
        else:
            raise AMFError(f"invalid type:{_type_name(tp)} for array")
        result: list[Any] = [None] * count
        self._objects.append(result)
        for position in range(count):
            result[position] = self._decode(element_type)
        return result

    def _read_u29(self) -> int:
        result = 0
        for position in range(4):
            byte = self._read_marker()
            if position < 3:
                result = (result << 7) | (byte & 0x7F)
                if not byte & 0x80:
                    break
            else:
                result = (result << 8) | byte
        return result

    def _read_marker(self) -> int:
        return self._read_bytes(1)[0]

    def _read_bytes(self, length: int) -> bytes:
        buffer = bytearray()
        while len(buffer) < length:
            chunk = self._stream.read(length - len(buffer))
            if not chunk:
                raise EOFError("unexpected end of AMF data")
            buffer += chunk
        return bytes(buffer)