"""Binary encoding of storage entry maps.

This module isolates the on-disk format so the pool stays focused on
lifecycle. The format is self-describing and round-trips values exactly:

    magic "ASTG" | u8 format version | u32 entry count | entries
    entry  = string key, value
    string = u32 byte length, UTF-8 bytes
    value  = u8 tag, payload

All integers and floats are little-endian.
"""

from __future__ import annotations

from enum import IntEnum
import struct
from typing import Mapping

from core.constants import MAX_VALUE_DEPTH, STORAGE_FILE_MAGIC, STORAGE_FORMAT_VERSION
from core.value_types import (
    ArrayValue,
    BooleanValue,
    HandleKind,
    HandleValue,
    NumberValue,
    Side,
    SideValue,
    StringValue,
    Value,
    VoidValue,
)

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


class ValueTag(IntEnum):
    """Wire tag of each value variant."""

    ARRAY = 0
    BOOLEAN = 1
    GROUP = 2
    NUMBER = 3
    OBJECT = 4
    SIDE = 5
    STRING = 6
    CODE = 7
    CONFIG = 8
    CONTROL = 9
    DISPLAY = 10
    LOCATION = 11
    SCRIPT_HANDLE = 12
    STRUCTURED_TEXT = 13
    DIARY_RECORD = 14
    TASK = 15
    TEAM_MEMBER = 16
    NAMESPACE = 17
    VOID = 18


_HANDLE_TAGS: dict[HandleKind, ValueTag] = {
    HandleKind.GROUP: ValueTag.GROUP,
    HandleKind.OBJECT: ValueTag.OBJECT,
    HandleKind.CODE: ValueTag.CODE,
    HandleKind.CONFIG: ValueTag.CONFIG,
    HandleKind.CONTROL: ValueTag.CONTROL,
    HandleKind.DISPLAY: ValueTag.DISPLAY,
    HandleKind.LOCATION: ValueTag.LOCATION,
    HandleKind.SCRIPT_HANDLE: ValueTag.SCRIPT_HANDLE,
    HandleKind.STRUCTURED_TEXT: ValueTag.STRUCTURED_TEXT,
    HandleKind.DIARY_RECORD: ValueTag.DIARY_RECORD,
    HandleKind.TASK: ValueTag.TASK,
    HandleKind.TEAM_MEMBER: ValueTag.TEAM_MEMBER,
    HandleKind.NAMESPACE: ValueTag.NAMESPACE,
}
_HANDLE_KINDS: dict[ValueTag, HandleKind] = {tag: kind for kind, tag in _HANDLE_TAGS.items()}


def encode_entries(entries: Mapping[str, Value]) -> bytes:
    """Encode an entry map into storage file bytes.

    Args:
        entries: Key to value mapping.

    Returns:
        Complete file payload.

    Raises:
        ValueError: If a key or payload cannot be encoded.
    """
    chunks: list[bytes] = [STORAGE_FILE_MAGIC, _U8.pack(STORAGE_FORMAT_VERSION)]
    chunks.append(_U32.pack(len(entries)))
    for key, value in entries.items():
        _encode_string(chunks, key)
        _encode_value(chunks, value, depth=0)
    return b"".join(chunks)


def decode_entries(payload: bytes) -> dict[str, Value]:
    """Decode storage file bytes into an entry map.

    Args:
        payload: Complete file payload.

    Returns:
        Decoded key to value mapping.

    Raises:
        ValueError: If the payload is not a well-formed storage file.
    """
    reader = _Reader(payload)
    magic = reader.take(len(STORAGE_FILE_MAGIC))
    if magic != STORAGE_FILE_MAGIC:
        raise ValueError("Not a storage file: bad magic header")
    version = reader.u8()
    if version != STORAGE_FORMAT_VERSION:
        raise ValueError(f"Unsupported storage format version {version}")
    entries: dict[str, Value] = {}
    for _ in range(reader.u32()):
        key = reader.string()
        if key in entries:
            raise ValueError(f"Duplicate key '{key}' in storage file")
        entries[key] = _decode_value(reader, depth=0)
    if reader.remaining():
        raise ValueError(f"Unexpected {reader.remaining()} trailing bytes in storage file")
    return entries


def _encode_string(chunks: list[bytes], text: str) -> None:
    try:
        raw = text.encode("utf-8")
    except UnicodeEncodeError as error:
        raise ValueError(f"Text is not encodable as UTF-8: {error.reason}") from error
    chunks.append(_U32.pack(len(raw)))
    chunks.append(raw)


def _encode_value(chunks: list[bytes], value: Value, depth: int) -> None:
    if depth > MAX_VALUE_DEPTH:
        raise ValueError(f"Value nesting exceeds {MAX_VALUE_DEPTH} levels")
    if isinstance(value, ArrayValue):
        chunks.append(_U8.pack(ValueTag.ARRAY))
        chunks.append(_U32.pack(len(value.items)))
        for item in value.items:
            _encode_value(chunks, item, depth + 1)
    elif isinstance(value, BooleanValue):
        chunks.append(_U8.pack(ValueTag.BOOLEAN))
        chunks.append(_U8.pack(1 if value.value else 0))
    elif isinstance(value, NumberValue):
        chunks.append(_U8.pack(ValueTag.NUMBER))
        chunks.append(_F32.pack(value.value))
    elif isinstance(value, StringValue):
        chunks.append(_U8.pack(ValueTag.STRING))
        _encode_string(chunks, value.value)
    elif isinstance(value, SideValue):
        chunks.append(_U8.pack(ValueTag.SIDE))
        chunks.append(_U8.pack(value.side.value))
    elif isinstance(value, HandleValue):
        chunks.append(_U8.pack(_HANDLE_TAGS[value.kind]))
        _encode_string(chunks, value.payload)
    elif isinstance(value, VoidValue):
        chunks.append(_U8.pack(ValueTag.VOID))
    else:
        raise ValueError(f"Cannot encode unsupported value type {type(value).__name__}")


def _decode_value(reader: "_Reader", depth: int) -> Value:
    if depth > MAX_VALUE_DEPTH:
        raise ValueError(f"Value nesting exceeds {MAX_VALUE_DEPTH} levels")
    raw_tag = reader.u8()
    try:
        tag = ValueTag(raw_tag)
    except ValueError as error:
        raise ValueError(f"Unknown value tag {raw_tag}") from error
    if tag is ValueTag.ARRAY:
        count = reader.u32()
        return ArrayValue(tuple(_decode_value(reader, depth + 1) for _ in range(count)))
    if tag is ValueTag.BOOLEAN:
        flag = reader.u8()
        if flag not in (0, 1):
            raise ValueError(f"Invalid boolean byte {flag}")
        return BooleanValue(flag == 1)
    if tag is ValueTag.NUMBER:
        return NumberValue(reader.f32())
    if tag is ValueTag.STRING:
        return StringValue(reader.string())
    if tag is ValueTag.SIDE:
        raw_side = reader.u8()
        try:
            return SideValue(Side(raw_side))
        except ValueError as error:
            raise ValueError(f"Unknown side discriminant {raw_side}") from error
    if tag is ValueTag.VOID:
        return VoidValue()
    return HandleValue(_HANDLE_KINDS[tag], reader.string())


class _Reader:
    """Bounds-checked cursor over a byte payload."""

    def __init__(self, payload: bytes) -> None:
        self._payload = payload
        self._offset = 0

    def remaining(self) -> int:
        return len(self._payload) - self._offset

    def take(self, size: int) -> bytes:
        if size > self.remaining():
            raise ValueError(
                f"Truncated storage file: needed {size} bytes at offset {self._offset}"
            )
        chunk = self._payload[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def u8(self) -> int:
        return int(_U8.unpack(self.take(_U8.size))[0])

    def u32(self) -> int:
        return int(_U32.unpack(self.take(_U32.size))[0])

    def f32(self) -> float:
        return float(_F32.unpack(self.take(_F32.size))[0])

    def string(self) -> str:
        raw = self.take(self.u32())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise ValueError(f"Invalid UTF-8 text in storage file: {error.reason}") from error
