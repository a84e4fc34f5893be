"""OSC messages: building, encoding, parsing and address pattern matching."""

from __future__ import annotations

import re
import struct
from functools import lru_cache
from typing import Union

from .types import TimeTag, TypeTag, ceil4, pad4

Argument = Union[bool, int, float, str, bytes, None]

_INT32_MIN, _INT32_MAX = -(1 << 31), (1 << 31) - 1
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1

_FIXED_SIZES = {
    TypeTag.TRUE.value: 0,
    TypeTag.FALSE.value: 0,
    TypeTag.INT32.value: 4,
    TypeTag.FLOAT.value: 4,
    TypeTag.INT64.value: 8,
    TypeTag.DOUBLE.value: 8,
}

_PATTERN_PIECE = re.compile(r"\[[^\]]*\]|\{[^}]*\}|.", re.DOTALL)


class MessageError(ValueError):
    """Raised when raw bytes do not form a well-formed OSC message."""


def _piece_regex(piece: str) -> str:
    if piece == "?":
        return "[^/]"
    if piece == "*":
        return "[^/]*"
    if len(piece) >= 2 and piece.startswith("[") and piece.endswith("]"):
        body = piece[1:-1]
        negate = body.startswith("!")
        if negate:
            body = body[1:]
        if not body:
            return "[^/]" if negate else "(?!)"
        chars = "-".join(re.escape(part) for part in body.split("-"))
        return f"[^/{chars}]" if negate else f"[{chars}]"
    if len(piece) >= 2 and piece.startswith("{") and piece.endswith("}"):
        choices = "|".join(re.escape(choice) for choice in piece[1:-1].split(","))
        return f"(?:{choices})"
    return re.escape(piece)


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str, full: bool) -> re.Pattern[str] | None:
    body = "".join(_piece_regex(m.group(0)) for m in _PATTERN_PIECE.finditer(pattern))
    if not full:
        body += "(?:/.*)?"
    try:
        return re.compile(body, re.DOTALL)
    except re.error:
        return None


class Message:
    """One OSC message: an address, a time tag and typed arguments."""

    def __init__(self, address: str = "", time_tag: TimeTag | None = None) -> None:
        self.address = address
        self.time_tag = time_tag if time_tag is not None else TimeTag.immediate()
        self._type_tags = ""
        self._storage = bytearray()
        self._arguments: list[tuple[int, int]] = []
        self.valid = False
        self.remote_ip = ""
        self.remote_port = 0

    def __repr__(self) -> str:
        return f"Message({self.address!r}, type_tags={self._type_tags!r})"

    @classmethod
    def from_bytes(cls, data: bytes, time_tag: TimeTag | None = None) -> Message:
        """Parse one encoded message; raise MessageError if it is malformed."""
        data = bytes(data)
        msg = cls(time_tag=time_tag)
        addr_end = data.find(b"\0")
        if addr_end < 0:
            raise MessageError("packet holds no terminated address")
        if not data.startswith(b"/"):
            raise MessageError(f"address must start with '/', got {data[:1]!r}")
        try:
            msg.address = data[:addr_end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageError("address is not valid UTF-8") from exc

        tags_beg = ceil4(addr_end + 1)
        tags_end = data.find(b"\0", tags_beg)
        if tags_end < 0:
            raise MessageError("packet holds no terminated type tag string")
        if data[tags_beg:tags_beg + 1] != b",":
            raise MessageError(
                f"type tag string must start with ',', got {data[tags_beg:tags_beg + 1]!r}"
            )
        try:
            msg._type_tags = data[tags_beg + 1:tags_end].decode("ascii")
        except UnicodeDecodeError as exc:
            raise MessageError("type tags are not ASCII") from exc

        args_start = pos = ceil4(tags_end + 1)
        for tag in msg._type_tags:
            size = cls._arg_size(tag, data, pos)
            msg._arguments.append((pos - args_start, size))
            pos += ceil4(size)
        if pos != len(data):
            raise MessageError(
                f"arguments end at byte {pos} but the packet has {len(data)} bytes"
            )
        msg._storage = bytearray(data[args_start:])
        msg.valid = True
        return msg

    @staticmethod
    def _arg_size(tag: str, data: bytes, pos: int) -> int:
        if tag in _FIXED_SIZES:
            size = _FIXED_SIZES[tag]
        elif tag == TypeTag.STRING.value:
            end = data.find(b"\0", pos)
            if end < 0:
                raise MessageError("string argument is not terminated")
            size = end - pos + 1
        elif tag == TypeTag.BLOB.value:
            if pos + 4 > len(data):
                raise MessageError("blob size runs past the end of the packet")
            size = 4 + struct.unpack_from(">I", data, pos)[0]
        else:
            size = 0
        if pos + size > len(data):
            raise MessageError(f"argument of type {tag!r} runs past the end of the packet")
        return size

    def init(self, address: str, time_tag: TimeTag | None = None) -> Message:
        """Clear the message and give it a new address and time tag."""
        self.clear()
        self.address = address
        self.time_tag = time_tag if time_tag is not None else TimeTag.immediate()
        return self

    def clear(self) -> None:
        """Drop the address, arguments and time tag."""
        self.address = ""
        self._type_tags = ""
        self._storage = bytearray()
        self._arguments = []
        self.time_tag = TimeTag.immediate()

    def match(self, pattern: str, full: bool = True) -> bool:
        """Tell whether an OSC address pattern matches this address.

        With ``full`` false the pattern may match only the leading path parts.
        """
        compiled = _compile_pattern(pattern, bool(full))
        return compiled is not None and compiled.fullmatch(self.address) is not None

    def encode(self, write_size: bool = False) -> bytes:
        """Return the wire form, optionally preceded by its 32-bit size."""
        if "\0" in self.address:
            raise ValueError("address must not contain NUL characters")
        body = (
            pad4(self.address.encode("utf-8") + b"\0")
            + pad4(b"," + self._type_tags.encode("ascii") + b"\0")
            + bytes(self._storage)
        )
        if write_size:
            return struct.pack(">I", len(body)) + body
        return body

    # adding arguments

    def push(self, value: Argument) -> Message:
        """Append a value, choosing the type tag from its Python type."""
        if isinstance(value, bool):
            return self.push_bool(value)
        if isinstance(value, int):
            if _INT32_MIN <= value <= _INT32_MAX:
                return self.push_int32(value)
            return self.push_int64(value)
        if isinstance(value, float):
            return self.push_float(value)
        if isinstance(value, str):
            return self.push_string(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self.push_blob(value)
        raise TypeError(f"cannot send a value of type {type(value).__name__}")

    def _push_raw(self, tag: TypeTag, payload: bytes, length: int) -> Message:
        self._type_tags += tag.value
        self._arguments.append((len(self._storage), length))
        self._storage += pad4(payload)
        return self

    def push_bool(self, value: bool) -> Message:
        """Append a true or false argument, which carries no data."""
        return self._push_raw(TypeTag.TRUE if value else TypeTag.FALSE, b"", 0)

    def push_int32(self, value: int) -> Message:
        """Append a 32-bit signed integer."""
        if not _INT32_MIN <= value <= _INT32_MAX:
            raise ValueError(f"{value} does not fit in 32 signed bits")
        return self._push_raw(TypeTag.INT32, struct.pack(">i", value), 4)

    def push_int64(self, value: int) -> Message:
        """Append a 64-bit signed integer."""
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ValueError(f"{value} does not fit in 64 signed bits")
        return self._push_raw(TypeTag.INT64, struct.pack(">q", value), 8)

    def push_float(self, value: float) -> Message:
        """Append a 32-bit float."""
        return self._push_raw(TypeTag.FLOAT, struct.pack(">f", value), 4)

    def push_double(self, value: float) -> Message:
        """Append a 64-bit float."""
        return self._push_raw(TypeTag.DOUBLE, struct.pack(">d", value), 8)

    def push_string(self, value: str) -> Message:
        """Append a NUL-terminated UTF-8 string."""
        if "\0" in value:
            raise ValueError("string arguments must not contain NUL characters")
        raw = value.encode("utf-8") + b"\0"
        return self._push_raw(TypeTag.STRING, raw, len(raw))

    def push_blob(self, value: bytes) -> Message:
        """Append a size-prefixed run of bytes."""
        raw = bytes(value)
        return self._push_raw(TypeTag.BLOB, struct.pack(">i", len(raw)) + raw, len(raw) + 4)

    # reading arguments

    def _span(self, index: int) -> tuple[int, int]:
        try:
            return self._arguments[index]
        except IndexError:
            raise IndexError(
                f"argument index {index} out of range for {len(self._arguments)} arguments"
            ) from None

    def _unpack(self, fmt: str, index: int) -> int | float:
        offset, _ = self._span(index)
        try:
            return struct.unpack_from(fmt, self._storage, offset)[0]
        except struct.error as exc:
            raise MessageError(f"argument {index} holds too few bytes") from exc

    def arg(self, index: int) -> Argument:
        """Return an argument as the Python value its type tag names."""
        tag = self.type_tag(index)
        readers = {
            TypeTag.TRUE.value: self.arg_as_bool,
            TypeTag.FALSE.value: self.arg_as_bool,
            TypeTag.INT32.value: self.arg_as_int32,
            TypeTag.INT64.value: self.arg_as_int64,
            TypeTag.FLOAT.value: self.arg_as_float,
            TypeTag.DOUBLE.value: self.arg_as_double,
            TypeTag.STRING.value: self.arg_as_string,
            TypeTag.BLOB.value: self.arg_as_blob,
        }
        reader = readers.get(tag)
        return reader(index) if reader is not None else None

    def arg_as_int32(self, index: int) -> int:
        """Read an argument's bytes as a 32-bit signed integer."""
        return int(self._unpack(">i", index))

    def arg_as_int64(self, index: int) -> int:
        """Read an argument's bytes as a 64-bit signed integer."""
        return int(self._unpack(">q", index))

    def arg_as_float(self, index: int) -> float:
        """Read an argument's bytes as a 32-bit float."""
        return float(self._unpack(">f", index))

    def arg_as_double(self, index: int) -> float:
        """Read an argument's bytes as a 64-bit float."""
        return float(self._unpack(">d", index))

    def arg_as_string(self, index: int) -> str:
        """Read an argument as a string, up to its terminating NUL."""
        offset, length = self._span(index)
        raw = bytes(self._storage[offset:offset + length])
        end = raw.find(b"\0")
        if end >= 0:
            raw = raw[:end]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageError(f"argument {index} is not valid UTF-8") from exc

    def arg_as_blob(self, index: int) -> bytes:
        """Read an argument as blob bytes, without its size prefix."""
        offset, length = self._span(index)
        return bytes(self._storage[offset + 4:offset + length])

    def arg_as_bool(self, index: int) -> bool:
        """Return True only for an argument tagged true."""
        return self.type_tag(index) == TypeTag.TRUE.value

    def type_tag(self, index: int) -> str:
        """Return the type tag character of one argument."""
        try:
            return self._type_tags[index]
        except IndexError:
            raise IndexError(
                f"argument index {index} out of range for {len(self._type_tags)} arguments"
            ) from None

    @property
    def type_tags(self) -> str:
        """The type tags of all arguments, without the leading comma."""
        return self._type_tags

    def __len__(self) -> int:
        return len(self._type_tags)