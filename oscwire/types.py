"""Basic OSC wire types: type tags, time tags and 4-byte alignment helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PORT_DISCARD = 9

_UINT64_MAX = (1 << 64) - 1


class TypeTag(str, Enum):
    """Argument type tags used in an OSC type tag string."""

    TRUE = "T"
    FALSE = "F"
    INT32 = "i"
    INT64 = "h"
    FLOAT = "f"
    DOUBLE = "d"
    STRING = "s"
    BLOB = "b"


@dataclass(frozen=True, order=True)
class TimeTag:
    """An OSC 64-bit NTP-style time tag; the value 1 means "immediately"."""

    value: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("time tag value must be an integer")
        if not 0 <= self.value <= _UINT64_MAX:
            raise ValueError(f"time tag {self.value} does not fit in 64 unsigned bits")

    @staticmethod
    def immediate() -> TimeTag:
        """Return the time tag meaning "process now"."""
        return TimeTag(1)

    def __int__(self) -> int:
        return self.value

    def __bytes__(self) -> bytes:
        return self.value.to_bytes(8, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> TimeTag:
        """Read a time tag from 8 big-endian bytes."""
        if len(data) != 8:
            raise ValueError("a time tag takes exactly 8 bytes")
        return cls(int.from_bytes(data, "big"))


def ceil4(n: int) -> int:
    """Round a non-negative size up to the next multiple of four."""
    if n < 0:
        raise ValueError("size must not be negative")
    return (n + 3) & ~3


def pad4(data: bytes) -> bytes:
    """Append zero bytes so the length is a multiple of four."""
    data = bytes(data)
    return data + b"\0" * (ceil4(len(data)) - len(data))