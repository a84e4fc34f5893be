"""Splits an OSC packet into its messages, unpacking bundles."""

from __future__ import annotations

import struct
from collections.abc import Iterator

from .debuglog import get_manager
from .message import Message, MessageError
from .types import TimeTag

_BUNDLE_HEADER = b"#bundle\0"
_MIN_BUNDLE_SIZE = 20


class DecodeError(ValueError):
    """Raised when a packet cannot be decoded or holds no further message."""


class Decoder:
    """Reads the messages held in one packet, in order."""

    def __init__(self, data: bytes | None = None) -> None:
        self._messages: list[Message] = []
        self._index = 0
        if data is not None:
            self.init(data)

    def init(self, data: bytes) -> Decoder:
        """Parse a new packet, replacing any messages read before."""
        data = bytes(data)
        self._messages = []
        self._index = 0
        if len(data) % 4 != 0:
            raise DecodeError(f"packet size {len(data)} is not a multiple of 4")
        try:
            self._parse(data, 0, len(data), TimeTag.immediate())
        except DecodeError:
            self._messages = []
            raise
        return self

    def decode(self) -> Message:
        """Return the next message of the packet."""
        if not self._messages:
            raise DecodeError("the packet holds no message")
        if self._index >= len(self._messages):
            raise DecodeError("no more messages to decode")
        message = self._messages[self._index]
        self._index += 1
        return message

    def __iter__(self) -> Iterator[Message]:
        while self._index < len(self._messages):
            yield self.decode()

    def _parse(self, data: bytes, beg: int, end: int, time_tag: TimeTag) -> None:
        if beg >= end:
            raise DecodeError("packet holds no data")
        if data[beg:beg + 1] != b"#":
            try:
                message = Message.from_bytes(data[beg:end], time_tag)
            except MessageError as exc:
                get_manager().error("malformed message:", exc)
                message = Message(time_tag=time_tag)
            self._messages.append(message)
            return

        if end - beg < _MIN_BUNDLE_SIZE or data[beg:beg + 8] != _BUNDLE_HEADER:
            raise DecodeError("bundle header is corrupted")
        bundle_tag = TimeTag.from_bytes(data[beg + 8:beg + 16])
        pos = beg + 16
        while True:
            (size,) = struct.unpack_from(">I", data, pos)
            pos += 4
            if size & 3 or pos + size > end:
                raise DecodeError("bundle data structure is corrupted")
            try:
                self._parse(data, pos, pos + size, bundle_tag)
            except DecodeError as exc:
                get_manager().error("bundle element skipped:", exc)
            pos += size
            if pos == end:
                break