"""Packs OSC messages and bundles into one packet."""

from __future__ import annotations

import struct

from .message import Message
from .types import TimeTag

_BUNDLE_HEADER = b"#bundle\0"


class Encoder:
    """Accumulates messages, optionally nested in bundles, into packet bytes."""

    def __init__(self) -> None:
        self._storage = bytearray()
        self._bundles: list[int] = []

    def init(self) -> Encoder:
        """Discard everything written so far."""
        self._storage = bytearray()
        self._bundles = []
        return self

    def encode(self, message: Message) -> Encoder:
        """Append a message; inside a bundle it is preceded by its size."""
        self._storage += message.encode(write_size=bool(self._bundles))
        return self

    def begin_bundle(self, time_tag: TimeTag | None = None) -> Encoder:
        """Open a bundle, nested in the current one if there is one."""
        if time_tag is None:
            time_tag = TimeTag.immediate()
        if self._bundles:
            self._storage += b"\0\0\0\0"  # size of the nested bundle, set on close
        self._bundles.append(len(self._storage))
        self._storage += _BUNDLE_HEADER
        self._storage += bytes(time_tag)
        return self

    def end_bundle(self) -> Encoder:
        """Close the innermost open bundle; do nothing if none is open."""
        if not self._bundles:
            return self
        start = self._bundles[-1]
        if len(self._storage) - start == 16:
            self._storage += b"\0\0\0\0"
        if len(self._bundles) > 1:
            struct.pack_into(">I", self._storage, start - 4, len(self._storage) - start)
        self._bundles.pop()
        return self

    def data(self) -> bytes:
        """Return the packet bytes written so far."""
        return bytes(self._storage)

    def __len__(self) -> int:
        return len(self._storage)