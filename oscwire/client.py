"""Sending OSC messages, once or repeatedly at a fixed rate."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .encoder import Encoder
from .message import Message
from .types import PORT_DISCARD
from .udpmap import UdpMap

DEFAULT_INTERVAL_US = 33333  # 30 frames per second


class PublishElement:
    """Values sent repeatedly to one destination.

    Each value is either a constant, a callable read at send time, or
    another element whose values are included in place.
    """

    def __init__(self, *args: Any) -> None:
        self.values = args
        self.last_publish_us = 0
        self.interval_us = DEFAULT_INTERVAL_US

    def ready(self, now_us: int) -> bool:
        """Tell whether the interval since the last send has passed."""
        return now_us >= self.last_publish_us + self.interval_us

    def set_frame_rate(self, fps: float) -> None:
        """Send this many times per second."""
        if fps <= 0:
            raise ValueError("frame rate must be positive")
        self.interval_us = int(1_000_000 / fps)

    def set_interval_usec(self, us: int) -> None:
        """Send every so many microseconds."""
        self.interval_us = int(us)

    def set_interval_msec(self, ms: float) -> None:
        """Send every so many milliseconds."""
        self.interval_us = int(ms * 1000)

    def set_interval_sec(self, sec: float) -> None:
        """Send every so many seconds."""
        self.interval_us = int(sec * 1000 * 1000)

    def encode_to(self, message: Message) -> None:
        """Append the current values to a message."""
        for value in self.values:
            if isinstance(value, PublishElement):
                value.encode_to(message)
            elif callable(value):
                message.push(value())
            else:
                message.push(value)


@dataclass(frozen=True, order=True)
class Destination:
    """Where a published element goes: host, port and OSC address."""

    ip: str
    port: int
    address: str


class Client:
    """Sends OSC messages from one local UDP socket."""

    def __init__(self, udp_map: UdpMap, local_port: int = PORT_DISCARD) -> None:
        self._udp_map = udp_map
        self._local_port = local_port
        self._encoder = Encoder()

    def local_port(self) -> int:
        """Return the local port the client sends from."""
        return self._udp_map.get_udp(self._local_port).getsockname()[1]

    def send(self, ip: str, port: int, address: str, *args: Any) -> None:
        """Send one message built from an address and argument values."""
        message = Message(address)
        for value in args:
            message.push(value)
        self.send_message(ip, port, message)

    def send_message(self, ip: str, port: int, message: Message) -> None:
        """Send a prepared message."""
        sock = self._udp_map.get_udp(self._local_port)
        data = self._encoder.init().encode(message).data()
        sock.sendto(data, (ip, port))

    def send_element(self, destination: Destination, element: PublishElement) -> None:
        """Send the current values of a published element."""
        message = Message(destination.address)
        element.encode_to(message)
        self.send_message(destination.ip, destination.port, message)


def _micros() -> int:
    return time.monotonic_ns() // 1000


class ClientManager:
    """A client plus the elements published from it."""

    def __init__(self, udp_map: UdpMap, clock: Callable[[], int] | None = None) -> None:
        self.client = Client(udp_map)
        self._clock = clock if clock is not None else _micros
        self._destinations: dict[Destination, PublishElement] = {}

    def send(self, ip: str, port: int, address: str, *args: Any) -> None:
        """Send one message now."""
        self.client.send(ip, port, address, *args)

    def post(self) -> None:
        """Send every published element whose interval has passed."""
        for destination in sorted(self._destinations):
            element = self._destinations[destination]
            now = self._clock()
            if element.ready(now):
                element.last_publish_us = now
                self.client.send_element(destination, element)

    def publish(self, ip: str, port: int, address: str, *args: Any) -> PublishElement:
        """Publish values to a destination and return the new element.

        A destination that is already published keeps its first element.
        """
        element = PublishElement(*args)
        self._destinations.setdefault(Destination(ip, port, address), element)
        return element

    def get_publish_element(self, ip: str, port: int, address: str) -> PublishElement | None:
        """Return the element published to a destination, or None."""
        return self._destinations.get(Destination(ip, port, address))