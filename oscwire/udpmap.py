"""One UDP socket per local port, shared by clients and servers."""

from __future__ import annotations

import socket

from .types import PORT_DISCARD


class UdpMap:
    """Opens and keeps non-blocking UDP sockets, one per local port.

    The discard port stands for "any local port": it binds an ephemeral port
    and is dropped as soon as a socket for a real port is opened.
    """

    def __init__(self, host: str = "") -> None:
        self.host = host
        self._sockets: dict[int, socket.socket] = {}

    def _open(self, port: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setblocking(False)
            sock.bind((self.host, 0 if port == PORT_DISCARD else port))
        except OSError:
            sock.close()
            raise
        return sock

    def get_udp(self, port: int) -> socket.socket:
        """Return the socket for a local port, opening it if needed."""
        if port == PORT_DISCARD:
            if not self._sockets:
                self._sockets[port] = self._open(port)
            return self._sockets[min(self._sockets)]

        if port not in self._sockets:
            discard = self._sockets.pop(PORT_DISCARD, None)
            if discard is not None:
                discard.close()
            self._sockets[port] = self._open(port)
        return self._sockets[port]

    def ports(self) -> list[int]:
        """Return the local ports that have a socket, in ascending order."""
        return sorted(self._sockets)

    def close(self) -> None:
        """Close every socket."""
        for sock in self._sockets.values():
            sock.close()
        self._sockets.clear()

    def __enter__(self) -> UdpMap:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()