"""One object that owns the sockets, servers and client of an OSC endpoint."""

from __future__ import annotations

from typing import Any

from .client import Client, ClientManager, PublishElement
from .server import Handler, Server, ServerManager
from .udpmap import UdpMap


class OscManager:
    """Receives subscribed messages and sends or publishes outgoing ones."""

    def __init__(self, host: str = "") -> None:
        self.udp_map = UdpMap(host)
        self.servers = ServerManager(self.udp_map)
        self.clients = ClientManager(self.udp_map)

    # server

    def get_server(self, port: int) -> Server:
        """Return the server listening on a port."""
        return self.servers.get_server(port)

    def subscribe(self, port: int, address: str, handler: Handler) -> None:
        """Call a handler for messages arriving on a port at an address."""
        self.servers.subscribe(port, address, handler)

    def parse(self) -> int:
        """Handle waiting packets, one per server; return how many were handled."""
        return self.servers.parse()

    # client

    def get_client(self) -> Client:
        """Return the client used for sending."""
        return self.clients.client

    def send(self, ip: str, port: int, address: str, *args: Any) -> None:
        """Send one message now."""
        self.clients.send(ip, port, address, *args)

    def post(self) -> None:
        """Send every published element that is due."""
        self.clients.post()

    def publish(self, ip: str, port: int, address: str, *args: Any) -> PublishElement:
        """Publish values to a destination at a fixed rate."""
        return self.clients.publish(ip, port, address, *args)

    def get_publish_element(self, ip: str, port: int, address: str) -> PublishElement | None:
        """Return the element published to a destination, or None."""
        return self.clients.get_publish_element(ip, port, address)

    # both

    def update(self) -> None:
        """Handle incoming packets, then send what is due."""
        self.parse()
        self.post()

    def close(self) -> None:
        """Close every socket."""
        self.udp_map.close()

    def __enter__(self) -> OscManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()