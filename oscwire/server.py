"""Receiving OSC messages and dispatching them to subscribed handlers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .debuglog import get_manager
from .decoder import DecodeError, Decoder
from .message import Message
from .types import PORT_DISCARD
from .udpmap import UdpMap

Handler = Callable[..., Any]

_MAX_DATAGRAM = 65536

_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08


@dataclass(frozen=True)
class _Shape:
    """What positional calls a handler accepts."""

    low: int
    high: int | None
    blocked: bool
    whole_message: bool

    def accepts(self, count: int) -> bool:
        if self.blocked:
            return False
        return self.low <= count and (self.high is None or count <= self.high)


def _shape(handler: Handler) -> _Shape | None:
    func: Any = getattr(handler, "__func__", handler)
    bound = 1 if func is not handler else 0
    if getattr(func, "__code__", None) is None:
        call = getattr(type(handler), "__call__", None)
        if getattr(call, "__code__", None) is None:
            return None
        func, bound = call, 1

    code = func.__code__
    positional = code.co_argcount - bound
    names = code.co_varnames[bound:code.co_argcount]
    defaults = len(getattr(func, "__defaults__", None) or ())
    varargs = bool(code.co_flags & _CO_VARARGS)
    varkeywords = bool(code.co_flags & _CO_VARKEYWORDS)

    kwonly = code.co_varnames[code.co_argcount:code.co_argcount + code.co_kwonlyargcount]
    kwdefaults = getattr(func, "__kwdefaults__", None) or {}
    blocked = any(name not in kwdefaults for name in kwonly)

    annotations = getattr(func, "__annotations__", None) or {}
    whole_message = (
        positional == 1
        and not varargs
        and not varkeywords
        and code.co_kwonlyargcount == 0
        and annotations.get(names[0]) in (Message, "Message")
    )
    return _Shape(
        low=max(positional - defaults, 0),
        high=None if varargs else positional,
        blocked=blocked,
        whole_message=whole_message,
    )


def _invoke(handler: Handler, message: Message) -> None:
    shape = _shape(handler)

    if shape is not None and shape.whole_message:
        handler(message)
        return

    args = [message.arg(i) for i in range(len(message))]
    if shape is not None and not shape.accepts(len(args)):
        name = getattr(handler, "__name__", repr(handler))
        get_manager().error("arg size mismatch: msg", len(message), "/ handler", name)
        return
    handler(*args)


class Server:
    """Listens on one local UDP port and calls handlers for matching addresses.

    A handler whose only parameter is annotated as ``Message`` receives the
    whole message; any other handler receives the message's arguments.
    """

    def __init__(self, udp_map: UdpMap, port: int) -> None:
        if port == PORT_DISCARD:
            raise ValueError(f"port {PORT_DISCARD} is not valid for a server")
        self._udp_map = udp_map
        self.port = port
        self._callbacks: dict[str, Handler] = {}
        self._last: Message | None = None

    def subscribe(self, address: str, handler: Handler) -> None:
        """Call a handler for messages matching an address pattern.

        An address that already has a handler keeps its first one.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._callbacks.setdefault(address, handler)

    def dispatch(self, data: bytes, remote_ip: str = "", remote_port: int = 0) -> bool:
        """Decode a packet and run the handlers for its first message."""
        try:
            message = Decoder(data).decode()
        except DecodeError as exc:
            get_manager().error("osc message parsing failed:", exc)
            self._last = None
            return False
        if not message.valid:
            get_manager().error("osc message parsing failed")
            self._last = None
            return False

        message.remote_ip = remote_ip
        message.remote_port = remote_port
        for pattern in sorted(self._callbacks):
            if message.match(pattern):
                _invoke(self._callbacks[pattern], message)
        self._last = message
        return True

    def parse(self) -> bool:
        """Handle one waiting packet, if any; tell whether one was handled."""
        sock = self._udp_map.get_udp(self.port)
        try:
            data, remote = sock.recvfrom(_MAX_DATAGRAM)
        except (BlockingIOError, InterruptedError, ConnectionResetError):
            return False
        if not data:
            return False
        return self.dispatch(data, remote[0], remote[1])

    def message(self) -> Message | None:
        """Return the last message handled, or None if the last packet failed."""
        return self._last


class ServerManager:
    """Keeps one server per local port."""

    def __init__(self, udp_map: UdpMap) -> None:
        self._udp_map = udp_map
        self._servers: dict[int, Server] = {}

    @property
    def servers(self) -> dict[int, Server]:
        """The servers by port."""
        return dict(self._servers)

    def get_server(self, port: int) -> Server:
        """Return the server for a port, creating it if needed."""
        if port not in self._servers:
            self._servers[port] = Server(self._udp_map, port)
        return self._servers[port]

    def subscribe(self, port: int, address: str, handler: Handler) -> None:
        """Subscribe a handler on the server for a port."""
        self.get_server(port).subscribe(address, handler)

    def parse(self) -> int:
        """Let every server handle one waiting packet; return how many did."""
        return sum(1 for port in sorted(self._servers) if self._servers[port].parse())