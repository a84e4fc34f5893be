import socket
import time

import pytest

from oscwire.client import PublishElement
from oscwire.manager import OscManager


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def _poll(step, done, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        step()
        if done():
            return True
        time.sleep(0.005)
    return False


@pytest.fixture
def osc():
    with OscManager("127.0.0.1") as m:
        yield m


def test_send_to_own_server(osc):
    port = _free_port()
    calls = []
    osc.subscribe(port, "/reply", lambda i, f, s: calls.append((i, f, s)))
    assert osc.parse() == 0
    osc.send("127.0.0.1", port, "/reply", 1, 2.5, "test")
    assert _poll(osc.parse, lambda: bool(calls))
    assert calls == [(1, 2.5, "test")]


def test_client_shares_server_socket(osc):
    port = _free_port()
    osc.subscribe(port, "/x", lambda: None)
    osc.parse()
    assert osc.get_client().local_port() == port


def test_get_server_is_stable(osc):
    server = osc.get_server(_free_port())
    assert osc.get_server(server.port) is server


def test_publish_and_update(osc):
    port = _free_port()
    calls = []
    osc.subscribe(port, "/publish/value", lambda i, f, s: calls.append((i, f, s)))
    osc.parse()
    element = osc.publish("127.0.0.1", port, "/publish/value", 1, 2.5, "string")
    assert isinstance(element, PublishElement)
    assert osc.get_publish_element("127.0.0.1", port, "/publish/value") is element
    assert _poll(osc.update, lambda: bool(calls))
    assert calls[0] == (1, 2.5, "string")


def test_publish_callable_values(osc):
    port = _free_port()
    calls = []
    counter = iter(range(100))
    osc.subscribe(port, "/publish/func", lambda a, b: calls.append((a, b)))
    osc.parse()
    osc.publish("127.0.0.1", port, "/publish/func", lambda: next(counter), 5)
    assert _poll(osc.update, lambda: bool(calls))
    assert calls[0] == (0, 5)


def test_publish_keeps_first_element(osc):
    first = osc.publish("127.0.0.1", 50000, "/a", 1)
    osc.publish("127.0.0.1", 50000, "/a", 2)
    assert osc.get_publish_element("127.0.0.1", 50000, "/a") is first


def test_unknown_publish_element_is_none(osc):
    assert osc.get_publish_element("127.0.0.1", 50000, "/none") is None


def test_close_releases_sockets():
    osc = OscManager("127.0.0.1")
    osc.subscribe(_free_port(), "/x", lambda: None)
    osc.parse()
    assert len(osc.udp_map.ports()) == 1
    osc.close()
    assert osc.udp_map.ports() == []