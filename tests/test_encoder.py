import struct

from oscwire.encoder import Encoder
from oscwire.message import Message
from oscwire.types import TimeTag


def _msg(address="/m", value=1):
    return Message(address).push_int32(value)


def test_single_message_matches_message_encoding():
    msg = _msg()
    enc = Encoder().encode(msg)
    assert enc.data() == msg.encode()
    assert len(enc) == len(msg.encode())


def test_bundle_layout():
    msg = _msg()
    tag = TimeTag(5)
    data = Encoder().begin_bundle(tag).encode(msg).end_bundle().data()
    assert data[:8] == b"#bundle\0"
    assert TimeTag.from_bytes(data[8:16]) == tag
    assert data[16:] == msg.encode(write_size=True)
    size = struct.unpack(">I", data[16:20])[0]
    assert Message.from_bytes(data[20:20 + size]).arg(0) == 1


def test_default_bundle_time_tag_is_immediate():
    data = Encoder().begin_bundle().encode(_msg()).end_bundle().data()
    assert TimeTag.from_bytes(data[8:16]) == TimeTag.immediate()


def test_nested_bundle_size_field():
    enc = Encoder().begin_bundle().encode(_msg("/outer"))
    inner_size_at = len(enc)
    enc.begin_bundle(TimeTag(9)).encode(_msg("/inner", 2)).end_bundle().end_bundle()
    data = enc.data()
    size = struct.unpack(">I", data[inner_size_at:inner_size_at + 4])[0]
    inner = data[inner_size_at + 4:]
    assert size == len(inner)
    assert inner[:8] == b"#bundle\0"
    assert TimeTag.from_bytes(inner[8:16]) == TimeTag(9)


def test_empty_bundle_gets_zero_element():
    data = Encoder().begin_bundle().end_bundle().data()
    assert len(data) == 20
    assert data[16:] == b"\0\0\0\0"


def test_end_bundle_without_bundle_is_noop():
    enc = Encoder().encode(_msg())
    before = enc.data()
    assert enc.end_bundle().data() == before


def test_init_clears():
    enc = Encoder().begin_bundle().encode(_msg())
    enc.init()
    assert len(enc) == 0
    assert enc.encode(_msg()).data() == _msg().encode()


def test_output_is_aligned():
    enc = Encoder().begin_bundle()
    enc.encode(Message("/abc").push_string("x")).encode(Message("/d").push_blob(b"12345"))
    enc.end_bundle()
    assert len(enc.data()) % 4 == 0