import pytest

from oscwire.decoder import DecodeError, Decoder
from oscwire.encoder import Encoder
from oscwire.message import Message
from oscwire.types import TimeTag


def _packet(*messages, time_tag=None):
    encoder = Encoder()
    encoder.begin_bundle(time_tag)
    for message in messages:
        encoder.encode(message)
    encoder.end_bundle()
    return encoder.data()


def test_single_message_from_wire_bytes():
    decoder = Decoder(b"/a\0\0,i\0\0\0\0\0\x05")
    message = decoder.decode()
    assert message.address == "/a"
    assert message.arg(0) == 5
    assert message.valid
    assert message.time_tag == TimeTag.immediate()


def test_round_trip_of_encoded_message():
    original = Message("/x/y").push_int32(7).push_string("hi").push_double(1.5)
    message = Decoder(original.encode()).decode()
    assert message.address == "/x/y"
    assert [message.arg(i) for i in range(len(message))] == [7, "hi", 1.5]


def test_bundle_messages_carry_bundle_time_tag():
    data = _packet(Message("/one").push_int32(1), Message("/two").push_int32(2),
                   time_tag=TimeTag(42))
    messages = list(Decoder(data))
    assert [m.address for m in messages] == ["/one", "/two"]
    assert all(m.time_tag == TimeTag(42) for m in messages)


def test_nested_bundles():
    encoder = Encoder()
    encoder.begin_bundle(TimeTag(5)).encode(Message("/outer"))
    encoder.begin_bundle(TimeTag(7)).encode(Message("/inner")).end_bundle()
    encoder.end_bundle()
    messages = list(Decoder(encoder.data()))
    assert [(m.address, m.time_tag) for m in messages] == [
        ("/outer", TimeTag(5)),
        ("/inner", TimeTag(7)),
    ]


def test_size_not_multiple_of_four():
    with pytest.raises(DecodeError):
        Decoder(b"/a\0")


def test_empty_packet():
    with pytest.raises(DecodeError):
        Decoder(b"")


def test_corrupted_bundle_header():
    with pytest.raises(DecodeError):
        Decoder(b"#bundlX\0" + bytes(TimeTag(1)) + b"\0\0\0\0")


def test_bundle_element_size_not_aligned():
    data = b"#bundle\0" + bytes(TimeTag(1)) + b"\0\0\0\x03"
    with pytest.raises(DecodeError):
        Decoder(data)


def test_bundle_element_runs_past_end():
    data = b"#bundle\0" + bytes(TimeTag(1)) + b"\0\0\0\x40"
    with pytest.raises(DecodeError):
        Decoder(data)


def test_empty_bundle_decodes_but_has_no_message():
    data = _packet()
    decoder = Decoder(data)
    assert list(decoder) == []
    with pytest.raises(DecodeError):
        decoder.decode()


def test_decode_past_end_raises():
    decoder = Decoder(Message("/a").encode())
    assert decoder.decode().address == "/a"
    with pytest.raises(DecodeError):
        decoder.decode()


def test_malformed_message_is_kept_as_invalid():
    decoder = Decoder(b"abc\0")
    message = decoder.decode()
    assert message.valid is False


def test_init_replaces_previous_messages():
    decoder = Decoder(Message("/first").encode())
    decoder.init(Message("/second").encode())
    assert [m.address for m in decoder] == ["/second"]


def test_failed_init_drops_messages():
    decoder = Decoder(Message("/first").encode())
    with pytest.raises(DecodeError):
        decoder.init(b"/ab")
    with pytest.raises(DecodeError):
        decoder.decode()