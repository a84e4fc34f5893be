import pytest

from oscwire.types import TimeTag, TypeTag, ceil4, pad4


def test_type_tag_characters():
    assert TypeTag("i") is TypeTag.INT32
    assert TypeTag.BLOB.value == "b"
    assert "".join(t.value for t in TypeTag) == "TFihfdsb"


def test_immediate_time_tag():
    assert int(TimeTag.immediate()) == 1
    assert TimeTag() == TimeTag.immediate()


def test_time_tag_bytes_round_trip():
    tag = TimeTag(0x0123456789ABCDEF)
    raw = bytes(tag)
    assert len(raw) == 8
    assert TimeTag.from_bytes(raw) == tag


def test_time_tag_range():
    with pytest.raises(ValueError):
        TimeTag(-1)
    with pytest.raises(ValueError):
        TimeTag(1 << 64)
    with pytest.raises(ValueError):
        TimeTag.from_bytes(b"\0" * 7)


@pytest.mark.parametrize("n", range(0, 20))
def test_ceil4_invariants(n):
    r = ceil4(n)
    assert r % 4 == 0
    assert n <= r < n + 4


def test_ceil4_rejects_negative():
    with pytest.raises(ValueError):
        ceil4(-1)


@pytest.mark.parametrize("data", [b"", b"a", b"ab", b"abc", b"abcd", b"abcde"])
def test_pad4(data):
    padded = pad4(data)
    assert len(padded) % 4 == 0
    assert padded[: len(data)] == data
    assert set(padded[len(data):]) <= {0}
    assert len(padded) - len(data) < 4