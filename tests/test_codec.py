import pytest

from cjdnsadmin.admin import codec
from cjdnsadmin.admin.exceptions import DecodeError


def test_encode_sorts_keys():
    assert codec.encode({"txid": "1", "q": "ping"}) == b"d1:q4:ping4:txid1:1e"


def test_encode_nested_values():
    data = codec.encode({"args": {"page": 0, "flag": True}, "list": ["a", 1]})
    assert data == b"d4:argsd4:flagi1e4:pagei0ee4:listl1:ai1eee"


def test_decode_returns_text():
    assert codec.decode(b"d1:q4:pong4:txid2:abe") == {"q": "pong", "txid": "ab"}


def test_decode_keeps_binary_strings_as_bytes():
    assert codec.decode(b"d3:key2:\xff\xfee") == {"key": b"\xff\xfe"}


@pytest.mark.parametrize("data", [b"", b"d1:a", b"i12", b"garbage", b"d1:ai1eejunk"])
def test_decode_rejects_incomplete_or_malformed(data):
    with pytest.raises(DecodeError):
        codec.decode(data)


def test_framer_waits_for_complete_value():
    framer = codec.ReplyFramer()

    assert framer.feed(b"d1:q4:po") is None
    assert framer.feed(b"ng4:txid") is None
    assert framer.feed(b"i-12") is None
    assert framer.feed(b"ee") == b"d1:q4:pong4:txidi-12ee"


@pytest.mark.parametrize("data", [b"x", b"e", b"i1-2e", b"ie", b"3x:abc", b"i5eX"])
def test_framer_rejects_impossible_bytes(data):
    with pytest.raises(DecodeError):
        codec.ReplyFramer().feed(data)
