"""
bencode adapter for the admin socket.

fastbencode works on bytes only; the admin protocol is textual, so keys and
values are converted to/from ``str`` at this boundary. Strings that are not
valid UTF-8 are left as bytes.
"""
from typing import Any

from fastbencode import bdecode, bencode

from .exceptions import DecodeError


def _to_wire(value: Any) -> Any:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, dict):
        return {_to_wire(k): _to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


def _from_wire(value: Any) -> Any:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value
    if isinstance(value, dict):
        return {_from_wire(k): _from_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_from_wire(v) for v in value]
    return value


def encode(value: Any) -> bytes:
    """Encode a mapping/list/int/str value. Dict keys are emitted sorted."""
    return bencode(_to_wire(value))


def decode(data: bytes) -> Any:
    """Decode exactly one bencoded value; raises DecodeError otherwise."""
    if not data:
        raise DecodeError("empty reply")
    try:
        value = bdecode(data)
    except (ValueError, TypeError, IndexError, KeyError) as e:
        raise DecodeError(f"invalid bencoded reply: {e}") from e
    return _from_wire(value)


_DIGITS = b"0123456789"


class ReplyFramer:
    """
    Finds where one bencoded value ends in a stream of chunks.

    Only token boundaries are checked here; decoding is left to decode().
    Scanning resumes where the previous chunk stopped, so a reply costs time
    linear in its length however it is split. feed() returns the complete
    reply bytes, None while more input is needed, and raises DecodeError as
    soon as the bytes cannot be the start of a valid value.
    """

    def __init__(self):
        self.buffer = bytearray()
        self._pos = 0
        self._depth = 0

    def feed(self, chunk: bytes):
        self.buffer += chunk
        end = self._scan()
        if end is None:
            return None
        if end != len(self.buffer):
            raise DecodeError(f"{len(self.buffer) - end} trailing bytes after reply")
        return bytes(self.buffer)

    def _scan(self):
        buf = self.buffer
        while self._pos < len(buf):
            pos = self._pos
            token = buf[pos:pos + 1]

            if token in (b"d", b"l"):
                self._depth += 1
                self._pos = pos + 1
                continue

            if token == b"e":
                if self._depth == 0:
                    raise DecodeError(f"unexpected end marker at byte {pos}")
                self._depth -= 1
                self._pos = pos + 1
            elif token == b"i":
                end = buf.find(b"e", pos + 1)
                number = bytes(buf[pos + 1:end if end >= 0 else len(buf)])
                if not _valid_int_prefix(number, complete=end >= 0):
                    raise DecodeError(f"invalid integer at byte {pos}")
                if end < 0:
                    return None
                self._pos = end + 1
            elif token and token in _DIGITS:
                colon = buf.find(b":", pos)
                length = bytes(buf[pos:colon if colon >= 0 else len(buf)])
                if length.strip(_DIGITS):
                    raise DecodeError(f"invalid string length at byte {pos}")
                if colon < 0:
                    return None
                end = colon + 1 + int(length)
                if end > len(buf):
                    return None
                self._pos = end
            else:
                raise DecodeError(f"unknown type identifier {token!r} at byte {pos}")

            if self._depth == 0:
                return self._pos
        return None


def _valid_int_prefix(number: bytes, complete: bool) -> bool:
    digits = number[1:] if number.startswith(b"-") else number
    if digits.strip(_DIGITS):
        return False
    return bool(digits) or not complete
