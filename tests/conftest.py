import pytest

from cjdnsadmin.admin import codec
from cjdnsadmin.admin.dummy_peer import DummyRouter, sample_routing_table
from cjdnsadmin.admin.session import AdminSession, TxidGenerator


class ScriptedSocket:
    """Socket stand-in that replays canned replies and records what was sent."""

    def __init__(self, replies, chunk_limit=None):
        self._pending = [codec.encode(r) if not isinstance(r, bytes) else r for r in replies]
        self._buffer = b""
        self.sent = []
        self.chunk_limit = chunk_limit
        self.recv_sizes = []
        self.closed = False

    def sendall(self, data):
        self.sent.append(codec.decode(data))
        if self._pending:
            self._buffer += self._pending.pop(0)

    def recv(self, size):
        self.recv_sizes.append(size)
        if self.chunk_limit is not None:
            size = min(size, self.chunk_limit)
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def close(self):
        self.closed = True


@pytest.fixture
def scripted():
    return ScriptedSocket


@pytest.fixture
def router():
    return DummyRouter(sample_routing_table(), page_size=2, seed=7)


@pytest.fixture
def session(router):
    return AdminSession(router, txid_factory=TxidGenerator("t"))


@pytest.fixture
def auth_router():
    return DummyRouter(sample_routing_table(), password="s3cret", page_size=2, seed=7)


@pytest.fixture
def auth_session(auth_router):
    return AdminSession(auth_router, password="s3cret", txid_factory=TxidGenerator("a"))
