"""
Dummy admin peer for testing without a running cjdns router.

DummyRouter is a socket-like object: AdminSession writes requests to it with
sendall() and reads the replies back with recv(). It speaks enough of the
admin protocol to exercise the cookie handshake, authentication and the
paginated routing-table dump.
"""
import hashlib
import itertools
import random
from typing import Any, Dict, List, Optional

from . import codec
from .exceptions import DecodeError

AUTH_FAILED = "Auth failed."
NO_SUCH_FUNCTION = "No such function"


def sample_routing_table() -> List[Dict[str, Any]]:
    """A small routing table: self, two direct peers and a host behind them."""
    return [
        {"ip": "fc5d:baa5:61fc:6ffd:9554:67f0:e290:7535", "path": "0000.0000.0000.0001", "link": 4294967295},
        {"ip": "fc2b:8b85:7bd4:2a28:1ec5:3b4c:ffd5:4a17", "path": "0000.0000.0000.0013", "link": 268435455},
        {"ip": "fcf1:a7a8:8ec0:589b:c64c:cff1:1e41:1a9e", "path": "0000.0000.0000.0015", "link": 134217727},
        {"ip": "fc38:4c2c:1a8f:3981:f2e7:c2b9:6870:6e84", "path": "0000.0000.0000.0153", "link": 53687091},
        {"ip": "fc38:4c2c:1a8f:3981:f2e7:c2b9:6870:6e84", "path": "0000.0000.0000.0155", "link": 26843545},
        {"ip": "fcd4:3a5b:4b0e:9e3a:b5b8:3b5a:4a29:3e11", "path": "0000.0000.0000.1553", "link": 0},
    ]


class DummyRouter:
    """In-memory admin socket peer."""

    def __init__(self, routing_table: Optional[List[Dict[str, Any]]] = None,
                 password: Optional[str] = None, page_size: int = 4,
                 memory_bytes: int = 1048576, seed: Optional[int] = None):
        if page_size <= 0:
            raise ValueError("page_size must be positive")

        self.routing_table = list(routing_table) if routing_table is not None else sample_routing_table()
        self.password = password
        self.page_size = page_size
        self.memory_bytes = memory_bytes

        self._random = random.Random(seed)
        self._cookie_counter = itertools.count(1)
        self._cookies = set()
        self._outbound = b""
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    # ------------------------------------------------------------------
    # socket interface
    # ------------------------------------------------------------------

    def sendall(self, data: bytes) -> None:
        if self.closed:
            raise OSError("dummy router socket is closed")

        try:
            request = codec.decode(data)
        except DecodeError:
            reply = {"error": "failed to parse message"}
        else:
            self.requests.append(request)
            reply = self.handle(request)

        self._outbound += codec.encode(reply)

    def recv(self, size: int) -> bytes:
        if self.closed:
            raise OSError("dummy router socket is closed")
        data, self._outbound = self._outbound[:size], self._outbound[size:]
        return data

    def close(self) -> None:
        self.closed = True

    # ------------------------------------------------------------------
    # request handling
    # ------------------------------------------------------------------

    def handle(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Reply for one decoded request."""
        reply = self._dispatch(request)
        if "txid" in request:
            reply["txid"] = request["txid"]
        return reply

    def _dispatch(self, request: Dict[str, Any]) -> Dict[str, Any]:
        query = request.get("q")

        if query == "cookie":
            cookie = f"{next(self._cookie_counter)}{self._random.randrange(1 << 32)}"
            self._cookies.add(cookie)
            return {"cookie": cookie}

        if query == "auth":
            if not self._authenticated(request):
                return {"error": AUTH_FAILED}
            return self._run(request.get("aq"), request.get("args") or {})

        if query == "ping":
            return self._run("ping", {})

        if self.password is not None:
            return {"error": AUTH_FAILED}
        return self._run(query, request.get("args") or {})

    def _authenticated(self, request: Dict[str, Any]) -> bool:
        if self.password is None:
            return True

        cookie = request.get("cookie")
        if cookie not in self._cookies:
            return False
        self._cookies.discard(cookie)

        draft = dict(request)
        draft["hash"] = hashlib.sha256((self.password + cookie).encode("utf-8")).hexdigest()
        expected = hashlib.sha256(codec.encode(draft)).hexdigest()
        return request.get("hash") == expected

    def _run(self, method: Optional[str], args: Dict[str, Any]) -> Dict[str, Any]:
        if method == "ping":
            return {"q": "pong"}

        if method == "memory":
            return {"bytes": self.memory_bytes}

        if method == "NodeStore_dumpTable":
            page = int(args.get("page", 0))
            start = page * self.page_size
            rows = self.routing_table[start:start + self.page_size]
            reply: Dict[str, Any] = {"routingTable": rows}
            if start + self.page_size < len(self.routing_table):
                reply["more"] = 1
            return reply

        if method == "RouterModule_pingNode":
            path = args.get("path")
            known = any(path in (row["ip"], row["path"]) for row in self.routing_table)
            if not known:
                return {"error": "not found"}
            return {"result": "pong", "ms": self._random.randint(5, 250), "error": "none"}

        return {"error": NO_SUCH_FUNCTION}
