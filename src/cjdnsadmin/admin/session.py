"""
Authenticated request/response session with the cjdns admin socket.

One connection, one outstanding request at a time. When a password is
configured every call is preceded by a cookie round-trip:

  1. -> {q: "cookie", txid}            <- {cookie, txid}
  2. -> {q: "auth", aq: <method>, hash, cookie, txid, args?}

where ``hash`` is first sha256(password + cookie) and is then replaced by the
sha256 of the whole bencoded request, so the hash commits to the arguments
too.
"""
import hashlib
import itertools
import logging
import secrets
import socket
from typing import Any, Callable, Dict, Optional

from . import codec
from .config import AdminConfig
from .exceptions import ConnectError, CorrelationError, DecodeError, ProtocolError
from .pager import PagedFetcher
from ..models.messages import Request, Response

logger = logging.getLogger(__name__)

DUMP_TABLE = "NodeStore_dumpTable"

TxidFactory = Callable[[], str]


class TxidGenerator:
    """
    Per-session txid source: a random prefix plus a counter.

    The prefix keeps concurrent clients on the same router apart; the counter
    makes every txid within one session unique. Pass ``prefix`` to get a
    deterministic sequence.
    """

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix if prefix is not None else secrets.token_hex(4)
        self._counter = itertools.count()

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter):x}"


def compute_auth_hash(password: str, cookie: str, request: Request) -> str:
    """
    Final authentication hash for ``request``.

    ``request`` must carry sha256(password + cookie) in its hash field; the
    result is the sha256 of the bencoded request.
    """
    expected_first = hashlib.sha256((password + cookie).encode("utf-8")).hexdigest()
    if request.hash != expected_first:
        raise ValueError("request hash field must hold sha256(password + cookie)")
    return hashlib.sha256(codec.encode(request.to_dict())).hexdigest()


def build_auth_request(password: str, cookie: str, method: str, txid: str,
                       args: Optional[Dict[str, Any]] = None) -> Request:
    """Authenticated request with its final hash filled in. Pure function."""
    first = hashlib.sha256((password + cookie).encode("utf-8")).hexdigest()
    draft = Request.auth(method, txid, cookie=cookie, hash=first, args=args)
    return Request.auth(method, txid, cookie=cookie,
                        hash=compute_auth_hash(password, cookie, draft), args=args)


class AdminSession:
    """Synchronous client for one admin socket connection."""

    def __init__(self, sock, password: Optional[str] = None,
                 txid_factory: Optional[TxidFactory] = None,
                 chunk_size: int = 1024):
        """
        Args:
            sock: connected socket-like object (``sendall``/``recv``/``close``)
            password: admin password; None sends unauthenticated requests
            txid_factory: callable returning a fresh txid per request
            chunk_size: recv() size for the reply read loop
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self._sock = sock
        self.password = password
        self._next_txid = txid_factory or TxidGenerator()
        self.chunk_size = chunk_size

    @classmethod
    def connect(cls, config: AdminConfig, txid_factory: Optional[TxidFactory] = None) -> "AdminSession":
        """Open a TCP connection to the admin socket described by ``config``."""
        logger.debug("connecting to %s:%s", config.host, config.port)
        try:
            sock = socket.create_connection((config.host, config.port), timeout=config.timeout)
        except OSError as e:
            raise ConnectError(f"cannot connect to {config.host}:{config.port}: {e}") from e

        session = cls(sock, password=config.password, txid_factory=txid_factory,
                      chunk_size=config.chunk_size)

        if config.verify:
            try:
                session.verify()
            except Exception:
                session.close()
                raise

        return session

    def verify(self) -> None:
        """Raise ConnectError unless the peer answers ping with pong."""
        response = self.ping()
        if response.get("q") != "pong":
            raise ConnectError("peer doesn't appear to be a cjdns admin socket")

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Generic request primitive
    # ------------------------------------------------------------------

    def call(self, method: str, args: Optional[Dict[str, Any]] = None) -> Response:
        """
        Invoke ``method`` on the router.

        Raises:
            ProtocolError: the router replied with an error
            CorrelationError: the reply's txid is not the one sent
            DecodeError: the reply is not valid bencode
            ConnectError: the connection failed
        """
        txid = self._next_txid()

        if self.password is not None:
            cookie = self._get_cookie()
            request = build_auth_request(self.password, cookie, method, txid, args)
        else:
            request = Request.plain(method, txid, args)

        response = self._exchange(request)
        if response.error is not None:
            raise ProtocolError(response.error, response)
        return response

    def _get_cookie(self) -> str:
        response = self._exchange(Request.for_cookie(self._next_txid()))
        if response.error is not None:
            raise ProtocolError(response.error, response)

        cookie = response.get("cookie")
        if not isinstance(cookie, str) or not cookie:
            raise ProtocolError("no cookie in reply", response)
        return cookie

    def _exchange(self, request: Request) -> Response:
        """Send one request, read one reply and check its txid."""
        logger.debug("sending request: q=%s method=%s txid=%s args=%r",
                     request.q, request.method, request.txid, request.args)
        self._send(codec.encode(request.to_dict()))

        message = self._receive()
        logger.debug("decoded reply: %r", message)
        try:
            response = Response.from_dict(message)
        except TypeError as e:
            raise DecodeError(str(e)) from e

        if response.txid is not None and response.txid != request.txid:
            raise CorrelationError(request.txid, response.txid)
        return response

    def _send(self, data: bytes) -> None:
        if self._sock is None:
            raise ConnectError("session is closed")
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise ConnectError(f"send failed: {e}") from e

    def _receive(self) -> Any:
        """
        Read until the buffer holds one complete bencoded value.

        Value boundaries are tracked chunk by chunk, so a reply that ends
        exactly on a chunk boundary does not block waiting for more data, and
        bytes that can never form a valid reply fail at once.
        """
        if self._sock is None:
            raise ConnectError("session is closed")

        framer = codec.ReplyFramer()
        while True:
            try:
                chunk = self._sock.recv(self.chunk_size)
            except socket.timeout as e:
                raise ConnectError("timed out waiting for reply") from e
            except OSError as e:
                raise ConnectError(f"receive failed: {e}") from e

            if not chunk:
                if not framer.buffer:
                    raise ConnectError("connection closed by peer")
                raise DecodeError(f"connection closed mid-reply after {len(framer.buffer)} bytes")

            data = framer.feed(chunk)
            if data is None:
                continue

            logger.debug("bencoded reply: %r", data)
            return codec.decode(data)

    # ------------------------------------------------------------------
    # Admin commands
    # ------------------------------------------------------------------

    def ping(self) -> Response:
        return self.call("ping")

    def memory(self) -> int:
        response = self.call("memory")
        if "bytes" not in response:
            raise ProtocolError("no bytes in reply", response)
        return response["bytes"]

    def ping_node(self, path: str, timeout: int = 5000) -> Response:
        return self.call("RouterModule_pingNode", {"path": path, "timeout": timeout})

    def dump_table(self) -> list:
        """Every routing table page, concatenated."""
        return PagedFetcher(self).fetch_all(DUMP_TABLE)

    def ping_switch(self, path: str, data: str = "x", timeout: int = 5000) -> Response:
        return self.call("SwitchPinger_ping", {"path": path, "data": data, "timeout": timeout})

    def lookup(self, address: str) -> Response:
        return self.call("RouterModule_lookup", {"address": address})

    def authorized_passwords_add(self, password: str, auth_type: int = 1) -> Response:
        return self.call("AuthorizedPasswords_add", {"password": password, "authType": auth_type})

    def authorized_passwords_flush(self) -> Response:
        return self.call("AuthorizedPasswords_flush")

    def scramble_keys(self, xor_value: str) -> Response:
        return self.call("UDPInterface_scrambleKeys", {"xorValue": xor_value})

    def begin_connection(self, public_key: str, address: str,
                         password: Optional[str] = None) -> Response:
        args = {"publicKey": public_key, "address": address}
        if password is not None:
            args["password"] = password
        return self.call("UDPInterface_beginConnection", args)

