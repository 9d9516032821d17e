"""
Protocol messages for the cjdns admin socket.

A request is one of three shapes:
  plain   {q: <method>, txid, args?}
  cookie  {q: "cookie", txid}
  auth    {q: "auth", aq: <method>, hash, cookie, txid, args?}

Replies are open mappings; only ``txid``, ``error`` and ``more`` have a
meaning to the session itself, everything else is command payload.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

COOKIE = "cookie"
AUTH = "auth"

# cjdns answers successful calls with error == "none"
NO_ERROR = "none"


@dataclass(frozen=True)
class Request:
    """A single admin request. Built per call, never reused."""
    q: str
    txid: str
    aq: Optional[str] = None
    cookie: Optional[str] = None
    hash: Optional[str] = None
    args: Optional[Dict[str, Any]] = None

    @classmethod
    def plain(cls, method: str, txid: str, args: Optional[Dict[str, Any]] = None) -> "Request":
        return cls(q=method, txid=txid, args=args)

    @classmethod
    def for_cookie(cls, txid: str) -> "Request":
        return cls(q=COOKIE, txid=txid)

    @classmethod
    def auth(cls, method: str, txid: str, cookie: str, hash: str,
             args: Optional[Dict[str, Any]] = None) -> "Request":
        return cls(q=AUTH, txid=txid, aq=method, cookie=cookie, hash=hash, args=args)

    @property
    def method(self) -> str:
        """The command actually being invoked."""
        return self.aq if self.q == AUTH else self.q

    def to_dict(self) -> Dict[str, Any]:
        """Wire mapping; absent fields are omitted."""
        message: Dict[str, Any] = {"q": self.q, "txid": self.txid}
        if self.aq is not None:
            message["aq"] = self.aq
        if self.hash is not None:
            message["hash"] = self.hash
        if self.cookie is not None:
            message["cookie"] = self.cookie
        if self.args is not None:
            message["args"] = self.args
        return message


@dataclass(frozen=True)
class Response:
    """A decoded reply from the router."""
    txid: Optional[str] = None
    error: Optional[str] = None
    more: bool = False
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, message: Any) -> "Response":
        if not isinstance(message, dict):
            raise TypeError(f"reply must be a mapping, got {type(message).__name__}")

        payload = dict(message)
        txid = payload.pop("txid", None)
        error = payload.pop("error", None)
        more = bool(payload.pop("more", False))

        if error is not None and (not error or error == NO_ERROR):
            error = None
        if error is not None:
            error = str(error)

        return cls(txid=txid, error=error, more=more, payload=payload)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __contains__(self, key: str) -> bool:
        return key in self.payload

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)
