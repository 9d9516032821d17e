"""
Exceptions raised by the admin socket client.
"""
from typing import Optional


class AdminError(Exception):
    """Base class for all admin socket errors."""


class ConnectError(AdminError):
    """The transport could not be established or broke mid-call."""


class ProtocolError(AdminError):
    """The router answered with an error field."""

    def __init__(self, message: str, response=None):
        super().__init__(message)
        self.response = response


class CorrelationError(AdminError):
    """The reply carried a txid other than the one we sent.

    The session's request/reply ordering can no longer be trusted after this.
    """

    def __init__(self, expected: str, received: Optional[str]):
        super().__init__(f"wrong txid in reply: expected {expected!r}, got {received!r}")
        self.expected = expected
        self.received = received


class DecodeError(AdminError):
    """The reply bytes are not a valid bencoded value."""
