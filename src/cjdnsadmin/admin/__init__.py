"""
cjdns admin socket client.
"""

from .config import AdminConfig
from .exceptions import AdminError, ConnectError, ProtocolError, CorrelationError, DecodeError
from .pager import PagedFetcher
from .session import AdminSession, TxidGenerator, build_auth_request, compute_auth_hash, DUMP_TABLE
from .dummy_peer import DummyRouter

__all__ = [
    'AdminConfig',
    'AdminError',
    'ConnectError',
    'ProtocolError',
    'CorrelationError',
    'DecodeError',
    'PagedFetcher',
    'AdminSession',
    'TxidGenerator',
    'build_auth_request',
    'compute_auth_hash',
    'DUMP_TABLE',
    'DummyRouter',
]
