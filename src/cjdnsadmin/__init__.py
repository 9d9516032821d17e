"""
cjdnsadmin: client for the cjdns admin socket and route explorer.

Talks bencode over the router's admin port, authenticating each call with
the cookie/sha256 handshake, and rebuilds multi-hop paths from the flat
NodeStore_dumpTable output by switch-label suffix matching.
"""

from .admin import (
    AdminConfig,
    AdminError,
    AdminSession,
    ConnectError,
    CorrelationError,
    DecodeError,
    PagedFetcher,
    ProtocolError,
)
from .models import RawRouteEntry, Request, Response, Route
from .routing import HopResolver, Host, RoutingTable

__version__ = "0.1.0"
__all__ = [
    'AdminConfig',
    'AdminError',
    'AdminSession',
    'ConnectError',
    'CorrelationError',
    'DecodeError',
    'PagedFetcher',
    'ProtocolError',
    'RawRouteEntry',
    'Request',
    'Response',
    'Route',
    'HopResolver',
    'Host',
    'RoutingTable',
]
