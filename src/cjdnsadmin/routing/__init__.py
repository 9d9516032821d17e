"""
Routing table model and hop reconstruction.
"""

from .hops import HopChain, HopResolver
from .host import Host
from .table import RoutingTable, normalize_address

__all__ = [
    'HopChain',
    'HopResolver',
    'Host',
    'RoutingTable',
    'normalize_address',
]
