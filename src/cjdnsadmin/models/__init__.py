"""
Admin protocol and routing data models.
"""

from .messages import Request, Response
from .route import RawRouteEntry, Route, label_to_bits, LINK_STATE_MULTIPLIER

__all__ = [
    'Request',
    'Response',
    'RawRouteEntry',
    'Route',
    'label_to_bits',
    'LINK_STATE_MULTIPLIER',
]
