"""
In-memory routing table built from one NodeStore_dumpTable snapshot.
"""
import ipaddress
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .hops import HopChain, HopResolver
from .host import Host
from ..admin.pager import PagedFetcher
from ..admin.session import DUMP_TABLE
from ..models.route import RawRouteEntry, Route

logger = logging.getLogger(__name__)

# get_hosts() only resolves hop chains below this bound
MAX_HOPS_UNBOUNDED = 9999


def normalize_address(address: str) -> str:
    """Full, uncompressed IPv6 form, as the router reports addresses."""
    try:
        return ipaddress.IPv6Address(address).exploded
    except ipaddress.AddressValueError as e:
        raise ValueError(f"not an IPv6 address: {address!r}") from e


def _same_address(address: str, target: str) -> bool:
    """Compare a dump address with a normalised target; unparsable rows compare as-is."""
    try:
        return normalize_address(address) == target
    except ValueError:
        return address == target


class RoutingTable:
    """
    Routes and live hosts from one routing table dump.

    The table is immutable once built. A new dump needs a new table.
    """

    def __init__(self, entries: Iterable[RawRouteEntry], session=None,
                 skip_dead_links: bool = False):
        """
        Args:
            entries: dump rows, in dump order
            session: admin session handed to Host objects for pinging
            skip_dead_links: leave dead links out of hop chains
        """
        self.session = session
        self._routes: Tuple[Route, ...] = tuple(
            Route.from_entry(entry, index, self) for index, entry in enumerate(entries)
        )
        self.resolver = HopResolver(self._routes, skip_dead_links=skip_dead_links)

        hosts: List[Host] = []
        seen = set()
        for route in self._routes:
            if not route.is_alive or route.address in seen:
                continue
            seen.add(route.address)
            hosts.append(Host(route.address, session))
        self._hosts: Tuple[Host, ...] = tuple(hosts)

        logger.debug("routing table: %d routes, %d live hosts", len(self._routes), len(self._hosts))

    @classmethod
    def from_dump(cls, rows: Iterable[Mapping[str, Any]], session=None, **kwargs) -> "RoutingTable":
        return cls([RawRouteEntry.from_dict(row) for row in rows], session, **kwargs)

    @classmethod
    def build(cls, session, max_pages: Optional[int] = None, **kwargs) -> "RoutingTable":
        """Fetch every dump page from ``session`` and build the table."""
        rows = PagedFetcher(session, max_pages=max_pages).fetch_all(DUMP_TABLE)
        return cls.from_dump(rows, session, **kwargs)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return self._routes

    @property
    def hosts(self) -> Tuple[Host, ...]:
        return self._hosts

    def __len__(self) -> int:
        return len(self._routes)

    def get_hops(self, route: Route) -> HopChain:
        return self.resolver.get_hops(route)

    def get_routes(self, host: Optional[str] = None,
                   max_hops: Optional[int] = None) -> Dict[str, List[HopChain]]:
        """
        Hop chains to every live host, grouped by address.

        Args:
            host: only chains to this address (any IPv6 notation)
            max_hops: drop chains with more intermediate hops than this

        Each chain ends with the target route itself.
        """
        target = normalize_address(host) if host else None

        routes: Dict[str, List[HopChain]] = {}
        for route in self._routes:
            if target is not None and not _same_address(route.address, target):
                continue
            if not route.is_alive:
                continue

            hops = self.resolver.get_hops(route)
            if max_hops is not None and len(hops) > max_hops:
                continue

            routes.setdefault(route.address, []).append(hops + (route,))

        return routes

    def get_hosts(self, max_hops: Optional[int] = None) -> List[Host]:
        """
        Distinct hosts in the table.

        Without ``max_hops`` every address is returned, dead links included.
        With it, only live hosts reachable within ``max_hops`` hops; that
        needs hop resolution for every route and is much slower.
        """
        if max_hops is not None and max_hops < MAX_HOPS_UNBOUNDED:
            addresses = list(self.get_routes(max_hops=max_hops))
        else:
            addresses = list(dict.fromkeys(route.address for route in self._routes))

        return [Host(address, self.session) for address in addresses]
