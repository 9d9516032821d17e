"""
Hop reconstruction from switch labels.

A cjdns switch label is spliced hop by hop, so a route R passes through the
node at label L when R's label ends with L's label minus its leading bit.
Sorting the matches by label value orders them from the root outwards.
"""
from typing import Sequence, Tuple

from ..models.route import Route

HopChain = Tuple[Route, ...]


class HopResolver:
    """
    Computes intermediate hops over a fixed list of routes.

    Every route is scanned, dead links included, unless ``skip_dead_links``
    is set. Resolution is O(n) per route and touches no I/O.
    """

    def __init__(self, routes: Sequence[Route], skip_dead_links: bool = False):
        self.routes = tuple(routes)
        self.skip_dead_links = skip_dead_links

    def is_hop(self, candidate: Route, route: Route) -> bool:
        """True if ``candidate`` lies on the path to ``route``."""
        if candidate.index == route.index:
            return False
        if self.skip_dead_links and not candidate.is_alive:
            return False
        return route.path.endswith(candidate.path[1:])

    def get_hops(self, route: Route) -> HopChain:
        """Intermediate hops for ``route``, excluding the route itself."""
        hops = [candidate for candidate in self.routes if self.is_hop(candidate, route)]
        hops.sort(key=lambda hop: hop.label_value)
        return tuple(hops)

    def get_chain(self, route: Route) -> HopChain:
        """Hops followed by the target route."""
        return self.get_hops(route) + (route,)
