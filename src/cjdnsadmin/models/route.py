"""
Route models built from a routing-table dump.

THESE MODELS ARE IMMUTABLE. A route belongs to exactly one RoutingTable
snapshot; a new dump means a new table and new routes.
"""
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# cjdns LINK_STATE_MULTIPLIER
LINK_STATE_MULTIPLIER = 5366870.0


def label_to_bits(label: str) -> str:
    """
    Convert a dotted hex switch label to a string of binary digits.

    "0000.0000.0000.0013" -> "10011". No zero padding; a zero label is "0".
    """
    digits = label.replace(".", "")
    if not digits:
        raise ValueError("empty switch label")
    return format(int(digits, 16), "b")


@dataclass(frozen=True)
class RawRouteEntry:
    """One row of NodeStore_dumpTable output."""
    ip: str
    path: str
    link: int

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "RawRouteEntry":
        try:
            return cls(ip=str(row["ip"]), path=str(row["path"]), link=int(row["link"]))
        except KeyError as e:
            raise ValueError(f"routing table entry missing field {e}") from e


@dataclass(frozen=True)
class Route:
    """
    A route to ``address`` along switch label ``path`` (binary digits).

    ``index`` is the route's position in its table and is what identifies it
    during hop resolution; two routes may share a path. The table is held
    through a weak reference only.
    """
    index: int
    address: str
    path: str
    link: int
    quality: float
    _table: Optional[weakref.ReferenceType] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_entry(cls, entry: RawRouteEntry, index: int, table=None) -> "Route":
        return cls(
            index=index,
            address=entry.ip,
            path=label_to_bits(entry.path),
            link=entry.link,
            quality=entry.link / LINK_STATE_MULTIPLIER,
            _table=weakref.ref(table) if table is not None else None,
        )

    @property
    def is_alive(self) -> bool:
        """Dead links have zero or negative link quality."""
        return self.link > 0

    @property
    def label_value(self) -> int:
        """Numeric value of the switch label."""
        return int(self.path, 2)

    @property
    def routing_table(self):
        table = self._table() if self._table is not None else None
        if table is None:
            raise RuntimeError(f"route {self.index} is not attached to a live routing table")
        return table

    def get_hops(self) -> Tuple["Route", ...]:
        """Intermediate hops towards this route, nearest the root first."""
        return self.routing_table.resolver.get_hops(self)
