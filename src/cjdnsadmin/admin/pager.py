"""
Paginated bulk fetches over the admin socket.
"""
import logging
from typing import Any, List, Optional

from .exceptions import ProtocolError

logger = logging.getLogger(__name__)


class PagedFetcher:
    """
    Assembles a multi-page result into one list.

    ``session`` is anything with a ``call(method, args)`` returning a
    Response. Any failing page aborts the whole fetch; partial results are
    never returned.
    """

    def __init__(self, session, max_pages: Optional[int] = None):
        if max_pages is not None and max_pages <= 0:
            raise ValueError("max_pages must be positive")
        self.session = session
        self.max_pages = max_pages

    def fetch_all(self, command: str, field: str = "routingTable") -> List[Any]:
        """
        Call ``command`` with page 0, 1, ... while the reply says ``more``.

        Args:
            command: admin method to page through
            field: reply field holding each page's items
        """
        items: List[Any] = []
        page = 0
        while True:
            if self.max_pages is not None and page >= self.max_pages:
                raise ProtocolError(f"{command}: more than {self.max_pages} pages")

            response = self.session.call(command, {"page": page})

            chunk = response.get(field)
            if chunk is None:
                chunk = []
            elif not isinstance(chunk, list):
                raise ProtocolError(f"{command}: field {field!r} is not a list", response)

            items.extend(chunk)
            logger.debug("%s page %d: %d items (%d total)", command, page, len(chunk), len(items))

            page += 1
            if not response.more:
                return items
