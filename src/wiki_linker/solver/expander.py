"""
One level of breadth-first expansion for one search direction.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Set

from wiki_linker.exceptions import WikiLinkerException
from wiki_linker.models import PathNode

logger = logging.getLogger(__name__)

FetchLinks = Callable[[int], Awaitable[Optional[List[int]]]]


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def marker(self) -> str:
        return "/" if self is Direction.FORWARD else "\\"


class VisitedSet:
    """Ids already expanded in one direction."""

    def __init__(self):
        self._ids: Set[int] = set()

    def __contains__(self, page_id: int) -> bool:
        return page_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def mark(self, nodes: Iterable[PathNode]):
        self._ids.update(node.page_id for node in nodes)

    def filter(self, nodes: Iterable[PathNode]) -> List[PathNode]:
        """
        Drop nodes already expanded, and repeats of the same id.

        Order is kept; the first node seen for an id wins.
        """
        survivors: Dict[int, PathNode] = {}
        for node in nodes:
            if node.page_id in self._ids or node.page_id in survivors:
                continue
            survivors[node.page_id] = node
        return list(survivors.values())


class FrontierExpander:
    """
    Expands a frontier by querying every node's neighbours concurrently.

    ``fetch`` returns the neighbour ids of one page, or None when the source
    had no content for it. ``pool`` bounds how many fetches run at once and
    is shared with the rest of the search.
    """

    def __init__(self, direction: Direction, fetch: FetchLinks, pool: asyncio.Semaphore):
        self.direction = direction
        self.fetch = fetch
        self.pool = pool
        self.visited = VisitedSet()

    async def expand(self, frontier: List[PathNode]) -> List[PathNode]:
        """Return the next frontier: unseen neighbours of every node in ``frontier``."""
        total = len(frontier)
        start_time = time.perf_counter()

        results = await asyncio.gather(
            *[self._expand_node(index, total, node) for index, node in enumerate(frontier, start=1)]
        )

        # Only touched once the whole pass is in
        self.visited.mark(frontier)
        discovered = [node for found in results for node in found]
        next_frontier = self.visited.filter(discovered)

        logger.info(
            f"{self.direction.value.capitalize()} pass: {total} pages expanded, "
            f"{len(discovered)} links found, {len(next_frontier)} new "
            f"({(time.perf_counter() - start_time) * 1000:.0f}ms)"
        )
        return next_frontier

    async def _expand_node(self, index: int, total: int, node: PathNode) -> List[PathNode]:
        marker = self.direction.marker
        async with self.pool:
            logger.debug(f"{index} {marker} {total} scheduled")
            try:
                page_ids = await self.fetch(node.page_id)
            except WikiLinkerException as e:
                logger.warning(f"{index} {marker} {total} failed ({e.message})")
                return []

        if page_ids is None:
            logger.warning(f"{index} {marker} {total} failed (no content for page {node.page_id})")
            return []

        logger.debug(f"{index} {marker} {total} complete")
        return [PathNode(page_id, node) for page_id in page_ids]
