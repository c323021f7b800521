"""
BidirectionalSearch - finds connecting paths between two wiki pages.

The forward side follows outgoing links from the start page, the backward
side follows incoming links (through redirects) from the end page. After
every pass the two frontiers are compared; every page they share is a
complete path.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import List, Optional

from wiki_linker.config import MAX_WORKERS
from wiki_linker.models import PathNode, SearchOutcome, SearchResult

from .expander import Direction, FrontierExpander
from .meeting import find_meetings
from .redirects import RedirectResolver
from .renderer import PathRenderer
from .source import GraphSource

logger = logging.getLogger(__name__)


class SearchPhase(Enum):
    SEEDED = "seeded"
    EXPANDING_BACKWARD = "expanding_backward"
    EXPANDING_FORWARD = "expanding_forward"
    FOUND = "found"
    DEAD_END = "dead_end"


class BidirectionalSearch:
    """
    Runs one search over a GraphSource.

    Direction choice is by frontier size: the backward side keeps expanding
    while its frontier is no larger than the forward one, then the forward
    side takes a single pass. This keeps the two depths roughly balanced; it
    is a heuristic and can report a path deeper than the shortest one when
    the two branching factors differ a lot.
    """

    def __init__(self, source: GraphSource, workers: int = MAX_WORKERS):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.source = source
        self.workers = workers
        self.phase: Optional[SearchPhase] = None
        self.forward: List[PathNode] = []
        self.backward: List[PathNode] = []

    async def run(self, start_title: str, end_title: str) -> SearchResult:
        """
        Search for paths from ``start_title`` to ``end_title``.

        Raises:
            PageNotFoundException: If either title names no page.
            WikiServiceUnavailableException: If title resolution or rendering
                gets a non-transient API error. Per-page link query errors
                only drop that page.
        """
        request_start_time = time.time()
        # Created here so the semaphore binds to the running loop
        pool = asyncio.Semaphore(self.workers)
        resolver = RedirectResolver(self.source)
        forward_expander = FrontierExpander(Direction.FORWARD, self.source.outgoing_links, pool)
        backward_expander = FrontierExpander(Direction.BACKWARD, resolver.incoming_links, pool)
        renderer = PathRenderer(self.source, pool)

        start_id = await self.source.resolve_title(start_title)
        end_id = await self.source.resolve_title(end_title)
        logger.info(f"Searching from '{start_title}' ({start_id}) to '{end_title}' ({end_id})")
        self.forward = [PathNode(start_id)]
        self.backward = [PathNode(end_id)]
        self.phase = SearchPhase.SEEDED

        def finish(outcome: SearchOutcome, paths: Optional[List[str]] = None, message: Optional[str] = None) -> SearchResult:
            elapsed_ms = (time.time() - request_start_time) * 1000
            result = SearchResult(
                start_title=start_title,
                end_title=end_title,
                outcome=outcome,
                paths=paths or [],
                forward_explored=self._explored(forward_expander, self.forward),
                backward_explored=self._explored(backward_expander, self.backward),
                message=message,
                computation_time_ms=elapsed_ms,
            )
            logger.info(
                f"SEARCH SUMMARY for {start_title} -> {end_title}: {outcome.value}, "
                f"paths: {len(result.paths)}, forward: {result.forward_explored}, "
                f"backward: {result.backward_explored}, time: {elapsed_ms:.1f}ms"
            )
            return result

        async def check() -> Optional[SearchResult]:
            meetings = find_meetings(self.forward, self.backward)
            if not meetings:
                return None
            self.phase = SearchPhase.FOUND
            logger.info("Connections found, resolving titles")
            return finish(SearchOutcome.FOUND, paths=await renderer.render(meetings))

        found = await check()
        if found:
            return found

        while True:
            self.phase = SearchPhase.EXPANDING_BACKWARD
            while len(self.backward) <= len(self.forward):
                self.backward = await backward_expander.expand(self.backward)
                found = await check()
                if found:
                    return found
                if not self.backward:
                    self.phase = SearchPhase.DEAD_END
                    logger.warning(f"No article has a link to {end_title}")
                    return finish(SearchOutcome.NO_BACKLINKS, message=f"No article has a link to {end_title}")

            self.phase = SearchPhase.EXPANDING_FORWARD
            self.forward = await forward_expander.expand(self.forward)
            found = await check()
            if found:
                return found
            if not self.forward:
                self.phase = SearchPhase.DEAD_END
                logger.warning(f"{start_title} is a dead end")
                return finish(SearchOutcome.DEAD_END, message=f"{start_title} is a dead end")

    @staticmethod
    def _explored(expander: FrontierExpander, frontier: List[PathNode]) -> int:
        return len(expander.visited) + sum(1 for node in frontier if node.page_id not in expander.visited)
