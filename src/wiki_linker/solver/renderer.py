"""
Turns meeting pairs into readable title chains.
"""

import asyncio
import logging
from typing import Dict, List, Sequence, Set

from wiki_linker.config import MAX_TITLES_PER_REQUEST
from wiki_linker.models import PathNode

from .meeting import Meeting
from .source import GraphSource

logger = logging.getLogger(__name__)


def chunked(page_ids: Sequence[int], size: int = MAX_TITLES_PER_REQUEST) -> List[List[int]]:
    return [list(page_ids[i:i + size]) for i in range(0, len(page_ids), size)]


def meeting_page_ids(meetings: Sequence[Meeting]) -> Set[int]:
    """Every page id needed to print the given meetings."""
    page_ids: Set[int] = set()
    for forward, backward in meetings:
        page_ids.update(forward.links())
        page_ids.update(backward.links())
        page_ids.add(forward.page_id)
    return page_ids


def render_path(forward: PathNode, backward: PathNode, titles: Dict[int, str]) -> str:
    """
    Render ``start -> ... -> meeting -> ... -> end at depth N``.

    The backward node's ancestry runs from the end page towards the meeting
    page, so it is walked in reverse.
    """
    chain = forward.links() + [forward.page_id] + list(reversed(backward.links()))
    names = []
    for page_id in chain:
        title = titles.get(page_id)
        if title is None:
            logger.warning(f"No title for page {page_id}, printing its id")
            title = str(page_id)
        names.append(title)
    return f"{' -> '.join(names)} at depth {forward.depth() + backward.depth()}"


class PathRenderer:
    """Resolves titles for meeting pairs in batches and renders each pair."""

    def __init__(self, source: GraphSource, pool: asyncio.Semaphore):
        self.source = source
        self.pool = pool

    async def titles_for(self, page_ids: Set[int]) -> Dict[int, str]:
        batches = chunked(sorted(page_ids))
        logger.debug(f"Resolving {len(page_ids)} titles in {len(batches)} batch(es)")
        results = await asyncio.gather(*[self._resolve_batch(batch) for batch in batches])

        titles: Dict[int, str] = {}
        for mapping in results:
            titles.update(mapping)
        return titles

    async def _resolve_batch(self, batch: List[int]) -> Dict[int, str]:
        async with self.pool:
            return await self.source.resolve_titles(batch)

    async def render(self, meetings: Sequence[Meeting]) -> List[str]:
        if not meetings:
            return []
        titles = await self.titles_for(meeting_page_ids(meetings))
        return [render_path(forward, backward, titles) for forward, backward in meetings]
