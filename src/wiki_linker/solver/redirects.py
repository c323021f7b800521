"""
Backlink discovery that looks through redirects.

The API reports "pages linking here" and "redirects to here" separately, and
a link to a redirect is, for the reader, a link to its target. The resolver
folds the backlinks of every redirect alias into the backlinks of the page.
"""

import asyncio
import logging
from collections import deque
from typing import List, Set

from .source import GraphSource

logger = logging.getLogger(__name__)


class RedirectResolver:
    """Collects the backlinks of a page and of all its redirect aliases."""

    def __init__(self, source: GraphSource):
        self.source = source

    async def incoming_links(self, page_id: int) -> List[int]:
        """
        Backlinks of ``page_id`` including those reaching it through redirects.

        Aliases are walked breadth-first with a local processed set, so
        chained and cyclic redirects both terminate.
        """
        backlinks: List[int] = []
        processed: Set[int] = set()
        pending = deque([page_id])

        while pending:
            current = pending.popleft()
            if current in processed:
                continue
            processed.add(current)

            direct, aliases = await asyncio.gather(
                self.source.incoming_links(current, include_redirects=False),
                self.source.redirects_of(current),
            )
            if direct is None:
                logger.debug(f"No backlink data for page {current}")
            else:
                backlinks.extend(direct)

            for alias in aliases:
                if alias in processed:
                    logger.debug(f"Redirect cycle through page {alias} while resolving {page_id}")
                    continue
                pending.append(alias)

        if len(processed) > 1:
            logger.debug(
                f"Page {page_id}: folded {len(processed) - 1} redirect(s), {len(backlinks)} backlinks"
            )
        return backlinks
