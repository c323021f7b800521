"""
Pytest configuration and shared fixtures.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

import pytest

from wiki_linker.config import MAX_TITLES_PER_REQUEST
from wiki_linker.exceptions import PageNotFoundException, TooManyTitlesError, WikiServiceUnavailableException
from wiki_linker.solver.source import GraphSource

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


class FakeGraphSource(GraphSource):
    """
    In-memory link graph with the same contract as the live client.

    ``links`` maps a page id to the ids it links to. ``redirect_targets`` maps
    a redirect page id to the page it redirects to. Pages in ``failing`` answer
    outgoing link queries with an API error. Every call is recorded in
    ``calls``; ``max_in_flight`` tracks peak concurrency.
    """

    def __init__(
        self,
        links: Dict[int, List[int]],
        titles: Optional[Dict[int, str]] = None,
        redirect_targets: Optional[Dict[int, int]] = None,
        no_backlink_data: Iterable[int] = (),
        no_content: Iterable[int] = (),
        failing: Iterable[int] = (),
        delay: float = 0.0,
    ):
        self.links = {page_id: list(targets) for page_id, targets in links.items()}
        self.redirect_targets = dict(redirect_targets or {})
        if titles is None:
            page_ids = set(self.links) | {t for targets in self.links.values() for t in targets}
            titles = {page_id: f"Page {page_id}" for page_id in page_ids}
        self.titles = dict(titles)
        self.no_backlink_data = set(no_backlink_data)
        self.no_content = set(no_content)
        self.failing = set(failing)
        self.delay = delay
        self.calls = defaultdict(list)
        self.in_flight = 0
        self.max_in_flight = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    async def _track(self, name: str, argument):
        self.calls[name].append(argument)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

    async def resolve_title(self, title: str) -> int:
        await self._track("resolve_title", title)
        for page_id, name in self.titles.items():
            if name == title:
                return self.redirect_targets.get(page_id, page_id)
        raise PageNotFoundException(title)

    async def resolve_titles(self, page_ids) -> Dict[int, str]:
        if len(page_ids) > MAX_TITLES_PER_REQUEST:
            raise TooManyTitlesError(f"Too many titles: {len(page_ids)}")
        await self._track("resolve_titles", list(page_ids))
        return {page_id: self.titles[page_id] for page_id in page_ids if page_id in self.titles}

    async def outgoing_links(self, page_id: int) -> Optional[List[int]]:
        await self._track("outgoing_links", page_id)
        if page_id in self.failing:
            raise WikiServiceUnavailableException(f"Wikipedia API error nosuchpageid: There is no page with ID {page_id}.")
        if page_id in self.no_content:
            return None
        return list(self.links.get(page_id, []))

    async def incoming_links(self, page_id: int, include_redirects: bool = False) -> Optional[List[int]]:
        await self._track("incoming_links", page_id)
        if page_id in self.no_backlink_data:
            return None
        return [
            source for source, targets in self.links.items()
            if page_id in targets and (include_redirects or source not in self.redirect_targets)
        ]

    async def redirects_of(self, page_id: int) -> List[int]:
        await self._track("redirects_of", page_id)
        return [alias for alias, target in self.redirect_targets.items() if target == page_id]


@pytest.fixture
def make_source():
    """Factory for in-memory graph sources."""
    return FakeGraphSource
