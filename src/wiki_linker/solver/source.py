"""
Graph data source interface consumed by the search engine.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence


class GraphSource(ABC):
    """
    Read-only, lazily queried view of a wiki's link graph.

    Implementations own the domain and namespace filter they query with and
    handle transport failures themselves (the search never sees a transient
    error). Every list-returning method drains pagination before returning.
    """

    @abstractmethod
    async def resolve_title(self, title: str) -> int:
        """
        Resolve a title (following redirects) to its page id.

        Raises:
            PageNotFoundException: If the title names no page.
        """
        pass

    @abstractmethod
    async def resolve_titles(self, page_ids: Sequence[int]) -> Dict[int, str]:
        """
        Map up to 50 page ids to their titles.

        Raises:
            TooManyTitlesError: If more than 50 ids are passed. No request is made.
        """
        pass

    @abstractmethod
    async def outgoing_links(self, page_id: int) -> Optional[List[int]]:
        """Ids of the pages ``page_id`` links to, or None if the source returned no content."""
        pass

    @abstractmethod
    async def incoming_links(self, page_id: int, include_redirects: bool = False) -> Optional[List[int]]:
        """
        Ids of the pages linking to ``page_id``.

        Returns None (rather than an empty list) when the source has no
        backlink property for the page at all.
        """
        pass

    @abstractmethod
    async def redirects_of(self, page_id: int) -> List[int]:
        """Ids of the redirect pages that point at ``page_id``."""
        pass
