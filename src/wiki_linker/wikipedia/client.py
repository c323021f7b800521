"""
MediaWiki Action API client implementing GraphSource.
Handles pagination, id/title batching and indefinite retry with jitter.
"""
import asyncio
import logging
import random
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from wiki_linker.config import LinkerConfig, MAX_TITLES_PER_REQUEST
from wiki_linker.exceptions import (
    PageNotFoundException,
    TooManyTitlesError,
    WikiServiceUnavailableException,
)
from wiki_linker.solver.source import GraphSource

logger = logging.getLogger(__name__)

# API error codes that clear up on their own
RETRYABLE_API_ERRORS = {"maxlag", "ratelimited", "readonly"}


class TransientAPIError(Exception):
    """The API answered, but with something worth asking again for."""


class MediaWikiClient(GraphSource):
    """
    Client for one MediaWiki site.

    Key constraints:
    - At most 50 page ids per title lookup
    - 'continue' tokens are drained before a method returns
    - Transient failures are retried forever; only a missing title is final
    """

    def __init__(self, config: Optional[LinkerConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or LinkerConfig()
        self.base_url = self.config.api_url
        self.namespaces = self.config.namespaces.value
        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.session = httpx.AsyncClient(
            headers={
                "User-Agent": self.config.user_agent,
                "Accept-Encoding": "gzip",
            },
            timeout=httpx.Timeout(self.config.request_timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the session if not using context manager."""
        if self.session:
            await self.session.aclose()
            self.session = None

    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Make one API request, retrying until a usable JSON object comes back."""
        if not self.session:
            raise WikiServiceUnavailableException("Client not initialized. Use 'async with' context manager.")

        query = {"action": "query", "format": "json", **params}
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self.session.get(self.base_url, params=query)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise TransientAPIError(f"expected a JSON object, got {type(data).__name__}")
                error = data.get("error")
                if error:
                    code = error.get("code", "")
                    if code in RETRYABLE_API_ERRORS or code.startswith("internal_api_error"):
                        raise TransientAPIError(f"API error {code}: {error.get('info', '')}")
                    raise WikiServiceUnavailableException(f"Wikipedia API error {code}: {error.get('info', '')}")
                return data
            except (httpx.HTTPError, ValueError, TransientAPIError) as e:
                delay = random.uniform(self.config.retry_min_delay, self.config.retry_max_delay)
                logger.warning(
                    f"Request {params} failed on attempt {attempt} ({type(e).__name__}: {e}), "
                    f"retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

    async def _paginate(self, params: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        """Yield every page of a query, following 'continue' tokens."""
        request = dict(params)
        while True:
            data = await self._get_json(request)
            yield data
            if "continue" not in data:
                break
            request = {**params, **data["continue"]}
            logger.debug(f"Continuing pagination with {data['continue']}")

    @staticmethod
    def _positive_ids(values) -> List[int]:
        # Missing and special pages carry negative ids
        ids = (int(value) for value in values)
        return [page_id for page_id in ids if page_id > 0]

    async def resolve_title(self, title: str) -> int:
        data = await self._get_json({"titles": title, "redirects": "1"})
        pages = data.get("query", {}).get("pages", {})
        if not pages:
            raise PageNotFoundException(title)

        key, page = next(iter(pages.items()))
        page_id = int(key)
        if page_id < 0 or "missing" in page or "invalid" in page:
            raise PageNotFoundException(title)
        logger.debug(f"Resolved '{title}' to page {page_id}")
        return page_id

    async def resolve_titles(self, page_ids: Sequence[int]) -> Dict[int, str]:
        if len(page_ids) > MAX_TITLES_PER_REQUEST:
            raise TooManyTitlesError(
                f"Too many titles: {len(page_ids)} requested, at most {MAX_TITLES_PER_REQUEST} allowed"
            )
        if not page_ids:
            return {}

        data = await self._get_json({"pageids": "|".join(str(page_id) for page_id in page_ids)})
        titles = {}
        for page in data.get("query", {}).get("pages", {}).values():
            if "title" in page and "pageid" in page:
                titles[int(page["pageid"])] = page["title"]
        return titles

    async def outgoing_links(self, page_id: int) -> Optional[List[int]]:
        params = {
            "pageids": page_id,
            "generator": "links",
            "gpllimit": "max",
            "gplnamespace": self.namespaces,
            "redirects": "1",  # land on redirect targets, not on the redirects
            "indexpageids": "1",
        }
        links: List[int] = []
        has_content = False
        async for data in self._paginate(params):
            query = data.get("query")
            if query is None:
                continue
            has_content = True
            links.extend(self._positive_ids(query.get("pageids", [])))

        if not has_content:
            return None
        logger.debug(f"Page {page_id} links to {len(links)} pages")
        return links

    async def incoming_links(self, page_id: int, include_redirects: bool = False) -> Optional[List[int]]:
        params = {
            "prop": "linkshere",
            "pageids": page_id,
            "lhprop": "pageid",
            "lhlimit": "max",
            "lhnamespace": self.namespaces,
        }
        if not include_redirects:
            params["lhshow"] = "!redirect"

        links: Optional[List[int]] = None
        async for data in self._paginate(params):
            page = data.get("query", {}).get("pages", {}).get(str(page_id), {})
            if links is None:
                # Judged on the first response only
                if "linkshere" not in page:
                    return None
                links = []
            links.extend(self._positive_ids(entry["pageid"] for entry in page.get("linkshere", [])))

        logger.debug(f"{len(links)} pages link to page {page_id}")
        return links

    async def redirects_of(self, page_id: int) -> List[int]:
        params = {
            "prop": "redirects",
            "pageids": page_id,
            "rdprop": "pageid",
            "rdlimit": "max",
            "rdnamespace": self.namespaces,
        }
        redirects: List[int] = []
        async for data in self._paginate(params):
            page = data.get("query", {}).get("pages", {}).get(str(page_id), {})
            redirects.extend(self._positive_ids(entry["pageid"] for entry in page.get("redirects", [])))
        return redirects
