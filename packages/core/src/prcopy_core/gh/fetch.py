"""HTTP access to GitHub pull request pages."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "text/html",
    # GitHub returns the bare thread partial instead of a full page for XHR requests.
    "X-Requested-With": "XMLHttpRequest",
}


class PageFetcher:
    """Fetches PR pages and hidden-thread partials over HTTP, one client per call."""

    def __init__(self, timeout: float = 20.0, transport: httpx.AsyncBaseTransport | None = None):
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """Return the response body for *url*.

        Raises:
            httpx.HTTPStatusError: non-2xx response.
            httpx.HTTPError: connection or timeout failure.
        """
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            headers=_HEADERS,
            transport=self._transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            logger.debug("Fetched %s (%d bytes)", url, len(response.content))
            return response.text
