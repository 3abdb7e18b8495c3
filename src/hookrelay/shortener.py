"""Link shortening client (git.io protocol) with fallback to the long URL."""

from __future__ import annotations

from collections.abc import Iterable

import httpx
from loguru import logger

from hookrelay.core.errors import ShorteningError


class LinkShortener:
    """POSTs ``url=<long>`` to the endpoint and reads the Location header."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    async def shorten(self, url: str) -> str:
        """Short URL for ``url``. Raises ShorteningError on any failure."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self._endpoint, data={"url": url})
        except httpx.HTTPError as exc:
            raise ShorteningError(
                f"Shortener request failed: {exc}",
                code="request_failed",
                details={"url": url},
                original_error=exc,
            ) from exc
        location = resp.headers.get("Location")
        if not resp.is_success or not location:
            raise ShorteningError(
                f"Shortener returned {resp.status_code}",
                code="bad_response",
                details={"url": url, "status": resp.status_code},
            )
        return location


async def shorten_links(shortener: LinkShortener | None, urls: Iterable[str]) -> dict[str, str]:
    """Map each distinct URL to its short form, or to itself when shortening fails."""
    links: dict[str, str] = {}
    for url in urls:
        if url in links:
            continue
        if shortener is None:
            links[url] = url
            continue
        try:
            links[url] = await shortener.shorten(url)
        except ShorteningError as exc:
            logger.warning("Could not shorten {}: {}", url, exc)
            links[url] = url
    return links
