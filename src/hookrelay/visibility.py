"""Repository visibility lookup + TTL cache, and the realname it drives."""

from __future__ import annotations

from typing import Any

import httpx
from cachetools import TTLCache
from loguru import logger
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hookrelay.core.errors import VisibilityLookupError

# Default retry: 5 attempts, exponential backoff 2–30s, retry on transient errors
DEFAULT_RETRY = retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception_type(
        (
            httpx.ConnectError,
            httpx.ConnectTimeout,
            httpx.ReadTimeout,
            httpx.WriteTimeout,
            httpx.PoolTimeout,
            httpx.ReadError,
            httpx.WriteError,
            httpx.HTTPStatusError,  # Only raised for 5xx
        )
    ),
    reraise=True,
)


def format_identity(owner: str, name: str, public: bool) -> str:
    """'owner/name' for public repositories, 'owner' otherwise."""
    return f"{owner}/{name}" if public else owner


def format_realname(identity: str, prefix: str = "") -> str:
    """USER realname field: the identity, optionally behind a fixed prefix."""
    return f"{prefix} - {identity}" if prefix else identity


class GitHubClient:
    """Async client for repository metadata: GET /repos/<owner>/<name>."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        h: dict[str, str] = {"Accept": "application/vnd.github+json"}
        if self._token:
            h["Authorization"] = f"Bearer {self._token}"
        return h

    @DEFAULT_RETRY
    async def get_repository(self, owner: str, name: str) -> dict[str, Any] | None:
        """Repository metadata, or None when the API won't show it (404 and other 3xx/4xx)."""
        url = f"{self._base_url}/repos/{owner}/{name}"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.get(url, headers=self._headers())
            if resp.status_code >= 500:
                resp.raise_for_status()
            if not resp.is_success:
                return None
            data = resp.json()
            return data if isinstance(data, dict) else None


class RepoVisibilityResolver:
    """Answers public/private with a TTL cache. Failures answer private."""

    def __init__(
        self,
        client: GitHubClient,
        *,
        maxsize: int = 1024,
        ttl: int = 300,
    ) -> None:
        self._client = client
        self._cache: TTLCache[tuple[str, str], bool] = TTLCache(maxsize=maxsize, ttl=float(ttl))

    async def lookup(self, owner: str, name: str) -> bool:
        """Uncached visibility. Raises VisibilityLookupError when the API can't answer."""
        try:
            data = await self._client.get_repository(owner, name)
        except (httpx.HTTPError, RetryError, ValueError) as exc:
            raise VisibilityLookupError(
                f"Lookup of {owner}/{name} failed: {exc}",
                code="lookup_failed",
                details={"owner": owner, "name": name},
                original_error=exc,
            ) from exc
        # A token with access sees private repositories too
        return data is not None and not data.get("private", False)

    async def is_public(self, owner: str, name: str) -> bool:
        key = (owner, name)
        try:
            return self._cache[key]
        except KeyError:
            pass
        try:
            public = await self.lookup(owner, name)
        except VisibilityLookupError as exc:
            logger.warning("Assuming {}/{} is private: {}", owner, name, exc)
            return False
        self._cache[key] = public
        return public

    async def realname(self, owner: str, name: str, prefix: str = "") -> str:
        """Realname for the USER command; only public repositories are named in full."""
        public = await self.is_public(owner, name)
        return format_realname(format_identity(owner, name, public), prefix)
