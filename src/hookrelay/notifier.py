"""Per-notification orchestration: payload -> event -> realname -> one IRC session."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from hookrelay.config import Config, SessionConfig
from hookrelay.core.errors import RenderError
from hookrelay.events import Event, parse_event
from hookrelay.irc.session import IRCSession, TransportFactory, open_transport
from hookrelay.irc.throttle import TokenBucket
from hookrelay.shortener import LinkShortener
from hookrelay.visibility import (
    GitHubClient,
    RepoVisibilityResolver,
    format_identity,
    format_realname,
)


class IRCNotifier:
    """Delivers notifications to one IRC target. Each call builds a fresh session."""

    def __init__(
        self,
        settings: Mapping[str, Any],
        *,
        resolver: RepoVisibilityResolver | None = None,
        shortener: LinkShortener | None = None,
        connect: TransportFactory = open_transport,
        throttle_limit: int = 10,
        throttle_rate: float = 1.0,
        session_overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self._settings = dict(settings)
        self._resolver = resolver
        self._shortener = shortener
        self._connect = connect
        self._throttle_limit = throttle_limit
        self._throttle_rate = throttle_rate
        self._overrides = dict(session_overrides or {})
        # Fail fast on bad target settings
        SessionConfig.from_settings(self._settings, **self._overrides)

    @classmethod
    def from_config(cls, config: Config, *, connect: TransportFactory = open_transport) -> IRCNotifier:
        """Wire the GitHub client, visibility cache and shortener from app config."""
        client = GitHubClient(config.github_api_url, token=config.github_token)
        resolver = RepoVisibilityResolver(client, ttl=config.visibility_cache_ttl_seconds)
        shortener = LinkShortener(config.shortener_url) if config.shortener_url else None
        return cls(
            config.irc,
            resolver=resolver,
            shortener=shortener,
            connect=connect,
            throttle_limit=config.irc_throttle_limit,
            throttle_rate=config.irc_throttle_rate,
            session_overrides={
                "tls_verify": config.irc_tls_verify,
                "read_timeout": config.irc_read_timeout,
                "nickserv_wait": config.irc_nickserv_wait,
            },
        )

    async def notify(self, kind: str, payload: dict[str, Any]) -> str:
        """Deliver one webhook payload. Returns the session transcript."""
        config = SessionConfig.from_settings(self._settings, **self._overrides)
        event: Event | None
        try:
            event = parse_event(kind, payload)
        except RenderError as exc:
            logger.warning("Not rendering {} payload: {}", kind, exc)
            event = None

        if event is not None:
            config = dataclasses.replace(config, realname=await self._realname(event, config))

        session = IRCSession(
            config,
            event,
            shortener=self._shortener,
            connect=self._connect,
            throttle=TokenBucket(self._throttle_limit, self._throttle_rate),
        )
        return await session.run()

    async def _realname(self, event: Event, config: SessionConfig) -> str:
        repo = event.repository
        if self._resolver is None:
            identity = format_identity(repo.owner, repo.name, public=False)
            return format_realname(identity, config.realname_prefix)
        return await self._resolver.realname(repo.owner, repo.name, config.realname_prefix)


async def deliver_all(
    notifier: IRCNotifier,
    jobs: Iterable[tuple[str, dict[str, Any]]],
) -> list[str | BaseException]:
    """Run independent notifications concurrently; failures come back as exceptions."""
    results = await asyncio.gather(
        *(notifier.notify(kind, payload) for kind, payload in jobs),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            logger.error("Notification failed: {}", result)
    return list(results)
