"""One IRC session: connect, register, join, say the rendered lines, leave.

The exchange is strictly ordered::

    CONNECTING -> AUTHENTICATING -> REGISTERING -> AWAITING_WELCOME
      -> IDENTIFYING -> JOINING -> SENDING -> PARTING -> QUITTING -> CLOSED

AUTHENTICATING and IDENTIFYING only happen when the matching password is
configured. Any connection failure goes straight to CLOSED. Secrets are
replaced with ``****`` before a line reaches the transcript or the log.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger

from hookrelay.core.constants import RPL_MYINFO
from hookrelay.core.errors import (
    IRCConnectionError,
    RelayError,
    RenderError,
    SessionTimeoutError,
)
from hookrelay.formatting.irc_line import flatten_line
from hookrelay.formatting.render import event_links, render
from hookrelay.irc.throttle import TokenBucket
from hookrelay.irc.transport import PydleTransport, Transport
from hookrelay.shortener import LinkShortener, shorten_links
from hookrelay.transcript import TranscriptRecorder

if TYPE_CHECKING:
    from hookrelay.config import SessionConfig
    from hookrelay.events import Event

REDACTED = "****"
_WELCOME_PATTERN = re.compile(rf"(?:^|\s){RPL_MYINFO}(?:\s|$)")

TransportFactory = Callable[["SessionConfig"], Awaitable[Transport]]


class SessionState(enum.IntEnum):
    CONNECTING = 1
    AUTHENTICATING = 2
    REGISTERING = 3
    AWAITING_WELCOME = 4
    IDENTIFYING = 5
    JOINING = 6
    SENDING = 7
    PARTING = 8
    QUITTING = 9
    CLOSED = 10


async def open_transport(config: SessionConfig) -> Transport:
    """Default transport factory: TCP, TLS when configured."""
    return await PydleTransport.open(
        config.host,
        config.port,
        tls=config.use_ssl,
        tls_verify=config.tls_verify,
    )


class IRCSession:
    """Delivers one notification over one connection, then closes."""

    def __init__(
        self,
        config: SessionConfig,
        event: Event | None,
        *,
        shortener: LinkShortener | None = None,
        connect: TransportFactory = open_transport,
        throttle: TokenBucket | None = None,
    ) -> None:
        self.config = config
        self.event = event
        self._shortener = shortener
        self._connect = connect
        self._throttle = throttle or TokenBucket(10, 1.0)
        self._recorder = TranscriptRecorder()
        self._transport: Transport | None = None
        self._state: SessionState | None = None
        self._sent_lines = 0

    @property
    def state(self) -> SessionState | None:
        return self._state

    @property
    def recorder(self) -> TranscriptRecorder:
        return self._recorder

    @property
    def transcript(self) -> str:
        return self._recorder.snapshot()

    def _enter(self, state: SessionState) -> None:
        if self._state is not None and state <= self._state:
            raise RuntimeError(f"IRC session cannot move from {self._state.name} to {state.name}")
        self._state = state

    async def run(self) -> str:
        """Run the whole exchange. Returns the transcript."""
        if self._state is not None:
            raise RuntimeError("IRC session already ran")

        links: dict[str, str] = {}
        if not self.config.long_url:
            links = await shorten_links(self._shortener, event_links(self.event))

        self._enter(SessionState.CONNECTING)
        try:
            self._transport = await self._connect(self.config)
        except (OSError, asyncio.TimeoutError) as exc:
            self._state = SessionState.CLOSED
            logger.warning(
                "IRC connect to {}:{} failed: {}", self.config.host, self.config.port, exc
            )
            raise IRCConnectionError(
                f"Could not connect to {self.config.host}:{self.config.port}",
                code="connect_failed",
                details={"host": self.config.host, "port": self.config.port},
                original_error=exc,
            ) from exc

        try:
            await self._register()
            await self._await_welcome()
            await self._identify()
            await self._join()
            await self._send_messages(links)
            await self._leave()
        except RelayError as exc:
            # SessionTimeoutError is an OSError too; keep it as raised
            exc.details.setdefault("transcript", self.transcript)
            raise
        except OSError as exc:
            logger.warning("IRC connection to {} lost: {}", self.config.host, exc)
            raise IRCConnectionError(
                f"Connection to {self.config.host}:{self.config.port} failed mid-session",
                code="connection_lost",
                details={"state": self._state_name(), "transcript": self.transcript},
                original_error=exc,
            ) from exc
        finally:
            await self._close()

        logger.info(
            "Delivered {} line(s) to {} on {}:{}",
            self._sent_lines,
            self.config.channel,
            self.config.host,
            self.config.port,
        )
        return self.transcript

    def _state_name(self) -> str:
        return self._state.name if self._state is not None else "NEW"

    @property
    def _wire(self) -> Transport:
        if self._transport is None:
            raise RuntimeError("IRC session is not connected")
        return self._transport

    async def _send(self, line: str, *, redacted: str | None = None) -> None:
        # One command per line, whatever the caller passed in
        line = flatten_line(line)
        await self._wire.write_line(line)
        shown = flatten_line(redacted) if redacted is not None else line
        self._recorder.record_outbound(shown)
        logger.debug(">> {}", shown)

    def _receive(self, line: str) -> None:
        text = line.strip()
        self._recorder.record_inbound(text)
        logger.debug("=> {}", text)

    async def _register(self) -> None:
        if self.config.password:
            self._enter(SessionState.AUTHENTICATING)
            await self._send(f"PASS {self.config.password}", redacted=f"PASS {REDACTED}")

        self._enter(SessionState.REGISTERING)
        nick = self.config.nick
        realname = self.config.realname or nick
        await self._send(f"NICK {nick}")
        # 8 = unused mode bits, * = unused hostname field
        await self._send(f"USER {nick} 8 * :{realname}")

    async def _await_welcome(self) -> None:
        self._enter(SessionState.AWAITING_WELCOME)
        while True:
            try:
                line = await self._wire.read_line(timeout=self.config.read_timeout)
            except asyncio.TimeoutError as exc:
                raise SessionTimeoutError(
                    f"No welcome reply from {self.config.host} "
                    f"within {self.config.read_timeout}s",
                    code="welcome_timeout",
                    details={"host": self.config.host, "timeout": self.config.read_timeout},
                    original_error=exc,
                ) from exc
            if line is None:
                logger.debug("Stream ended before {} reply, continuing", RPL_MYINFO)
                return
            self._receive(line)
            if _WELCOME_PATTERN.search(line):
                return

    async def _identify(self) -> None:
        if not self.config.nickserv_password:
            return
        self._enter(SessionState.IDENTIFYING)
        await self._send(
            f"PRIVMSG NICKSERV :IDENTIFY {self.config.nickserv_password}",
            redacted=f"PRIVMSG NICKSERV :IDENTIFY {REDACTED}",
        )
        # Record the confirmation; a quiet server counts as end-of-stream
        while True:
            try:
                line = await self._wire.read_line(timeout=self.config.nickserv_wait)
            except asyncio.TimeoutError:
                return
            if line is None:
                return
            self._receive(line)

    async def _join(self) -> None:
        self._enter(SessionState.JOINING)
        channel = self.config.channel
        if self.config.channel_key:
            await self._send(
                f"JOIN {channel} {self.config.channel_key}",
                redacted=f"JOIN {channel} {REDACTED}",
            )
        else:
            await self._send(f"JOIN {channel}")

    async def _send_messages(self, links: dict[str, str]) -> None:
        self._enter(SessionState.SENDING)
        try:
            lines = render(self.event, self.config, links)
        except RenderError as exc:
            logger.warning("Nothing to say for {}: {}", type(self.event).__name__, exc)
            lines = []

        command = "NOTICE" if self.config.notice else "PRIVMSG"
        for line in lines:
            await self._throttle.wait()
            await self._send(f"{command} {self.config.channel} :{line}")
            self._sent_lines += 1

    async def _leave(self) -> None:
        self._enter(SessionState.PARTING)
        await self._send(f"PART {self.config.channel}")
        self._enter(SessionState.QUITTING)
        await self._send("QUIT")

    async def _close(self) -> None:
        if self._transport is not None:
            with contextlib.suppress(OSError):
                await self._transport.close()
            self._transport = None
        self._state = SessionState.CLOSED
