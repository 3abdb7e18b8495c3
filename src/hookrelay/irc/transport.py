"""Line-oriented IRC transport: a protocol plus the pydle-backed TCP/TLS implementation."""

from __future__ import annotations

from typing import Protocol

import pydle.connection
from loguru import logger

ENCODING = "utf-8"


class Transport(Protocol):
    """Bidirectional line stream. read_line returns None at end-of-stream."""

    async def read_line(self, timeout: float | None = None) -> str | None:
        """Next line without its terminator; raises TimeoutError after ``timeout`` seconds."""
        ...

    async def write_line(self, text: str) -> None:
        """Send one line; the terminator is added by the transport."""
        ...

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...


class PydleTransport:
    """TCP/TLS transport over pydle's asyncio connection."""

    def __init__(
        self,
        hostname: str,
        port: int,
        *,
        tls: bool = False,
        tls_verify: bool = True,
    ) -> None:
        self._connection = pydle.connection.Connection(
            hostname,
            port,
            tls=tls,
            tls_verify=tls_verify,
        )

    @classmethod
    async def open(
        cls,
        hostname: str,
        port: int,
        *,
        tls: bool = False,
        tls_verify: bool = True,
    ) -> PydleTransport:
        """Connect and return a ready transport."""
        transport = cls(hostname, port, tls=tls, tls_verify=tls_verify)
        await transport._connection.connect()
        logger.debug("Connected to {}:{} (tls={})", hostname, port, tls)
        return transport

    async def read_line(self, timeout: float | None = None) -> str | None:
        data = await self._connection.recv(timeout=timeout)
        if not data:
            return None
        return data.decode(ENCODING, errors="replace").rstrip("\r\n")

    async def write_line(self, text: str) -> None:
        await self._connection.send(f"{text}\r\n".encode(ENCODING))

    async def close(self) -> None:
        await self._connection.disconnect()
