"""Relay domain exceptions."""

from __future__ import annotations


class RelayError(Exception):
    """Base for relay domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class RelayConfigurationError(RelayError):
    """Config validation or load failure."""


class IRCConnectionError(RelayError, ConnectionError):
    """Transport could not be opened or failed mid-session."""


class SessionTimeoutError(RelayError, TimeoutError):
    """Server went quiet for longer than the configured read timeout."""


class RenderError(RelayError):
    """Payload is malformed or of an unsupported kind."""


class ShorteningError(RelayError):
    """Link shortening service failed."""


class VisibilityLookupError(RelayError):
    """Repository metadata lookup failed."""
