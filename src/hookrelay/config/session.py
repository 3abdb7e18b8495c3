"""Per-notification IRC target settings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from hookrelay.core.constants import DEFAULT_PORT, DEFAULT_SSL_PORT
from hookrelay.core.errors import RelayConfigurationError

_TRUE_STRINGS = ("1", "true", "yes", "on")
_CHANNEL_PREFIXES = ("#", "&")
_KEY_SEPARATOR = "::"


def parse_bool(value: Any) -> bool:
    """Loose boolean: True/False, 1/0 or the strings 1/true/yes/on."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def parse_branches(value: str | Iterable[str] | None) -> frozenset[str]:
    """Comma separated string or list of branch names. Blank means no filter."""
    if value is None:
        return frozenset()
    items = value.split(",") if isinstance(value, str) else value
    return frozenset(s for s in (str(item).strip() for item in items) if s)


def resolve_port(port: Any, use_ssl: bool) -> int:
    """Explicit port if given, else 6697 with SSL and 6667 without."""
    if port is None or (isinstance(port, str) and not port.strip()):
        return DEFAULT_SSL_PORT if use_ssl else DEFAULT_PORT
    try:
        value = int(str(port).strip())
    except ValueError as exc:
        raise RelayConfigurationError(
            f"Invalid IRC port: {port!r}",
            code="invalid_port",
            details={"port": str(port)},
            original_error=exc,
        ) from exc
    if value <= 0 or value > 65535:
        raise RelayConfigurationError(
            f"IRC port out of range: {value}",
            code="invalid_port",
            details={"port": value},
        )
    return value


def _optional(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


@dataclass(frozen=True)
class SessionConfig:
    """Everything one IRC session needs. Built fresh per notification."""

    host: str
    nick: str
    channel: str
    port: int = DEFAULT_PORT
    use_ssl: bool = False
    password: str | None = None
    nickserv_password: str | None = None
    channel_key: str | None = None
    branch_filter: frozenset[str] = field(default_factory=frozenset)
    no_colors: bool = False
    long_url: bool = False
    notice: bool = False
    realname: str = ""
    realname_prefix: str = ""
    tls_verify: bool = True
    read_timeout: float | None = None
    nickserv_wait: float = 2.0

    def __post_init__(self) -> None:
        if self.port <= 0:
            raise RelayConfigurationError(
                f"IRC port must be positive, got {self.port}",
                code="invalid_port",
                details={"port": self.port},
            )

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> SessionConfig:
        """Build from loosely typed target settings (server, port, ssl, nick, room, ...)."""
        missing = [key for key in ("server", "nick", "room") if not settings.get(key)]
        if missing:
            raise RelayConfigurationError(
                f"IRC settings missing: {', '.join(missing)}",
                code="missing_irc_settings",
                details={"missing": missing},
            )

        use_ssl = parse_bool(settings.get("ssl"))
        room = str(settings["room"]).strip()
        room, _, key = room.partition(_KEY_SEPARATOR)
        channel = room if room.startswith(_CHANNEL_PREFIXES) else f"#{room}"

        values: dict[str, Any] = {
            "host": str(settings["server"]).strip(),
            "port": resolve_port(settings.get("port"), use_ssl),
            "use_ssl": use_ssl,
            "nick": str(settings["nick"]).strip(),
            "channel": channel,
            "password": _optional(settings.get("password")),
            "nickserv_password": _optional(settings.get("nickserv_password")),
            "channel_key": _optional(key),
            "branch_filter": parse_branches(settings.get("branches")),
            "no_colors": parse_bool(settings.get("no_colors")),
            "long_url": parse_bool(settings.get("long_url")),
            "notice": parse_bool(settings.get("notice")),
            "realname_prefix": str(settings.get("realname_prefix") or ""),
        }
        values.update(overrides)
        return cls(**values)
