"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from hookrelay.core.errors import RelayConfigurationError

# Env keys that override config (centralized; loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "HOOKRELAY_IRC_PASSWORD",
    "HOOKRELAY_NICKSERV_PASSWORD",
    "HOOKRELAY_IRC_TLS_VERIFY",
    "GITHUB_TOKEN",
)

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_SHORTENER_URL = "https://git.io"


def _load_env_overrides() -> dict[str, str]:
    """Load env overrides once per reload."""
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.lower()
    if v in ("1", "true", "yes"):
        return True
    if v in ("0", "false", "no"):
        return False
    return None


class Config:
    """Config accessor with attribute-style access for nested keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data (e.g. after loading a new file)."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug("Config reloaded: irc target {}", self.irc.get("server", "<unset>"))

    def _validate(self) -> None:
        """Validate config structure; raise RelayConfigurationError on failure."""
        irc = self._data.get("irc")
        if irc is not None and not isinstance(irc, dict):
            raise RelayConfigurationError(
                "irc must be a mapping",
                code="invalid_irc",
                details={"type": type(irc).__name__},
            )
        if self.irc_throttle_limit < 1:
            raise RelayConfigurationError(
                "irc_throttle_limit must be at least 1",
                code="invalid_throttle",
                details={"irc_throttle_limit": self.irc_throttle_limit},
            )
        if self.irc_throttle_rate <= 0:
            raise RelayConfigurationError(
                "irc_throttle_rate must be positive",
                code="invalid_throttle",
                details={"irc_throttle_rate": self.irc_throttle_rate},
            )

    @property
    def raw(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path (e.g. 'irc.server')."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def irc(self) -> dict[str, Any]:
        """IRC target settings with secrets from env applied."""
        section = self._data.get("irc")
        settings = dict(section) if isinstance(section, dict) else {}
        if self._env.get("HOOKRELAY_IRC_PASSWORD"):
            settings["password"] = self._env["HOOKRELAY_IRC_PASSWORD"]
        if self._env.get("HOOKRELAY_NICKSERV_PASSWORD"):
            settings["nickserv_password"] = self._env["HOOKRELAY_NICKSERV_PASSWORD"]
        return settings

    @property
    def github_api_url(self) -> str:
        return str(self._data.get("github_api_url") or DEFAULT_GITHUB_API_URL)

    @property
    def github_token(self) -> str | None:
        return self._env.get("GITHUB_TOKEN") or self._data.get("github_token") or None

    @property
    def shortener_url(self) -> str | None:
        """Link shortener endpoint; an empty value disables shortening."""
        val = self._data.get("shortener_url", DEFAULT_SHORTENER_URL)
        if val and isinstance(val, str) and val.strip():
            return val.strip()
        return None

    @property
    def visibility_cache_ttl_seconds(self) -> int:
        return int(self._data.get("visibility_cache_ttl_seconds", 300))

    @property
    def irc_read_timeout(self) -> float | None:
        val = self._data.get("irc_read_timeout", 30)
        return float(val) if val else None

    @property
    def irc_nickserv_wait(self) -> float:
        return float(self._data.get("irc_nickserv_wait", 2))

    @property
    def irc_throttle_limit(self) -> int:
        return int(self._data.get("irc_throttle_limit", 10))

    @property
    def irc_throttle_rate(self) -> float:
        return float(self._data.get("irc_throttle_rate", 1.0))

    @property
    def irc_tls_verify(self) -> bool:
        parsed = _parse_bool_env(self._env.get("HOOKRELAY_IRC_TLS_VERIFY", ""))
        if parsed is not None:
            return parsed
        return bool(self._data.get("irc_tls_verify", True))


cfg: Config = Config({})
