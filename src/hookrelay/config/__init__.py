"""Configuration: YAML + env overlay, per-notification session settings."""

from hookrelay.config.loader import _deep_update, load_config, load_config_with_env
from hookrelay.config.schema import Config, cfg
from hookrelay.config.session import SessionConfig, parse_bool, parse_branches, resolve_port

__all__ = [
    "Config",
    "SessionConfig",
    "_deep_update",
    "cfg",
    "load_config",
    "load_config_with_env",
    "parse_bool",
    "parse_branches",
    "resolve_port",
]
