"""CLI entrypoint: deliver one webhook payload to the configured IRC channel."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from hookrelay import __version__
from hookrelay.config import Config, cfg, load_config_with_env
from hookrelay.core.constants import EVENT_KINDS
from hookrelay.core.errors import RelayConfigurationError, RelayError
from hookrelay.notifier import IRCNotifier

_INTERCEPTED_LIBRARIES = ["pydle", "pydle.connection"]


def _intercept_logging(level: str) -> None:
    """Route stdlib logging (pydle, httpx) to loguru. Sets pydle to level."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                log_level: str | int = logger.level(record.levelname).name
            except ValueError:
                log_level = record.levelno
            logger.patch(
                lambda r: r.update(
                    name=record.name,
                    function=record.funcName,
                    line=record.lineno,
                ),
            ).opt(exception=record.exc_info).log(log_level, record.getMessage())

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for lib in _INTERCEPTED_LIBRARIES:
        lib_logger = logging.getLogger(lib)
        lib_logger.handlers = [InterceptHandler()]
        lib_logger.propagate = False
        lib_logger.setLevel(level)


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    level = "DEBUG" if verbose else "INFO"
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )
    _intercept_logging(level)


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path)
    cfg.reload(data)
    return cfg


def read_payload(source: str) -> dict[str, Any]:
    """Read a JSON payload from a file path, or stdin for '-'."""
    text = sys.stdin.read() if source == "-" else Path(source).read_text()
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("payload must be a JSON object")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookrelay",
        description="Relay a repository webhook payload into an IRC channel",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("event", choices=EVENT_KINDS, help="Webhook event name")
    parser.add_argument("payload", help="Path to the JSON payload, or - for stdin")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entrypoint. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        return 1

    try:
        config = reload_config(args.config)
        notifier = IRCNotifier.from_config(config)
    except RelayConfigurationError as exc:
        logger.error("Invalid config {}: {}", args.config, exc)
        return 1
    logger.info("Config loaded from {}", args.config)

    try:
        payload = read_payload(args.payload)
    except (OSError, ValueError) as exc:
        logger.error("Could not read payload {}: {}", args.payload, exc)
        return 1

    try:
        transcript = asyncio.run(notifier.notify(args.event, payload))
    except RelayError as exc:
        logger.error("Delivery failed: {}", exc)
        transcript = exc.details.get("transcript")
        if transcript:
            print(transcript)
        return 1

    print(transcript)
    return 0


if __name__ == "__main__":
    sys.exit(main())
