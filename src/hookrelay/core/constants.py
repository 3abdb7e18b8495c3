"""Protocol constants."""

from __future__ import annotations

from typing import Literal

DEFAULT_PORT = 6667
DEFAULT_SSL_PORT = 6697

# Numeric reply that ends the welcome wait
RPL_MYINFO = "004"

EventKind = Literal[
    "push",
    "commit_comment",
    "pull_request",
    "issues",
    "issue_comment",
    "pull_request_review_comment",
    "gollum",
]
EVENT_KINDS: tuple[EventKind, ...] = (
    "push",
    "commit_comment",
    "pull_request",
    "issues",
    "issue_comment",
    "pull_request_review_comment",
    "gollum",
)
