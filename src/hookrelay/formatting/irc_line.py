"""Keep rendered text to one IRC line: no line breaks, within the byte limit."""

from __future__ import annotations

import re

# 512 bytes total, minus "PRIVMSG #channel :" and CRLF overhead
MAX_LINE_BYTES = 450
ELLIPSIS = "..."

# Any of these would end the IRC line early
_LINE_BREAKS = re.compile(r"[\r\n\0]")


def flatten_line(content: str) -> str:
    """Replace CR, LF and NUL with spaces, one for one."""
    return _LINE_BREAKS.sub(" ", content)


def _utf8_prefix(encoded: bytes, max_bytes: int) -> bytes:
    """Longest prefix of at most max_bytes that ends on a character boundary."""
    chunk = encoded[:max_bytes]
    while chunk:
        try:
            chunk.decode("utf-8", errors="strict")
            return chunk
        except UnicodeDecodeError:
            chunk = chunk[:-1]
    return chunk


def truncate_irc_line(content: str, max_bytes: int = MAX_LINE_BYTES) -> str:
    """Cut content to max_bytes, marking the cut with an ellipsis.

    Never splits a UTF-8 multi-byte character. A budget too small for the
    ellipsis leaves nothing.
    """
    encoded = content.encode("utf-8", errors="replace")
    if len(encoded) <= max_bytes:
        return content
    if max_bytes < len(ELLIPSIS):
        return ""
    head = _utf8_prefix(encoded, max_bytes - len(ELLIPSIS))
    return head.decode("utf-8", errors="replace") + ELLIPSIS
