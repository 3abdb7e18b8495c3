"""IRC formatting controls and the color scheme used for rendered lines."""

from __future__ import annotations

import re

# IRC control codes
BOLD = "\x02"
COLOR = "\x03"
ITALIC = "\x1D"
UNDERLINE = "\x1F"
REVERSE = "\x16"
RESET = "\x0F"

# mIRC color numbers
GREEN = 3
RED = 4
BROWN = 5
PURPLE = 6
GREY = 14
LIGHTGREY = 15
PINK = 13
BLUE = 2

_CONTROL_PATTERN = re.compile(r"\x03(?:\d{1,2}(?:,\d{1,2})?)?|[\x02\x0f\x16\x1d\x1f]")


def color(s: str, fg: int) -> str:
    return f"{COLOR}{fg:02d}{s}{RESET}"


def fmt_repo(s: str) -> str:
    return color(s, PINK)


def fmt_name(s: str) -> str:
    return color(s, LIGHTGREY)


def fmt_branch(s: str) -> str:
    return color(s, PURPLE)


def fmt_tag(s: str) -> str:
    return color(s, PURPLE)


def fmt_hash(s: str) -> str:
    return color(s, GREY)


def fmt_url(s: str) -> str:
    """Blue and underlined."""
    return f"{COLOR}{BLUE:02d}{UNDERLINE}{s}{RESET}"


def fmt_deleted(s: str) -> str:
    return color(s, RED)


def fmt_forced(s: str) -> str:
    return color(s, BROWN)


def strip_formatting(text: str) -> str:
    """Remove colors (with their digits), bold, italic, underline, reverse and reset."""
    return _CONTROL_PATTERN.sub("", text)
