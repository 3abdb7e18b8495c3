"""Line rendering and IRC formatting helpers."""

from hookrelay.formatting.colors import strip_formatting
from hookrelay.formatting.irc_line import flatten_line, truncate_irc_line
from hookrelay.formatting.render import branch_matches, event_links, render

__all__ = [
    "branch_matches",
    "event_links",
    "flatten_line",
    "render",
    "strip_formatting",
    "truncate_irc_line",
]
