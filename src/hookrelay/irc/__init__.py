"""IRC session, transport and line pacing."""

from hookrelay.irc.session import IRCSession, SessionState, open_transport
from hookrelay.irc.throttle import TokenBucket
from hookrelay.irc.transport import PydleTransport, Transport

__all__ = [
    "IRCSession",
    "PydleTransport",
    "SessionState",
    "TokenBucket",
    "Transport",
    "open_transport",
]
