"""Relay repository events into an IRC channel."""

__version__ = "0.1.0"
