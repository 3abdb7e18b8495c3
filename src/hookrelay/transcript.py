"""Session transcript: every line sent and received, in order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Direction = Literal["inbound", "outbound"]

HEADER = "IRC Log:"
_PREFIXES: dict[Direction, str] = {"inbound": "=> ", "outbound": ">> "}


@dataclass(frozen=True)
class TranscriptEntry:
    direction: Direction
    text: str


class TranscriptRecorder:
    """Records lines as given. Callers redact secrets before recording."""

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    def record_inbound(self, text: str) -> None:
        self._entries.append(TranscriptEntry("inbound", text))

    def record_outbound(self, text: str) -> None:
        self._entries.append(TranscriptEntry("outbound", text))

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def snapshot(self) -> str:
        """Human-readable log: header line, then '=> ' inbound and '>> ' outbound lines."""
        lines = [f"{_PREFIXES[e.direction]}{e.text}" for e in self._entries]
        return f"{HEADER}\n" + "\n".join(lines)
