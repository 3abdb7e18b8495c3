"""Tests for the session transcript recorder."""

from __future__ import annotations

from hookrelay.transcript import HEADER, TranscriptEntry, TranscriptRecorder


class TestTranscriptRecorder:
    def test_empty_transcript_is_just_the_header(self):
        assert TranscriptRecorder().snapshot() == "IRC Log:\n"

    def test_lines_keep_their_order_and_direction(self):
        # Arrange
        recorder = TranscriptRecorder()

        # Act
        recorder.record_outbound("NICK n")
        recorder.record_inbound("004 n")
        recorder.record_outbound("QUIT")

        # Assert
        assert recorder.snapshot() == "IRC Log:\n>> NICK n\n=> 004 n\n>> QUIT"
        assert recorder.entries == (
            TranscriptEntry("outbound", "NICK n"),
            TranscriptEntry("inbound", "004 n"),
            TranscriptEntry("outbound", "QUIT"),
        )

    def test_snapshot_is_repeatable(self):
        recorder = TranscriptRecorder()
        recorder.record_inbound("hello")

        assert recorder.snapshot() == recorder.snapshot()
        assert recorder.snapshot().startswith(HEADER)

    def test_entries_is_a_copy(self):
        recorder = TranscriptRecorder()
        entries = recorder.entries
        recorder.record_outbound("JOIN #r")

        assert entries == ()
        assert len(recorder.entries) == 1
