"""Property-based tests using hypothesis."""

import asyncio

from hypothesis import given, settings, strategies as st

from hookrelay.config import SessionConfig, resolve_port
from hookrelay.events import parse_event
from hookrelay.formatting import render, strip_formatting, truncate_irc_line
from hookrelay.formatting.colors import fmt_url
from hookrelay.formatting.irc_line import MAX_LINE_BYTES
from hookrelay.irc.session import IRCSession
from tests.mocks import MemoryTransport, connect_to
from tests.payloads import REPO_URL, issues_payload, push_payload

SECRETS = st.text(alphabet="!@$%^&~", min_size=6, max_size=20)


class TestPropertyBased:
    """Property-based tests for invariants."""

    @given(st.text())
    def test_strip_formatting_is_idempotent(self, text):
        """Property: stripping twice equals stripping once."""
        once = strip_formatting(text)
        assert strip_formatting(once) == once

    @given(st.text(), st.integers(min_value=8, max_value=600))
    def test_truncated_line_fits(self, text, max_bytes):
        """Property: truncated lines never exceed the byte limit."""
        result = truncate_irc_line(text, max_bytes)
        assert len(result.encode("utf-8")) <= max_bytes
        if len(text.encode("utf-8")) <= max_bytes:
            assert result == text

    @given(st.text(min_size=1, max_size=200))
    def test_render_without_colors_has_no_control_codes(self, title):
        """Property: no_colors output survives stripping unchanged."""
        payload = issues_payload()
        payload["issue"]["title"] = title
        config = SessionConfig(host="h", nick="n", channel="#r", no_colors=True)

        lines = render(parse_event("issues", payload), config)

        assert [strip_formatting(line) for line in lines] == lines

    @given(st.text(max_size=800))
    def test_rendered_issue_is_one_line_ending_in_its_link(self, title):
        """Property: any title gives one line, within the limit, link intact."""
        payload = issues_payload()
        payload["issue"]["title"] = title
        config = SessionConfig(host="h", nick="n", channel="#r")

        lines = render(parse_event("issues", payload), config)

        assert len(lines) == 1
        assert len(lines[0].encode("utf-8")) <= MAX_LINE_BYTES
        assert not any(ch in lines[0] for ch in "\r\n\0")
        assert lines[0].endswith(fmt_url(f"{REPO_URL}/issues/5"))

    @given(st.integers(min_value=1, max_value=65535), st.booleans())
    def test_explicit_port_is_kept(self, port, use_ssl):
        """Property: any valid explicit port wins over the SSL default."""
        assert resolve_port(port, use_ssl) == port
        assert resolve_port(str(port), use_ssl) == port

    @settings(max_examples=25)
    @given(SECRETS, SECRETS, SECRETS)
    def test_secrets_never_reach_the_transcript(self, password, nickserv_password, key):
        """Property: passwords and channel keys are sent but never recorded."""
        transport = MemoryTransport()
        config = SessionConfig(
            host="irc.example.net",
            nick="n",
            channel="#r",
            password=password,
            nickserv_password=nickserv_password,
            channel_key=key,
        )
        session = IRCSession(config, parse_event("push", push_payload()), connect=connect_to(transport))

        transcript = asyncio.run(session.run())

        for secret in (password, nickserv_password, key):
            assert secret in transport.written
            assert secret not in transcript
