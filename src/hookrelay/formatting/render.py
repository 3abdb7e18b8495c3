"""Render repository events into IRC channel lines.

Rendering is pure: the same event, config and link map always give the same
lines. Shortened links are resolved beforehand and passed in as ``links``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from hookrelay.core.errors import RenderError
from hookrelay.events import (
    CommitComment,
    Event,
    Issue,
    IssueComment,
    PullRequest,
    PullRequestReviewComment,
    Push,
    WikiEdit,
    first_line,
    short_ref,
)
from hookrelay.formatting.colors import (
    fmt_branch,
    fmt_deleted,
    fmt_forced,
    fmt_hash,
    fmt_name,
    fmt_repo,
    fmt_tag,
    fmt_url,
    strip_formatting,
)
from hookrelay.formatting.irc_line import MAX_LINE_BYTES, flatten_line, truncate_irc_line

if TYPE_CHECKING:
    from hookrelay.config import SessionConfig

# Commit lines listed under a push summary
MAX_PUSH_COMMITS = 3


def branch_matches(branch: str, branch_filter: Iterable[str]) -> bool:
    """Empty filter allows every branch."""
    allowed = frozenset(branch_filter)
    return not allowed or branch in allowed


def event_links(event: Event | None) -> list[str]:
    """Long URLs that rendering ``event`` will reference."""
    if event is None:
        return []
    if isinstance(event, (Push, WikiEdit)):
        url = event.summary_url
    else:
        url = event.url
    return [url] if url else []


def render(
    event: Event | None,
    config: SessionConfig,
    links: Mapping[str, str] | None = None,
) -> list[str]:
    """Lines to send for ``event``, in send order. None renders nothing."""
    if event is None:
        return []
    lines = _render_event(event, config, links or {})
    if config.no_colors:
        lines = [strip_formatting(line) for line in lines]
    return [truncate_irc_line(flatten_line(line)) for line in lines]


def _render_event(event: Event, config: SessionConfig, links: Mapping[str, str]) -> list[str]:
    if isinstance(event, Push):
        if not branch_matches(event.branch, config.branch_filter):
            return []
        return _render_push(event, links)
    if isinstance(event, CommitComment):
        return [
            _fit(
                f"[{fmt_repo(event.repository.name)}] {fmt_name(event.actor)} comment on commit "
                f"{fmt_hash(event.commit_id[:7])}: ",
                first_line(event.body),
                f" {_link(links, event.url)}",
            )
        ]
    if isinstance(event, PullRequest):
        return [
            _fit(
                f"[{fmt_repo(event.repository.name)}] {fmt_name(event.actor)} {event.action} "
                f"pull request #{event.number}: ",
                event.title,
                f" ({fmt_branch(event.base_ref)}...{fmt_branch(event.head_ref)}) "
                f"{_link(links, event.url)}",
            )
        ]
    if isinstance(event, Issue):
        return [
            _fit(
                f"[{fmt_repo(event.repository.name)}] {fmt_name(event.actor)} {event.action} issue "
                f"#{event.number}: ",
                event.title,
                f" {_link(links, event.url)}",
            )
        ]
    if isinstance(event, IssueComment):
        return [
            _fit(
                f"[{fmt_repo(event.repository.name)}] {fmt_name(event.actor)} comment on issue "
                f"#{event.number}: ",
                first_line(event.body),
                f" {_link(links, event.url)}",
            )
        ]
    if isinstance(event, PullRequestReviewComment):
        return [
            _fit(
                f"[{fmt_repo(event.repository.name)}] {fmt_name(event.actor)} comment on pull request "
                f"#{event.pull_number} {fmt_hash(event.commit_id[:7])}: ",
                first_line(event.body),
                f" {_link(links, event.url)}",
            )
        ]
    if isinstance(event, WikiEdit):
        return [_render_wiki(event, links)]
    raise RenderError(
        f"Unsupported event type: {type(event).__name__}",
        code="unsupported_event",
    )


def _link(links: Mapping[str, str], url: str) -> str:
    return fmt_url(links.get(url) or url)


def _fit(head: str, text: str, tail: str = "") -> str:
    """head + text + tail within the line limit; only the free text gets cut."""
    room = MAX_LINE_BYTES - len(head.encode("utf-8", errors="replace")) - len(
        tail.encode("utf-8", errors="replace")
    )
    return f"{head}{truncate_irc_line(text, max(room, 0))}{tail}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _render_push(push: Push, links: Mapping[str, str]) -> list[str]:
    distinct = push.distinct_commits
    repo = push.repository.name
    parts = [f"[{fmt_repo(repo)}] {fmt_name(push.pusher)}"]

    if push.created:
        if push.is_tag:
            parts.append(f"tagged {fmt_tag(push.branch)} at")
            if push.base_ref:
                parts.append(fmt_branch(short_ref(push.base_ref)))
            else:
                parts.append(fmt_hash(push.after[:7]))
        else:
            parts.append(f"created {fmt_branch(push.branch)}")
            if push.base_ref:
                parts.append(f"from {fmt_branch(short_ref(push.base_ref))}")
            elif not distinct:
                parts.append(f"at {fmt_hash(push.after[:7])}")
            parts.append(f"(+{_plural(len(distinct), 'new commit')})")
    elif push.deleted:
        parts.append(
            f"{fmt_deleted('deleted')} {fmt_branch(push.branch)} at {fmt_hash(push.before[:7])}"
        )
    elif push.forced:
        parts.append(
            f"{fmt_forced('force-pushed')} {fmt_branch(push.branch)} from "
            f"{fmt_hash(push.before[:7])} to {fmt_hash(push.after[:7])}"
        )
    elif push.commits and not distinct:
        if push.base_ref:
            parts.append(
                f"merged {fmt_branch(short_ref(push.base_ref))} into {fmt_branch(push.branch)}"
            )
        else:
            parts.append(
                f"fast-forwarded {fmt_branch(push.branch)} from "
                f"{fmt_hash(push.before[:7])} to {fmt_hash(push.after[:7])}"
            )
    else:
        parts.append(f"pushed {_plural(len(distinct), 'new commit')} to {fmt_branch(push.branch)}")

    lines = [f"{' '.join(parts)}: {_link(links, push.summary_url)}"]
    for commit in distinct[:MAX_PUSH_COMMITS]:
        lines.append(
            _fit(
                f"{fmt_repo(repo)}/{fmt_branch(push.branch)} {fmt_hash(commit.id[:7])} "
                f"{fmt_name(commit.author)}: ",
                first_line(commit.message),
            )
        )
    return lines


def _render_wiki(wiki: WikiEdit, links: Mapping[str, str]) -> str:
    # Plain prefix; only the link is colored
    prefix = f"[{wiki.repository.name}] {wiki.actor}"
    link = _link(links, wiki.summary_url)
    if len(wiki.pages) == 1:
        page = wiki.pages[0]
        return _fit(f"{prefix} {page.action} wiki page ", page.title, f": {link}")
    counts = Counter(page.action for page in wiki.pages)
    actions = ", ".join(f"{action} {count}" for action, count in counts.items())
    return f"{prefix} {actions} wiki pages: {link}"
