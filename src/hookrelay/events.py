"""Event types and payload parsing (one frozen dataclass per webhook kind)."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Union

from hookrelay.core.errors import RenderError

_REF_PREFIXES = ("refs/heads/", "refs/tags/")


def short_ref(ref: str) -> str:
    """Strip refs/heads/ or refs/tags/ from a git ref."""
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def first_line(text: str) -> str:
    """First line of a message, with '...' appended when anything was cut."""
    short = text.splitlines()[0] if text else ""
    if short != text:
        short += "..."
    return short


@dataclass(frozen=True)
class Repository:
    """Repository identity shared by every event."""

    owner: str
    name: str
    url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Commit:
    id: str
    message: str
    author: str
    url: str
    distinct: bool = True


@dataclass(frozen=True)
class Push:
    """Commits pushed to one ref."""

    repository: Repository
    pusher: str
    ref: str
    before: str
    after: str
    compare_url: str
    commits: tuple[Commit, ...] = ()
    created: bool = False
    deleted: bool = False
    forced: bool = False
    base_ref: str | None = None

    @property
    def branch(self) -> str:
        return short_ref(self.ref)

    @property
    def is_tag(self) -> bool:
        return self.ref.startswith("refs/tags/")

    @property
    def distinct_commits(self) -> tuple[Commit, ...]:
        return tuple(c for c in self.commits if c.distinct)

    @property
    def summary_url(self) -> str:
        """URL that best describes the push as a whole."""
        if self.created:
            if not self.distinct_commits:
                return f"{self.repository.url}/commits/{self.branch}"
            return self.compare_url
        if self.deleted:
            return f"{self.repository.url}/commit/{self.before}"
        if self.forced:
            return f"{self.repository.url}/commits/{self.branch}"
        if len(self.distinct_commits) == 1:
            return self.distinct_commits[0].url
        return self.compare_url


@dataclass(frozen=True)
class CommitComment:
    repository: Repository
    actor: str
    commit_id: str
    body: str
    url: str


@dataclass(frozen=True)
class PullRequest:
    repository: Repository
    actor: str
    action: str
    number: int
    title: str
    base_ref: str
    head_ref: str
    url: str


@dataclass(frozen=True)
class Issue:
    repository: Repository
    actor: str
    action: str
    number: int
    title: str
    url: str


@dataclass(frozen=True)
class IssueComment:
    repository: Repository
    actor: str
    number: int
    body: str
    url: str


@dataclass(frozen=True)
class PullRequestReviewComment:
    repository: Repository
    actor: str
    pull_number: int
    commit_id: str
    body: str
    url: str


@dataclass(frozen=True)
class WikiPage:
    action: str
    title: str
    url: str


@dataclass(frozen=True)
class WikiEdit:
    repository: Repository
    actor: str
    pages: tuple[WikiPage, ...]

    @property
    def summary_url(self) -> str:
        if len(self.pages) == 1:
            return self.pages[0].url
        return f"{self.repository.url}/wiki"


Event = Union[
    Push,
    CommitComment,
    PullRequest,
    Issue,
    IssueComment,
    PullRequestReviewComment,
    WikiEdit,
]

_PARSERS: dict[str, Callable[[dict[str, Any]], Event]] = {}


def event(type_name: str):
    """Decorator registering a payload parser for a webhook event name."""

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(payload: dict[str, Any]) -> Event:
            return f(payload)

        wrapper.TYPE = type_name
        _PARSERS[type_name] = wrapper
        return wrapper

    return decorator


def parse_event(kind: str, payload: dict[str, Any]) -> Event:
    """Build the event for a webhook payload. Raises RenderError when it can't."""
    parser = _PARSERS.get(kind)
    if parser is None:
        raise RenderError(
            f"Unsupported event kind: {kind}",
            code="unsupported_event",
            details={"kind": kind},
        )
    if not isinstance(payload, dict):
        raise RenderError(
            f"{kind} payload must be an object",
            code="malformed_payload",
            details={"kind": kind, "type": type(payload).__name__},
        )
    try:
        return parser(payload)
    except (KeyError, TypeError, ValueError, AttributeError, IndexError) as exc:
        raise RenderError(
            f"Malformed {kind} payload: {exc!r}",
            code="malformed_payload",
            details={"kind": kind},
            original_error=exc,
        ) from exc


def _repository(payload: dict[str, Any]) -> Repository:
    repo = payload["repository"]
    owner = repo["owner"]
    # Push payloads name the owner with "name", the rest with "login"
    owner_name = owner.get("login") or owner["name"]
    url = repo.get("html_url") or repo["url"]
    return Repository(owner=str(owner_name), name=str(repo["name"]), url=str(url))


def _sender(payload: dict[str, Any]) -> str:
    return str(payload["sender"]["login"])


@event("push")
def push(payload: dict[str, Any]) -> Push:
    pusher = payload.get("pusher") or {}
    pusher_name = pusher.get("name") or _sender(payload)
    commits = tuple(
        Commit(
            id=str(c["id"]),
            message=str(c["message"]),
            author=str(c["author"]["name"]),
            url=str(c["url"]),
            distinct=bool(c.get("distinct", True)),
        )
        for c in payload.get("commits") or []
    )
    base_ref = payload.get("base_ref")
    return Push(
        repository=_repository(payload),
        pusher=str(pusher_name),
        ref=str(payload["ref"]),
        before=str(payload["before"]),
        after=str(payload["after"]),
        compare_url=str(payload.get("compare") or ""),
        commits=commits,
        created=bool(payload.get("created", False)),
        deleted=bool(payload.get("deleted", False)),
        forced=bool(payload.get("forced", False)),
        base_ref=str(base_ref) if base_ref else None,
    )


@event("commit_comment")
def commit_comment(payload: dict[str, Any]) -> CommitComment:
    comment = payload["comment"]
    return CommitComment(
        repository=_repository(payload),
        actor=_sender(payload),
        commit_id=str(comment["commit_id"]),
        body=str(comment["body"]),
        url=str(comment["html_url"]),
    )


@event("pull_request")
def pull_request(payload: dict[str, Any]) -> PullRequest:
    pull = payload["pull_request"]
    base_ref = str(pull["base"]["label"]).split(":")[-1]
    head_label = str(pull["head"]["label"])
    head_ref = head_label.split(":")[-1]
    return PullRequest(
        repository=_repository(payload),
        actor=_sender(payload),
        action=str(payload["action"]),
        number=int(pull["number"]),
        title=str(pull["title"]),
        base_ref=base_ref,
        # Same branch name on both sides means a fork; keep the owner prefix
        head_ref=head_ref if head_ref != base_ref else head_label,
        url=str(pull["html_url"]),
    )


@event("issues")
def issues(payload: dict[str, Any]) -> Issue:
    issue = payload["issue"]
    return Issue(
        repository=_repository(payload),
        actor=_sender(payload),
        action=str(payload["action"]),
        number=int(issue["number"]),
        title=str(issue["title"]),
        url=str(issue["html_url"]),
    )


@event("issue_comment")
def issue_comment(payload: dict[str, Any]) -> IssueComment:
    comment = payload["comment"]
    return IssueComment(
        repository=_repository(payload),
        actor=_sender(payload),
        number=int(payload["issue"]["number"]),
        body=str(comment["body"]),
        url=str(comment["html_url"]),
    )


@event("pull_request_review_comment")
def pull_request_review_comment(payload: dict[str, Any]) -> PullRequestReviewComment:
    comment = payload["comment"]
    pull = payload.get("pull_request")
    if pull and "number" in pull:
        number = int(pull["number"])
    else:
        number = int(str(comment["pull_request_url"]).rstrip("/").rsplit("/", 1)[-1])
    return PullRequestReviewComment(
        repository=_repository(payload),
        actor=_sender(payload),
        pull_number=number,
        commit_id=str(comment["commit_id"]),
        body=str(comment["body"]),
        url=str(comment["html_url"]),
    )


@event("gollum")
def gollum(payload: dict[str, Any]) -> WikiEdit:
    pages = tuple(
        WikiPage(action=str(p["action"]), title=str(p["title"]), url=str(p["html_url"]))
        for p in payload["pages"]
    )
    if not pages:
        raise ValueError("gollum payload has no pages")
    return WikiEdit(repository=_repository(payload), actor=_sender(payload), pages=pages)
