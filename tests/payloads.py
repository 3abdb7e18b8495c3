"""Sample webhook payloads for the mojombo/grit repository."""

from __future__ import annotations

from typing import Any

REPO_URL = "http://github.com/mojombo/grit"
COMPARE_URL = "http://github.com/mojombo/grit/compare/4c8124f...a47fd41"


def repository(name: str = "grit", owner_key: str = "login") -> dict[str, Any]:
    return {
        "name": name,
        "url": f"http://github.com/mojombo/{name}",
        "html_url": f"http://github.com/mojombo/{name}",
        "owner": {owner_key: "mojombo"},
    }


def sender() -> dict[str, Any]:
    return {"login": "defunkt"}


def push_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ref": "refs/heads/master",
        "before": "4c8124ffcf4039d292442eeccabdeca5af5c5017",
        "after": "a47fd41f3aa4610ea527dcc1669dfdb9c15c5425",
        "created": False,
        "deleted": False,
        "forced": False,
        "base_ref": None,
        "compare": COMPARE_URL,
        "pusher": {"name": "rtomayko"},
        "sender": sender(),
        "repository": repository(owner_key="name"),
        "commits": [
            {
                "id": "06f63b43050935962f84fe54473a7c5de7977325",
                "message": "stub git call for Grit#heads test",
                "author": {"name": "Tom Preston-Werner"},
                "url": f"{REPO_URL}/commit/06f63b43050935962f84fe54473a7c5de7977325",
                "distinct": True,
            },
            {
                "id": "5057e76a11abd02e83b7d3d3171c4b68d9c88480",
                "message": "clean up heads test",
                "author": {"name": "Tom Preston-Werner"},
                "url": f"{REPO_URL}/commit/5057e76a11abd02e83b7d3d3171c4b68d9c88480",
                "distinct": True,
            },
            {
                "id": "a47fd41f3aa4610ea527dcc1669dfdb9c15c5425",
                "message": "add more comments throughout\n\nand tidy the heads helper",
                "author": {"name": "Tom Preston-Werner"},
                "url": f"{REPO_URL}/commit/a47fd41f3aa4610ea527dcc1669dfdb9c15c5425",
                "distinct": True,
            },
        ],
    }
    payload.update(overrides)
    return payload


def commit_comment_payload() -> dict[str, Any]:
    return {
        "action": "created",
        "sender": sender(),
        "repository": repository(),
        "comment": {
            "commit_id": "441e5686a726b79bcdace639e4591a4e718b7f1e",
            "body": "this line looks off\r\nsee the other one too",
            "html_url": f"{REPO_URL}/commit/441e5686#commitcomment-3",
        },
    }


def pull_payload(action: str = "opened") -> dict[str, Any]:
    return {
        "action": action,
        "number": 5,
        "sender": sender(),
        "repository": repository(),
        "pull_request": {
            "number": 5,
            "title": "booya",
            "html_url": f"{REPO_URL}/pull/5",
            "base": {"label": "mojombo:master"},
            "head": {"label": "defunkt:feature"},
        },
    }


def issues_payload(action: str = "opened") -> dict[str, Any]:
    return {
        "action": action,
        "sender": sender(),
        "repository": repository(),
        "issue": {
            "number": 5,
            "title": "booya",
            "html_url": f"{REPO_URL}/issues/5",
        },
    }


def issue_comment_payload() -> dict[str, Any]:
    return {
        "action": "created",
        "sender": sender(),
        "repository": repository(),
        "issue": {"number": 5, "title": "booya", "html_url": f"{REPO_URL}/issues/5"},
        "comment": {
            "body": "i agree",
            "html_url": f"{REPO_URL}/issues/5#issuecomment-12",
        },
    }


def pull_request_review_comment_payload() -> dict[str, Any]:
    return {
        "action": "created",
        "sender": sender(),
        "repository": repository(),
        "comment": {
            "commit_id": "03af7b9bd4ec1d9ef13d0ffb1f0a2c6b8d7e3a21",
            "body": "very\r\ncool",
            "html_url": f"{REPO_URL}/pull/5#discussion_r1",
            "pull_request_url": "https://api.github.com/repos/mojombo/grit/pulls/5",
        },
    }


def gollum_payload(pages: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "sender": sender(),
        "repository": repository(),
        "pages": pages
        or [
            {
                "page_name": "Foo",
                "title": "Foo",
                "action": "created",
                "html_url": f"{REPO_URL}/wiki/Foo",
            }
        ],
    }
