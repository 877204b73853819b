"""
Types and configuration for the remote metadata client.

Every remote lookup degrades to "absent" (None or a failed FetchResult) on
network or service failure; these types never carry exceptions.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

# Browser identity used for release feeds and homepages
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.0 Safari/605.1.15"
)

DEFAULT_USER_AGENT = "caskaudit/0.1.0"

# Placeholder accepted in user_agents meaning "use the browser identity"
BROWSER = "browser"


class RepoHost(str, Enum):
    """Source hosting services with repository metadata APIs."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def pattern(self) -> re.Pattern[str]:
        """URL pattern capturing (owner, repo)."""
        return REPO_PATTERNS[self]


_DISPLAY_NAMES: dict[RepoHost, str] = {
    RepoHost.GITHUB: "GitHub",
    RepoHost.GITLAB: "GitLab",
    RepoHost.BITBUCKET: "Bitbucket",
}

REPO_PATTERNS: dict[RepoHost, re.Pattern[str]] = {
    RepoHost.GITHUB: re.compile(r"https?://github\.com/([^/]+)/([^/]+)/?.*"),
    RepoHost.GITLAB: re.compile(r"https?://gitlab\.com/([^/]+)/([^/]+)/?.*"),
    RepoHost.BITBUCKET: re.compile(r"https?://bitbucket\.org/([^/]+)/([^/]+)/?.*"),
}


@dataclass
class ClientConfig:
    """Configuration for HttpRemoteMetadataClient."""

    github_api_url: str = "https://api.github.com"
    gitlab_api_url: str = "https://gitlab.com/api/v4"
    bitbucket_api_url: str = "https://api.bitbucket.org/2.0"

    github_token: str = ""  # From GITHUB_TOKEN env var
    gitlab_token: str = ""  # From GITLAB_TOKEN env var

    request_timeout_s: float = 10.0
    max_retries: int = 2
    max_redirects: int = 10
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.github_token:
            self.github_token = os.environ.get("GITHUB_TOKEN", "")
        if not self.gitlab_token:
            self.gitlab_token = os.environ.get("GITLAB_TOKEN", "")
        if self.request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be > 0, got {self.request_timeout_s}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {self.max_redirects}")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp from an API payload, or None."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class RemoteRepoMetadata:
    """
    Repository metadata from a hosting service.

    Attributes:
        host: Hosting service.
        owner: Repository owner.
        repo: Repository name.
        archived: Repository is read-only/archived.
        fork: Repository is a fork of another repository.
        default_remote: Browser URL of the repository.
        stars: Star count, if reported.
        watchers: Watcher/subscriber count, if reported.
        forks: Fork count, if reported.
        created_at: Creation timestamp, if reported.
        scm: Version control system (Bitbucket only).
    """

    host: RepoHost
    owner: str
    repo: str
    archived: bool = False
    fork: bool = False
    default_remote: str = ""
    stars: int | None = None
    watchers: int | None = None
    forks: int | None = None
    created_at: datetime | None = None
    scm: str | None = None

    @classmethod
    def from_github(cls, owner: str, repo: str, data: dict[str, Any]) -> RemoteRepoMetadata:
        return cls(
            host=RepoHost.GITHUB,
            owner=owner,
            repo=repo,
            archived=bool(data.get("archived", False)),
            fork=bool(data.get("fork", False)),
            default_remote=str(data.get("html_url", "")),
            stars=_as_int(data.get("stargazers_count")),
            watchers=_as_int(data.get("subscribers_count")),
            forks=_as_int(data.get("forks_count")),
            created_at=parse_timestamp(data.get("created_at")),
        )

    @classmethod
    def from_gitlab(cls, owner: str, repo: str, data: dict[str, Any]) -> RemoteRepoMetadata:
        return cls(
            host=RepoHost.GITLAB,
            owner=owner,
            repo=repo,
            archived=bool(data.get("archived", False)),
            fork="forked_from_project" in data,
            default_remote=str(data.get("web_url", "")),
            stars=_as_int(data.get("star_count")),
            forks=_as_int(data.get("forks_count")),
            created_at=parse_timestamp(data.get("created_at")),
        )

    @classmethod
    def from_bitbucket(
        cls,
        owner: str,
        repo: str,
        data: dict[str, Any],
        *,
        forks: int | None = None,
        watchers: int | None = None,
    ) -> RemoteRepoMetadata:
        links = data.get("links") or {}
        html = links.get("html") or {}
        return cls(
            host=RepoHost.BITBUCKET,
            owner=owner,
            repo=repo,
            fork="parent" in data,
            default_remote=str(html.get("href", "")),
            watchers=watchers,
            forks=forks,
            created_at=parse_timestamp(data.get("created_on")),
            scm=data.get("scm"),
        )


@dataclass(frozen=True)
class ReleaseMetadata:
    """
    Release metadata for one tag.

    Attributes:
        tag: Release tag name.
        prerelease: Release is flagged as a prerelease (or upcoming).
        draft: Release is an unpublished draft.
        released_at: Publication timestamp, if reported.
    """

    tag: str
    prerelease: bool = False
    draft: bool = False
    released_at: datetime | None = None

    @classmethod
    def from_github(cls, data: dict[str, Any]) -> ReleaseMetadata:
        return cls(
            tag=str(data.get("tag_name", "")),
            prerelease=bool(data.get("prerelease", False)),
            draft=bool(data.get("draft", False)),
            released_at=parse_timestamp(data.get("published_at")),
        )

    @classmethod
    def from_gitlab(cls, data: dict[str, Any]) -> ReleaseMetadata:
        return cls(
            tag=str(data.get("tag_name", "")),
            prerelease=bool(data.get("upcoming_release", False)),
            released_at=parse_timestamp(data.get("released_at")),
        )

    def is_prerelease(self, today: date) -> bool:
        """Flagged as prerelease, or scheduled for a date after ``today``."""
        if self.prerelease:
            return True
        return self.released_at is not None and self.released_at.date() > today


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching URL content."""

    url: str
    ok: bool
    content: str = ""
    status: int | None = None
    final_url: str | None = None
    error: str | None = None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None
