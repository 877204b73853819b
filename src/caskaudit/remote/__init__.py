"""
Remote metadata access for online audit checks.

Wraps the hosting-service APIs (GitHub, GitLab, Bitbucket) and plain URL
fetches behind RemoteMetadataClient. Failures degrade to absent values.
"""

from caskaudit.remote.backoff import BackoffConfig, BackoffState, compute_backoff_delay
from caskaudit.remote.client import (
    FEED_TIMEOUT_S,
    HttpRemoteMetadataClient,
    RemoteMetadataClient,
)
from caskaudit.remote.repo import extract_repo, repo_data
from caskaudit.remote.types import (
    BROWSER,
    BROWSER_USER_AGENT,
    ClientConfig,
    FetchResult,
    ReleaseMetadata,
    RemoteRepoMetadata,
    RepoHost,
)

__all__ = [
    "BROWSER",
    "BROWSER_USER_AGENT",
    "FEED_TIMEOUT_S",
    "BackoffConfig",
    "BackoffState",
    "ClientConfig",
    "FetchResult",
    "HttpRemoteMetadataClient",
    "ReleaseMetadata",
    "RemoteMetadataClient",
    "RemoteRepoMetadata",
    "RepoHost",
    "compute_backoff_delay",
    "extract_repo",
    "repo_data",
]
