"""
Remote metadata client for repository hosting services and plain URLs.

The client is the only place where audit checks touch the network. Every
method returns a value or an explicit "absent" outcome (None, or a failed
FetchResult); network errors, timeouts and unexpected HTTP statuses are
logged and never raised to callers.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiohttp

from caskaudit.remote.backoff import BackoffConfig, BackoffState, compute_backoff_delay
from caskaudit.remote.types import (
    BROWSER,
    BROWSER_USER_AGENT,
    ClientConfig,
    FetchResult,
    ReleaseMetadata,
    RemoteRepoMetadata,
    RepoHost,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Default timeout for release feed fetches
FEED_TIMEOUT_S = 5.0


class RemoteMetadataClient(ABC):
    """Interface used by online audit checks."""

    @abstractmethod
    async def github_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        """Repository metadata from GitHub, or None if unavailable."""
        ...

    @abstractmethod
    async def gitlab_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        """Repository metadata from GitLab, or None if unavailable."""
        ...

    @abstractmethod
    async def bitbucket_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        """Repository metadata from Bitbucket, or None if unavailable."""
        ...

    @abstractmethod
    async def github_release_data(self, owner: str, repo: str, tag: str) -> ReleaseMetadata | None:
        """GitHub release for ``tag``, or None if unavailable."""
        ...

    @abstractmethod
    async def gitlab_release_data(self, owner: str, repo: str, tag: str) -> ReleaseMetadata | None:
        """GitLab release for ``tag``, or None if unavailable."""
        ...

    @abstractmethod
    async def fetch_url_content(
        self,
        url: str,
        *,
        timeout_s: float = FEED_TIMEOUT_S,
        user_agent: str | None = None,
        max_redirects: int | None = None,
    ) -> FetchResult:
        """Fetch URL content, following redirects up to ``max_redirects``."""
        ...

    @abstractmethod
    async def check_reachability(
        self,
        url: str,
        *,
        check_content: bool = False,
        user_agents: Sequence[str | None] | None = None,
    ) -> str | None:
        """Probe ``url`` for secure reachability.

        Returns:
            A problem description, or None when the URL is fine.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the client."""
        return None

    async def repo_metadata(
        self, host: RepoHost, owner: str, repo: str
    ) -> RemoteRepoMetadata | None:
        """Dispatch to the host-specific repository lookup."""
        if host == RepoHost.GITHUB:
            return await self.github_repo_data(owner, repo)
        if host == RepoHost.GITLAB:
            return await self.gitlab_repo_data(owner, repo)
        return await self.bitbucket_repo_data(owner, repo)

    async def is_archived(self, host: RepoHost, owner: str, repo: str) -> bool | None:
        """Archival state, or None when metadata is unavailable."""
        metadata = await self.repo_metadata(host, owner, repo)
        if metadata is None:
            return None
        return metadata.archived

    async def release_info(
        self, host: RepoHost, owner: str, repo: str, tag: str
    ) -> ReleaseMetadata | None:
        """Release metadata for ``tag``; Bitbucket has no releases."""
        if host == RepoHost.GITHUB:
            return await self.github_release_data(owner, repo, tag)
        if host == RepoHost.GITLAB:
            return await self.gitlab_release_data(owner, repo, tag)
        return None


class HttpRemoteMetadataClient(RemoteMetadataClient):
    """
    aiohttp-backed implementation of RemoteMetadataClient.

    API requests retry on 429/5xx and connection errors with exponential
    backoff; 404 and other client errors resolve to None immediately.

    Usage:
        client = HttpRemoteMetadataClient(ClientConfig())
        try:
            meta = await client.github_repo_data("owner", "repo")
        finally:
            await client.close()
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration. Uses defaults if not provided.
        """
        self._config = config or ClientConfig()
        self._backoff_config = BackoffConfig(max_retries=self._config.max_retries)
        self._session: aiohttp.ClientSession | None = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout_s)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self._config.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _get_json(self, url: str, headers: dict[str, str] | None = None) -> Any | None:
        """
        GET a JSON document with retry.

        Returns:
            Decoded JSON, or None on 4xx, exhausted retries or undecodable body.
        """
        state = BackoffState()
        retry_after_ms: int | None = None

        while True:
            delay_ms = compute_backoff_delay(self._backoff_config, state, retry_after_ms)
            if delay_ms > 0:
                logger.debug(
                    "Backing off before request",
                    extra={"delay_ms": delay_ms, "attempt": state.attempt},
                )
                await asyncio.sleep(delay_ms / 1000)

            try:
                session = await self._get_session()
                async with session.request("GET", url, headers=headers) as response:
                    if response.status == 429 or response.status >= 500:
                        retry_after_ms = None
                        if "Retry-After" in response.headers:
                            with contextlib.suppress(ValueError):
                                retry_after_ms = int(response.headers["Retry-After"]) * 1000
                        state.record_error()
                        logger.warning(
                            "Retryable HTTP status",
                            extra={"url": url, "status": response.status, "attempt": state.attempt},
                        )
                        if state.exhausted(self._backoff_config):
                            return None
                        continue

                    if response.status == 404:
                        logger.debug("Remote resource not found", extra={"url": url})
                        return None

                    if response.status >= 400:
                        logger.warning(
                            "HTTP error",
                            extra={"url": url, "status": response.status},
                        )
                        return None

                    return await response.json(content_type=None)

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                state.record_error()
                logger.warning(
                    "Request failed",
                    extra={"url": url, "error": str(e), "attempt": state.attempt},
                )
                if state.exhausted(self._backoff_config):
                    return None
            except ValueError as e:
                logger.warning("Undecodable JSON response", extra={"url": url, "error": str(e)})
                return None

    def _github_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._config.github_token:
            headers["Authorization"] = f"Bearer {self._config.github_token}"
        return headers

    def _gitlab_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._config.gitlab_token:
            headers["PRIVATE-TOKEN"] = self._config.gitlab_token
        return headers

    def _gitlab_project_url(self, owner: str, repo: str) -> str:
        project = quote(f"{owner}/{repo}", safe="")
        return f"{self._config.gitlab_api_url}/projects/{project}"

    async def github_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        data = await self._get_json(
            f"{self._config.github_api_url}/repos/{owner}/{repo}",
            headers=self._github_headers(),
        )
        if not isinstance(data, dict):
            return None
        return RemoteRepoMetadata.from_github(owner, repo, data)

    async def gitlab_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        data = await self._get_json(
            self._gitlab_project_url(owner, repo),
            headers=self._gitlab_headers(),
        )
        if not isinstance(data, dict):
            return None
        return RemoteRepoMetadata.from_gitlab(owner, repo, data)

    async def bitbucket_repo_data(self, owner: str, repo: str) -> RemoteRepoMetadata | None:
        base = f"{self._config.bitbucket_api_url}/repositories/{owner}/{repo}"
        data = await self._get_json(base)
        if not isinstance(data, dict):
            return None

        forks = await self._get_json(f"{base}/forks?pagelen=1")
        watchers = await self._get_json(f"{base}/watchers?pagelen=1")
        return RemoteRepoMetadata.from_bitbucket(
            owner,
            repo,
            data,
            forks=_page_size(forks),
            watchers=_page_size(watchers),
        )

    async def github_release_data(self, owner: str, repo: str, tag: str) -> ReleaseMetadata | None:
        data = await self._get_json(
            f"{self._config.github_api_url}/repos/{owner}/{repo}/releases/tags/{quote(tag, safe='')}",
            headers=self._github_headers(),
        )
        if not isinstance(data, dict):
            return None
        return ReleaseMetadata.from_github(data)

    async def gitlab_release_data(self, owner: str, repo: str, tag: str) -> ReleaseMetadata | None:
        data = await self._get_json(
            f"{self._gitlab_project_url(owner, repo)}/releases/{quote(tag, safe='')}",
            headers=self._gitlab_headers(),
        )
        if not isinstance(data, dict):
            return None
        return ReleaseMetadata.from_gitlab(data)

    async def fetch_url_content(
        self,
        url: str,
        *,
        timeout_s: float = FEED_TIMEOUT_S,
        user_agent: str | None = None,
        max_redirects: int | None = None,
    ) -> FetchResult:
        headers = {"User-Agent": _resolve_user_agent(user_agent, self._config.user_agent)}
        redirects = self._config.max_redirects if max_redirects is None else max_redirects

        try:
            session = await self._get_session()
            async with session.request(
                "GET",
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout_s),
                allow_redirects=True,
                max_redirects=redirects,
            ) as response:
                final_url = str(response.url)
                if response.status >= 400:
                    logger.info(
                        "URL fetch returned error status",
                        extra={"url": url, "status": response.status},
                    )
                    return FetchResult(
                        url=url,
                        ok=False,
                        status=response.status,
                        final_url=final_url,
                        error=f"HTTP status code {response.status}",
                    )
                content = await response.text(errors="replace")
                return FetchResult(
                    url=url,
                    ok=True,
                    content=content,
                    status=response.status,
                    final_url=final_url,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("URL fetch failed", extra={"url": url, "error": str(e)})
            return FetchResult(url=url, ok=False, error=str(e) or type(e).__name__)

    async def _probe(self, url: str, user_agents: Sequence[str | None]) -> FetchResult:
        """Fetch ``url`` with each user agent until one succeeds."""
        result = FetchResult(url=url, ok=False, error="no user agents")
        for user_agent in user_agents:
            result = await self.fetch_url_content(
                url,
                timeout_s=self._config.request_timeout_s,
                user_agent=user_agent,
            )
            if result.ok:
                return result
        return result

    async def check_reachability(
        self,
        url: str,
        *,
        check_content: bool = False,
        user_agents: Sequence[str | None] | None = None,
    ) -> str | None:
        agents: Sequence[str | None] = user_agents or (None,)

        details = await self._probe(url, agents)
        if not details.ok:
            if details.status is not None:
                return f"The URL {url} is not reachable (HTTP status code {details.status})"
            return f"The URL {url} is not reachable"

        if url.startswith("http://"):
            secure_url = "https://" + url[len("http://") :]
            secure = await self._probe(secure_url, agents)
            if secure.ok:
                if not check_content:
                    return (
                        f"The URL {url} may be able to use HTTPS rather than HTTP. "
                        "Please verify it in a browser."
                    )
                if _comparable(details.content) == _comparable(secure.content):
                    return f"The URL {url} should use HTTPS rather than HTTP"
            return None

        if (
            check_content
            and details.final_url is not None
            and details.final_url.startswith("http://")
        ):
            return f"The URL {url} redirects back to HTTP"

        return None


def _resolve_user_agent(user_agent: str | None, default: str) -> str:
    if user_agent is None:
        return default
    if user_agent == BROWSER:
        return BROWSER_USER_AGENT
    return user_agent


def _comparable(content: str) -> str:
    """Normalize scheme mentions so HTTP and HTTPS bodies compare equal."""
    return content.replace("https://", "http://").strip()


def _page_size(payload: Any) -> int | None:
    if isinstance(payload, dict):
        size = payload.get("size")
        if isinstance(size, int) and not isinstance(size, bool):
            return size
    return None
