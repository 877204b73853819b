"""
Remote repository checks for GitHub, GitLab and Bitbucket hosted casks.

Only run with online checks enabled and a remote client available. The
repository is located from the source URL, then the homepage, then the
release feed. Unavailable remote data makes a check a no-op.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic
from caskaudit.remote.repo import repo_data
from caskaudit.remote.types import RemoteRepoMetadata, RepoHost

if TYPE_CHECKING:
    from caskaudit.audit.context import AuditContext

logger = logging.getLogger(__name__)

# New-submission notability thresholds
MIN_FORKS = 30
MIN_WATCHERS = 30
MIN_STARS = 75
MIN_REPO_AGE = timedelta(days=30)


def _online_repo(context: AuditContext, host: RepoHost) -> tuple[str, str] | None:
    if not context.config.online or context.client is None:
        return None
    return repo_data(context.manifest, host.pattern)


def _release_tag(context: AuditContext) -> str | None:
    version = context.manifest.version
    if version is None or version.latest or not version.raw:
        return None
    return version.raw


def _below(value: int | None, threshold: int) -> bool:
    return value is not None and value < threshold


def notability_problem(metadata: RemoteRepoMetadata, now: datetime) -> str | None:
    """
    Vet a repository for a first-time submission.

    Returns:
        The first problem found, or None.
    """
    name = metadata.host.display_name

    if metadata.host == RepoHost.BITBUCKET and metadata.scm == "hg":
        return "Uses deprecated mercurial support in Bitbucket"

    if metadata.fork:
        return f"{name} fork (not canonical repository)"

    if metadata.host == RepoHost.GITHUB:
        if (
            _below(metadata.forks, MIN_FORKS)
            and _below(metadata.watchers, MIN_WATCHERS)
            and _below(metadata.stars, MIN_STARS)
        ):
            return (
                f"{name} repository not notable enough "
                f"(<{MIN_FORKS} forks, <{MIN_WATCHERS} watchers and <{MIN_STARS} stars)"
            )
    elif metadata.host == RepoHost.GITLAB:
        if _below(metadata.forks, MIN_FORKS) and _below(metadata.stars, MIN_STARS):
            return f"{name} repository not notable enough (<{MIN_FORKS} forks and <{MIN_STARS} stars)"
    elif _below(metadata.forks, MIN_FORKS) and _below(metadata.watchers, MIN_STARS):
        return f"{name} repository not notable enough (<{MIN_FORKS} forks and <{MIN_STARS} watchers)"

    created_at = metadata.created_at
    if created_at is not None:
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        if created_at > now - MIN_REPO_AGE:
            return f"{name} repository too new (<{MIN_REPO_AGE.days} days old)"

    return None


async def _vet_repository(context: AuditContext, host: RepoHost) -> list[Diagnostic]:
    if not context.config.new_cask:
        return []
    coordinates = _online_repo(context, host)
    if coordinates is None or context.client is None:
        return []

    owner, repo = coordinates
    logger.debug(
        "Auditing repository",
        extra={"cask": context.token, "host": host.value, "owner": owner, "repo": repo},
    )
    metadata = await context.client.repo_metadata(host, owner, repo)
    if metadata is None:
        return []

    problem = notability_problem(metadata, context.now())
    return [Diagnostic.error(problem)] if problem else []


async def _check_archived(context: AuditContext, host: RepoHost) -> list[Diagnostic]:
    coordinates = _online_repo(context, host)
    if coordinates is None or context.client is None:
        return []

    owner, repo = coordinates
    logger.debug(
        "Auditing repository archived",
        extra={"cask": context.token, "host": host.value, "owner": owner, "repo": repo},
    )
    archived = await context.client.is_archived(host, owner, repo)
    if archived:
        return [Diagnostic.error(f"{host.display_name} repo is archived")]
    return []


async def _check_prerelease(context: AuditContext, host: RepoHost) -> list[Diagnostic]:
    if context.manifest.in_versions_tap:
        return []
    coordinates = _online_repo(context, host)
    if coordinates is None or context.client is None:
        return []
    tag = _release_tag(context)
    if tag is None:
        return []

    owner, repo = coordinates
    logger.debug(
        "Auditing prerelease",
        extra={"cask": context.token, "host": host.value, "owner": owner, "repo": repo},
    )
    release = await context.client.release_info(host, owner, repo, tag)
    if release is None:
        return []

    if release.draft:
        return [Diagnostic.error(f"{tag} is a {host.display_name} draft")]
    if release.is_prerelease(context.now().date()):
        return [Diagnostic.error(f"{tag} is a {host.display_name} prerelease")]
    return []


async def check_gitlab_repository(context: AuditContext) -> list[Diagnostic]:
    return await _vet_repository(context, RepoHost.GITLAB)


async def check_gitlab_repository_archived(context: AuditContext) -> list[Diagnostic]:
    return await _check_archived(context, RepoHost.GITLAB)


async def check_gitlab_prerelease_version(context: AuditContext) -> list[Diagnostic]:
    return await _check_prerelease(context, RepoHost.GITLAB)


async def check_github_repository(context: AuditContext) -> list[Diagnostic]:
    return await _vet_repository(context, RepoHost.GITHUB)


async def check_github_repository_archived(context: AuditContext) -> list[Diagnostic]:
    return await _check_archived(context, RepoHost.GITHUB)


async def check_github_prerelease_version(context: AuditContext) -> list[Diagnostic]:
    return await _check_prerelease(context, RepoHost.GITHUB)


async def check_bitbucket_repository(context: AuditContext) -> list[Diagnostic]:
    return await _vet_repository(context, RepoHost.BITBUCKET)
