"""Repository coordinate extraction from manifest URLs."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caskaudit.contracts.manifest import ManifestDescriptor

_GIT_SUFFIX = re.compile(r"\.git\Z")


def extract_repo(pattern: re.Pattern[str], *urls: str | None) -> tuple[str, str] | None:
    """
    Find (owner, repo) in the first URL matching ``pattern``.

    URLs are tried in order; a trailing ``.git`` is stripped from the repo.

    Args:
        pattern: Regex with two groups capturing owner and repo.
        urls: Candidate URLs; None and empty entries are skipped.

    Returns:
        (owner, repo) or None when no URL matches.
    """
    for url in urls:
        if not url:
            continue
        match = pattern.match(url)
        if match is None:
            continue
        owner, repo = match.group(1), match.group(2)
        if not owner or not repo:
            continue
        return owner, _GIT_SUFFIX.sub("", repo)
    return None


def repo_data(manifest: ManifestDescriptor, pattern: re.Pattern[str]) -> tuple[str, str] | None:
    """Try the source URL, then the homepage, then the release feed."""
    return extract_repo(
        pattern,
        str(manifest.url) if manifest.url else None,
        manifest.homepage,
        str(manifest.appcast) if manifest.appcast else None,
    )
