"""
Audit checks in execution order.

Each check takes an AuditContext and returns (or yields) diagnostics; online
checks are coroutines. DEFAULT_CHECKS order determines diagnostic order.
"""

from __future__ import annotations

from caskaudit.audit.checks.appcast import check_appcast_contains_version
from caskaudit.audit.checks.repository import (
    check_bitbucket_repository,
    check_github_prerelease_version,
    check_github_repository,
    check_github_repository_archived,
    check_gitlab_prerelease_version,
    check_gitlab_repository,
    check_gitlab_repository_archived,
)
from caskaudit.audit.checks.structural import (
    check_desc,
    check_generic_artifacts,
    check_languages,
    check_required_stanzas,
    check_single_pre_postflight,
    check_single_uninstall_zap,
    check_stanza_requires_uninstall,
    check_untrusted_pkg,
)
from caskaudit.audit.checks.token import (
    check_denylist,
    check_token_bad_words,
    check_token_conflicts,
    check_token_valid,
)
from caskaudit.audit.checks.transport import check_download, check_https_availability
from caskaudit.audit.checks.url import check_hosting_with_appcast, check_url
from caskaudit.audit.checks.version import (
    check_latest_with_appcast,
    check_latest_with_auto_updates,
    check_sha256,
    check_version,
)

DEFAULT_CHECKS = (
    check_denylist,
    check_required_stanzas,
    check_version,
    check_sha256,
    check_desc,
    check_url,
    check_generic_artifacts,
    check_token_valid,
    check_token_bad_words,
    check_token_conflicts,
    check_languages,
    check_download,
    check_https_availability,
    check_single_pre_postflight,
    check_single_uninstall_zap,
    check_untrusted_pkg,
    check_hosting_with_appcast,
    check_latest_with_appcast,
    check_latest_with_auto_updates,
    check_stanza_requires_uninstall,
    check_appcast_contains_version,
    check_gitlab_repository,
    check_gitlab_repository_archived,
    check_gitlab_prerelease_version,
    check_github_repository,
    check_github_repository_archived,
    check_github_prerelease_version,
    check_bitbucket_repository,
)

__all__ = [
    "DEFAULT_CHECKS",
    "check_appcast_contains_version",
    "check_bitbucket_repository",
    "check_denylist",
    "check_desc",
    "check_download",
    "check_generic_artifacts",
    "check_github_prerelease_version",
    "check_github_repository",
    "check_github_repository_archived",
    "check_gitlab_prerelease_version",
    "check_gitlab_repository",
    "check_gitlab_repository_archived",
    "check_hosting_with_appcast",
    "check_https_availability",
    "check_languages",
    "check_latest_with_appcast",
    "check_latest_with_auto_updates",
    "check_required_stanzas",
    "check_sha256",
    "check_single_pre_postflight",
    "check_single_uninstall_zap",
    "check_stanza_requires_uninstall",
    "check_token_bad_words",
    "check_token_conflicts",
    "check_token_valid",
    "check_untrusted_pkg",
    "check_url",
    "check_version",
]
