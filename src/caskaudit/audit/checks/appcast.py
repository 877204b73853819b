"""Release feed (appcast) content check."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic
from caskaudit.contracts.manifest import NO_CHECK
from caskaudit.remote.client import FEED_TIMEOUT_S
from caskaudit.remote.types import BROWSER_USER_AGENT

if TYPE_CHECKING:
    from caskaudit.audit.context import AuditContext
    from caskaudit.contracts.manifest import ManifestDescriptor

logger = logging.getLogger(__name__)

LEADING_VERSION_PATTERN = re.compile(r"^[A-Za-z0-9.]+")


def expected_feed_version(manifest: ManifestDescriptor) -> str | None:
    """Version token the release feed must mention.

    The feed's ``must_contain`` override wins; otherwise the leading run of
    alphanumerics and periods of the declared version.
    """
    if manifest.appcast is not None and manifest.appcast.must_contain:
        return manifest.appcast.must_contain
    if manifest.version is None:
        return None
    match = LEADING_VERSION_PATTERN.match(str(manifest.version))
    return match.group(0) if match else None


async def check_appcast_contains_version(context: AuditContext) -> list[Diagnostic]:
    manifest = context.manifest
    appcast = manifest.appcast
    if not context.config.appcast:
        return []
    if appcast is None or not appcast.url:
        return []
    if appcast.must_contain == NO_CHECK:
        return []
    if context.client is None:
        logger.debug("No remote client, skipping appcast check", extra={"cask": manifest.token})
        return []

    result = await context.client.fetch_url_content(
        appcast.url,
        timeout_s=FEED_TIMEOUT_S,
        user_agent=BROWSER_USER_AGENT,
    )
    if not result.ok:
        return [Diagnostic.error(f"appcast at URL '{appcast.url}' offline or looping")]

    expected = expected_feed_version(manifest)
    if expected is None or expected in result.content:
        return []

    return [
        Diagnostic.warning(
            f"appcast at URL '{appcast.url}' does not contain"
            f" the version number '{expected}':\n{result.content}"
        )
    ]
