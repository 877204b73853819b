"""
Download URL conventions and release-feed expectations.

Mirror networks have canonical URL shapes; anything else tends to break or
point at interstitial pages. Hosts with machine-readable releases should
carry an appcast so updates can be tracked.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from caskaudit.audit.context import AuditContext

logger = logging.getLogger(__name__)

DOCS_BASE = "https://github.com/Homebrew/homebrew-cask/blob/HEAD/doc/cask_language_reference/stanzas"
URL_DOCS = f"{DOCS_BASE}/url.md#sourceforgeosdn-urls"
APPCAST_DOCS = f"{DOCS_BASE}/appcast.md"

SOURCEFORGE_MARKER = re.compile(r"sourceforge")
SOURCEFORGE_FORMATS = (
    re.compile(r"^https://sourceforge\.net/projects/[^/]+/files/latest/download\Z"),
    re.compile(r"^https://downloads\.sourceforge\.net/(?!(project|sourceforge)/)"),
)

OSDN_MARKER = re.compile(r"osd")
OSDN_FORMATS = (re.compile(r"^https?://([^/]+.)?dl\.osdn\.jp/"),)

GITHUB_RELEASES = re.compile(r"github\.com/([^/]+)/([^/]+)/releases/download/(\S+)")
SOURCEFORGE_HOSTED = re.compile(r"sourceforge\.net/(\S+)")
DEVMATE_HOSTED = re.compile(r"dl\.devmate\.com/(\S+)")
HOCKEYAPP_HOSTED = re.compile(r"rink\.hockeyapp\.net/(\S+)")


def bad_url_format(url: str, marker: re.Pattern[str], formats: Sequence[re.Pattern[str]]) -> bool:
    """True when ``url`` belongs to a host but matches none of its formats."""
    if not marker.search(url):
        return False
    return not any(pattern.search(url) for pattern in formats)


def check_url(context: AuditContext) -> Iterator[Diagnostic]:
    url = context.manifest.url
    if url is None:
        return

    logger.debug("Auditing URL format", extra={"cask": context.token})
    if bad_url_format(url.value, SOURCEFORGE_MARKER, SOURCEFORGE_FORMATS):
        yield Diagnostic.warning(f"SourceForge URL format incorrect. See {URL_DOCS}")
    elif bad_url_format(url.value, OSDN_MARKER, OSDN_FORMATS):
        yield Diagnostic.warning(f"OSDN URL format incorrect. See {URL_DOCS}")


def check_hosting_with_appcast(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    if manifest.appcast is not None and manifest.appcast.url:
        return
    if manifest.url is None:
        return

    add_appcast = f"please add an appcast. See {APPCAST_DOCS}"
    url = manifest.url.value

    if GITHUB_RELEASES.search(url):
        if not manifest.is_latest:
            yield Diagnostic.warning(f"Download uses GitHub releases, {add_appcast}")
    elif SOURCEFORGE_HOSTED.search(url):
        if not manifest.is_latest:
            yield Diagnostic.warning(f"Download is hosted on SourceForge, {add_appcast}")
    elif DEVMATE_HOSTED.search(url):
        yield Diagnostic.warning(f"Download is hosted on DevMate, {add_appcast}")
    elif HOCKEYAPP_HOSTED.search(url):
        yield Diagnostic.warning(f"Download is hosted on HockeyApp, {add_appcast}")
