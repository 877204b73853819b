"""Download verification and HTTPS availability checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic
from caskaudit.remote.types import BROWSER

if TYPE_CHECKING:
    from caskaudit.audit.context import AuditContext

logger = logging.getLogger(__name__)


async def check_download(context: AuditContext) -> list[Diagnostic]:
    manifest = context.manifest
    downloader = context.downloader
    if not context.config.download or downloader is None or manifest.url is None:
        return []

    logger.debug("Auditing download", extra={"cask": manifest.token})
    try:
        path = await downloader.download(manifest, quarantine=context.config.quarantine)
        await downloader.verify(manifest, path)
    except Exception as e:
        logger.info("Download failed", extra={"cask": manifest.token, "error": str(e)})
        return [Diagnostic.error(f"download not possible: {e}")]
    return []


async def check_https_availability(context: AuditContext) -> list[Diagnostic]:
    manifest = context.manifest
    client = context.client
    if not context.config.download or client is None:
        return []

    problems: list[str | None] = []

    if manifest.url is not None and not manifest.url.using:
        problems.append(
            await client.check_reachability(
                manifest.url.value,
                user_agents=[manifest.url.user_agent],
            )
        )

    if manifest.appcast is not None and manifest.appcast.url and context.config.appcast:
        problems.append(await client.check_reachability(manifest.appcast.url, check_content=True))

    if manifest.homepage:
        problems.append(
            await client.check_reachability(
                manifest.homepage,
                check_content=True,
                user_agents=[BROWSER],
            )
        )

    return [Diagnostic.error(problem) for problem in problems if problem]
