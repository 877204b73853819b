"""Version and checksum checks."""

from __future__ import annotations

import hashlib
import logging
import re
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic
from caskaudit.contracts.manifest import LATEST, NO_CHECK

if TYPE_CHECKING:
    from collections.abc import Iterator

    from caskaudit.audit.context import AuditContext

logger = logging.getLogger(__name__)

SHA256_PATTERN = re.compile(r"[0-9a-f]{64}", re.IGNORECASE)

# Digest of zero bytes; never a real payload checksum
EMPTY_SHA256 = hashlib.sha256(b"").hexdigest()


def check_version(context: AuditContext) -> Iterator[Diagnostic]:
    version = context.manifest.version
    if version is None:
        return

    logger.debug("Verifying version :latest is not a string", extra={"cask": context.token})
    if not version.latest and version.raw == LATEST:
        yield Diagnostic.error("you should use version :latest instead of version 'latest'")

    separator = context.config.path_separator
    if not version.latest and separator in version.raw:
        yield Diagnostic.error(f"version should not contain '{separator}'")


def check_sha256(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    sha256 = manifest.sha256
    if not sha256:
        return

    if manifest.is_latest and sha256 != NO_CHECK:
        yield Diagnostic.error("you should use sha256 :no_check when version is :latest")

    if sha256 != NO_CHECK and not SHA256_PATTERN.fullmatch(sha256):
        yield Diagnostic.error("sha256 string must be of 64 hexadecimal characters")

    if sha256.lower() == EMPTY_SHA256:
        yield Diagnostic.error(f"cannot use the sha256 for an empty string in sha256: {EMPTY_SHA256}")


def check_latest_with_appcast(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    if not manifest.is_latest or manifest.appcast is None or not manifest.appcast.url:
        return

    yield Diagnostic.warning("Casks with an appcast should not use version :latest")


def check_latest_with_auto_updates(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    if not manifest.is_latest or not manifest.auto_updates:
        return

    yield Diagnostic.warning("Casks with `version :latest` should not use `auto_updates`")
