"""
Structural checks: required stanzas, artifact shape and locales.

All checks here are pure functions of the manifest and configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from caskaudit.audit.locale import LocaleError, parse_locale
from caskaudit.contracts.diagnostics import Diagnostic
from caskaudit.contracts.manifest import (
    CLEANUP_ARTIFACTS,
    GenericArtifact,
    InstallerArtifact,
    PkgArtifact,
    PostflightBlock,
    PreflightBlock,
    UninstallArtifact,
    ZapArtifact,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from caskaudit.audit.context import AuditContext

logger = logging.getLogger(__name__)

# User of official taps, where untrusted packages are refused
OFFICIAL_TAP_USER = "homebrew"


def check_required_stanzas(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    logger.debug("Auditing required stanzas", extra={"cask": manifest.token})

    if not manifest.token:
        yield Diagnostic.error("a token is required")

    required = {
        "version": manifest.version,
        "sha256": manifest.sha256,
        "url": manifest.url,
        "homepage": manifest.homepage,
    }
    for stanza, value in required.items():
        if not value:
            yield Diagnostic.error(f"a {stanza} stanza is required")

    if not manifest.names:
        yield Diagnostic.error("at least one name stanza is required")

    installable = [
        artifact for artifact in manifest.artifacts if not isinstance(artifact, CLEANUP_ARTIFACTS)
    ]
    if not installable:
        yield Diagnostic.error("at least one activatable artifact stanza is required")


def check_desc(context: AuditContext) -> Iterator[Diagnostic]:
    if not context.config.new_cask:
        return
    if context.manifest.desc and context.manifest.desc.strip():
        return

    yield Diagnostic.warning("Cask should have a description. Please add a `desc` stanza.")


def check_generic_artifacts(context: AuditContext) -> Iterator[Diagnostic]:
    for artifact in context.manifest.artifacts_of(GenericArtifact):
        if not artifact.target_is_absolute:
            yield Diagnostic.error(
                f"target must be absolute path for Generic Artifact {artifact.source}"
            )


def check_languages(context: AuditContext) -> Iterator[Diagnostic]:
    for language in context.manifest.languages:
        try:
            parse_locale(language)
        except LocaleError:
            yield Diagnostic.error(f"Locale '{language}' is invalid.")


def _count_blocks(
    context: AuditContext, block_type: type[PreflightBlock | PostflightBlock], directive: str
) -> int:
    return sum(
        1 for block in context.manifest.artifacts_of(block_type) if directive in block.directives
    )


def check_single_pre_postflight(context: AuditContext) -> Iterator[Diagnostic]:
    logger.debug("Auditing preflight and postflight stanzas", extra={"cask": context.token})

    if _count_blocks(context, PreflightBlock, "preflight") > 1:
        yield Diagnostic.warning("only a single preflight stanza is allowed")

    if _count_blocks(context, PostflightBlock, "postflight") > 1:
        yield Diagnostic.warning("only a single postflight stanza is allowed")


def check_single_uninstall_zap(context: AuditContext) -> Iterator[Diagnostic]:
    logger.debug("Auditing single uninstall_* and zap stanzas", extra={"cask": context.token})
    manifest = context.manifest

    if len(manifest.artifacts_of(UninstallArtifact)) > 1:
        yield Diagnostic.warning("only a single uninstall stanza is allowed")

    if _count_blocks(context, PreflightBlock, "uninstall_preflight") > 1:
        yield Diagnostic.warning("only a single uninstall_preflight stanza is allowed")

    if _count_blocks(context, PostflightBlock, "uninstall_postflight") > 1:
        yield Diagnostic.warning("only a single uninstall_postflight stanza is allowed")

    if len(manifest.artifacts_of(ZapArtifact)) > 1:
        yield Diagnostic.warning("only a single zap stanza is allowed")


def check_untrusted_pkg(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    logger.debug("Auditing pkg stanza: allow_untrusted", extra={"cask": manifest.token})

    if manifest.sourcefile_path is None:
        return
    if manifest.tap is None or manifest.tap.user.lower() != OFFICIAL_TAP_USER:
        return
    if not any(pkg.allow_untrusted for pkg in manifest.artifacts_of(PkgArtifact)):
        return

    yield Diagnostic.warning("allow_untrusted is not permitted in official Homebrew Cask taps")


def check_stanza_requires_uninstall(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    if not manifest.artifacts_of(PkgArtifact, InstallerArtifact):
        return
    if manifest.artifacts_of(UninstallArtifact):
        return

    yield Diagnostic.warning("installer and pkg stanzas require an uninstall stanza")
