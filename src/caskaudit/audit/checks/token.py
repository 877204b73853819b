"""
Token checks: denylist, hygiene, naming conventions and core conflicts.

Hygiene and naming checks only run under strict configuration.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from caskaudit.contracts.diagnostics import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterator

    from caskaudit.audit.context import AuditContext

VALID_TOKEN_PATTERN = re.compile(r"[^a-z0-9\-]")
VERSION_DESIGNATION_PATTERN = re.compile(r"-(?P<designation>alpha|beta|rc|release-candidate)\Z")

PLATFORM_SUFFIXES = ("mac", "osx", "macos")
ARCHITECTURE_SUFFIXES = ("x86", "32_bit", "x86_64", "64_bit")
FRAMEWORK_NAMES = ("cocoa", "qt", "gtk", "wx", "java")


def check_denylist(context: AuditContext) -> Iterator[Diagnostic]:
    manifest = context.manifest
    if manifest.tap is None or not manifest.tap.official:
        return

    reason = context.denylist.reason(manifest.token)
    if reason:
        yield Diagnostic.error(f"{manifest.token} is not allowed: {reason}")


def check_token_valid(context: AuditContext) -> Iterator[Diagnostic]:
    if not context.config.strict:
        return

    token = context.manifest.token

    if token != token.lower():
        yield Diagnostic.warning("cask token is not lowercase")

    if not token.isascii():
        yield Diagnostic.warning("cask token contains non-ascii characters")

    if "+" in token:
        yield Diagnostic.warning("cask token + should be replaced by -plus-")

    if "@" in token:
        yield Diagnostic.warning("cask token @ should be replaced by -at-")

    if any(char.isspace() for char in token):
        yield Diagnostic.warning("cask token whitespace should be replaced by hyphens")

    if "_" in token:
        yield Diagnostic.warning("cask token underscores should be replaced by hyphens")

    if VALID_TOKEN_PATTERN.search(token):
        yield Diagnostic.warning("cask token should only contain alphanumeric characters and hyphens")

    if "--" in token:
        yield Diagnostic.warning("cask token should not contain double hyphens")

    if token.startswith("-") or token.endswith("-"):
        yield Diagnostic.warning("cask token should not have leading or trailing hyphens")


def check_token_bad_words(context: AuditContext) -> Iterator[Diagnostic]:
    if not context.config.strict:
        return

    manifest = context.manifest
    token = manifest.token

    if token.endswith(".app"):
        yield Diagnostic.warning("cask token contains .app")

    match = VERSION_DESIGNATION_PATTERN.search(token)
    if (
        match is not None
        and manifest.tap is not None
        and manifest.tap.official
        and not manifest.in_versions_tap
    ):
        designation = match.group("designation")
        yield Diagnostic.warning(f"cask token contains version designation '{designation}'")

    if token.endswith("launcher"):
        yield Diagnostic.warning("cask token mentions launcher")

    if token.endswith("desktop"):
        yield Diagnostic.warning("cask token mentions desktop")

    if token.endswith(PLATFORM_SUFFIXES):
        yield Diagnostic.warning("cask token mentions platform")

    if token.endswith(ARCHITECTURE_SUFFIXES):
        yield Diagnostic.warning("cask token mentions architecture")

    if token.endswith(FRAMEWORK_NAMES) and token not in FRAMEWORK_NAMES:
        yield Diagnostic.warning("cask token mentions framework")


def check_token_conflicts(context: AuditContext) -> Iterator[Diagnostic]:
    config = context.config
    if not (config.strict and config.token_conflicts):
        return

    registry = context.core_registry
    token = context.manifest.token
    if registry is None or not registry.has_package(token):
        return

    yield Diagnostic.error(
        "possible duplicate, cask token conflicts with Homebrew core formula: "
        f"{registry.package_location(token)}"
    )
