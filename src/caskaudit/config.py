"""
Audit configuration.

Flags are resolved once per run from a partial set of tri-state inputs and
never change afterwards. Implication order is fixed:

    new_cask -> online -> {appcast, download}
    new_cask -> strict -> token_conflicts
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuditConfig:
    """Fully resolved audit flags."""

    # Release feed is expected to be fetched and checked
    appcast: bool = False

    # Network-backed checks (repository metadata, archival, prerelease)
    online: bool = False

    # Style and token hygiene checks
    strict: bool = False

    # First-time submission vetting
    new_cask: bool = False

    # Download/verify and transport-security probes
    download: bool = False

    # Conflicts against the core package registry
    token_conflicts: bool = False

    # Passed through to the downloader untouched
    quarantine: bool | None = None

    # Character a version string must not contain
    path_separator: str = "/"

    def __post_init__(self) -> None:
        if len(self.path_separator) != 1:
            raise ValueError(
                f"path_separator must be a single character, got {self.path_separator!r}"
            )


def resolve_config(
    *,
    new_cask: bool | None = None,
    online: bool | None = None,
    strict: bool | None = None,
    appcast: bool | None = None,
    download: bool | None = None,
    token_conflicts: bool | None = None,
    quarantine: bool | None = None,
    path_separator: str = "/",
) -> AuditConfig:
    """
    Resolve tri-state flags into an AuditConfig.

    Each rule only fills a value left as None; explicit values are never
    overwritten. With no inputs every flag resolves to False.

    Args:
        new_cask: Root signal for first-time submissions.
        online: Enable network checks (defaults to new_cask).
        strict: Enable strict checks (defaults to new_cask).
        appcast: Expect a release feed check (defaults to online).
        download: Enable download and HTTPS probes (defaults to online).
        token_conflicts: Check core registry conflicts (defaults to strict).
        quarantine: Downloader pass-through option.
        path_separator: Character forbidden in version strings.

    Returns:
        Resolved AuditConfig.
    """
    if online is None:
        online = new_cask
    if strict is None:
        strict = new_cask
    if appcast is None:
        appcast = online
    if download is None:
        download = online
    if token_conflicts is None:
        token_conflicts = strict

    return AuditConfig(
        appcast=bool(appcast),
        online=bool(online),
        strict=bool(strict),
        new_cask=bool(new_cask),
        download=bool(download),
        token_conflicts=bool(token_conflicts),
        quarantine=quarantine,
        path_separator=path_separator,
    )
