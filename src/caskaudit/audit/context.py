"""Read-only inputs shared by every check in one audit run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from caskaudit.config import AuditConfig
from caskaudit.registry.lookups import DEFAULT_DENYLIST, Denylist

if TYPE_CHECKING:
    from caskaudit.audit.download import Downloader
    from caskaudit.contracts.manifest import ManifestDescriptor
    from caskaudit.registry.lookups import CoreRegistry
    from caskaudit.remote.client import RemoteMetadataClient


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class AuditContext:
    """
    Everything a check may look at.

    Attributes:
        manifest: Manifest under audit.
        config: Resolved audit flags.
        client: Remote metadata client; online checks no-op without one.
        denylist: Token denylist.
        core_registry: Core package registry; conflict check no-ops without one.
        downloader: Download/verify collaborator; download check no-ops without one.
        now_fn: Clock, injectable for deterministic date comparisons.
    """

    manifest: ManifestDescriptor
    config: AuditConfig = field(default_factory=AuditConfig)
    client: RemoteMetadataClient | None = None
    denylist: Denylist = DEFAULT_DENYLIST
    core_registry: CoreRegistry | None = None
    downloader: Downloader | None = None
    now_fn: Callable[[], datetime] = _utcnow

    @property
    def token(self) -> str:
        return self.manifest.token

    def now(self) -> datetime:
        return self.now_fn()
