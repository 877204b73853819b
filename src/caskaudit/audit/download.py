"""Download-and-verify collaborator used by the download check."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from caskaudit.contracts.manifest import ManifestDescriptor


class DownloadError(Exception):
    """Raised when a download or its verification fails."""


class Downloader(ABC):
    """Fetches a manifest's payload and verifies it against the manifest."""

    @abstractmethod
    async def download(
        self, manifest: ManifestDescriptor, *, quarantine: bool | None = None
    ) -> Path:
        """Download the payload and return its local path.

        Raises:
            DownloadError: If the payload cannot be fetched.
        """
        ...

    @abstractmethod
    async def verify(self, manifest: ManifestDescriptor, path: Path) -> None:
        """Verify a downloaded payload (checksum, signatures, quarantine).

        Raises:
            DownloadError: If verification fails.
        """
        ...
