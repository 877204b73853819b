"""Version normalization for comparing declared and observed versions.

Formula versions are opaque: commas and colons may be part of one semantic
version. Cask versions use them as component delimiters, e.g.

    "1.0,100:1426778671" -> ("1.0", "100", "1426778671")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ConsumerKind(str, Enum):
    """Kind of manifest a version belongs to."""

    FORMULA = "formula"
    CASK = "cask"


# Cask multi-component delimiters
CASK_DELIMITER_PATTERN = re.compile(r"[,:]")


def normalize_version(kind: ConsumerKind, raw: str) -> tuple[str, ...]:
    """Split a raw version string into ordered components.

    Args:
        kind: Consumer the version belongs to.
        raw: Version string as declared.

    Returns:
        ``(raw,)`` for formulae; for casks the non-empty segments between
        commas and colons, in original order.
    """
    if kind == ConsumerKind.FORMULA:
        return (raw,)
    return tuple(part for part in CASK_DELIMITER_PATTERN.split(raw) if part)


@dataclass(frozen=True)
class VersionComponents:
    """Normalized version components.

    Attributes:
        kind: Consumer the version belongs to.
        raw: Original version string.
        versions: Ordered, non-empty components.
    """

    kind: ConsumerKind
    raw: str
    versions: tuple[str, ...]

    @classmethod
    def create(cls, kind: ConsumerKind, raw: str) -> VersionComponents:
        return cls(kind=kind, raw=raw, versions=normalize_version(kind, raw))

    def __str__(self) -> str:
        """Return the raw version string."""
        return self.raw
