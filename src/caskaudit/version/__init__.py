"""Version normalization."""

from caskaudit.version.normalizer import (
    ConsumerKind,
    VersionComponents,
    normalize_version,
)

__all__ = [
    "ConsumerKind",
    "VersionComponents",
    "normalize_version",
]
