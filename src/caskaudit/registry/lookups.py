"""Denylist and core package registries.

Both are read-only lookup tables supplied by the environment. They are
passed into each audit run explicitly and may be shared across runs.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

CORE_DEFAULT_REMOTE = "https://github.com/Homebrew/homebrew-core"


class Denylist(ABC):
    """Maps a token to the reason it may not be submitted."""

    @abstractmethod
    def reason(self, token: str) -> str | None:
        """Return the rejection reason for ``token``, or None if allowed."""
        ...


class CoreRegistry(ABC):
    """Set of package names already defined in the core repository."""

    @abstractmethod
    def has_package(self, token: str) -> bool:
        ...

    @abstractmethod
    def package_location(self, token: str) -> str:
        """Canonical browser URL of the core package named ``token``."""
        ...


@dataclass(frozen=True)
class StaticDenylist(Denylist):
    """
    Denylist backed by a mapping of exact tokens or regex patterns.

    Entries are matched in insertion order; the first match wins.

    Attributes:
        entries: Token (str) or compiled pattern -> reason.
    """

    entries: Mapping[str | re.Pattern[str], str] = field(default_factory=dict)

    def reason(self, token: str) -> str | None:
        for key, reason in self.entries.items():
            if isinstance(key, re.Pattern):
                if key.search(token):
                    return reason
            elif key == token:
                return reason
        return None


@dataclass(frozen=True)
class StaticCoreRegistry(CoreRegistry):
    """
    Core registry backed by an in-memory set of names.

    Attributes:
        names: Known core package names.
        default_remote: Browser URL of the core repository.
    """

    names: frozenset[str] = frozenset()
    default_remote: str = CORE_DEFAULT_REMOTE

    @classmethod
    def from_names(
        cls, names: Iterable[str], default_remote: str = CORE_DEFAULT_REMOTE
    ) -> StaticCoreRegistry:
        return cls(names=frozenset(names), default_remote=default_remote)

    def has_package(self, token: str) -> bool:
        return token in self.names

    def package_location(self, token: str) -> str:
        return f"{self.default_remote}/blob/HEAD/Formula/{token}.rb"


DEFAULT_DENYLIST = StaticDenylist(
    {
        re.compile(r"^adobe-(after|illustrator|indesign|photoshop|premiere)"): (
            "Adobe casks were removed because they are too difficult to maintain."
        ),
        re.compile(r"^audacity\Z"): (
            "Audacity was removed because it is too difficult to download programmatically."
        ),
        re.compile(r"^pharo\Z"): "Pharo developers maintain their own tap.",
    }
)
