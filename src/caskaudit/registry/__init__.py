"""Lookup registries consulted by policy checks."""

from caskaudit.registry.lookups import (
    CORE_DEFAULT_REMOTE,
    DEFAULT_DENYLIST,
    CoreRegistry,
    Denylist,
    StaticCoreRegistry,
    StaticDenylist,
)

__all__ = [
    "CORE_DEFAULT_REMOTE",
    "DEFAULT_DENYLIST",
    "CoreRegistry",
    "Denylist",
    "StaticCoreRegistry",
    "StaticDenylist",
]
