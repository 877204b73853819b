"""Locale tag parsing for the ``language`` stanza.

Accepted tags have one to three non-empty hyphen-separated parts, each kind
used at most once: a language (``en``, ``haw``), a script (``Hans``) and a
region (``US``, ``419``). ``en-`` and ``en-fr`` are rejected.

Examples: ``en``, ``en-GB``, ``zh-Hans-CN``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

LANGUAGE_PATTERN = re.compile(r"[a-z]{2,3}")
SCRIPT_PATTERN = re.compile(r"[A-Z][a-z]{3}")
REGION_PATTERN = re.compile(r"[A-Z]{2}|\d{3}")


class LocaleError(ValueError):
    """Raised when a locale tag cannot be parsed."""


@dataclass(frozen=True)
class Locale:
    language: str | None = None
    script: str | None = None
    region: str | None = None

    def __str__(self) -> str:
        return "-".join(part for part in (self.language, self.script, self.region) if part)


def parse_locale(tag: str) -> Locale:
    """Parse a locale tag.

    Raises:
        LocaleError: If the tag is empty, has more than three parts, contains
            an unrecognised part or repeats a part kind.
    """
    parts = tag.split("-")
    if not tag or len(parts) > 3:
        raise LocaleError(f"'{tag}' cannot be parsed to a Locale")

    found: dict[str, str] = {}
    for part in parts:
        if LANGUAGE_PATTERN.fullmatch(part):
            kind = "language"
        elif SCRIPT_PATTERN.fullmatch(part):
            kind = "script"
        elif REGION_PATTERN.fullmatch(part):
            kind = "region"
        else:
            raise LocaleError(f"'{tag}' cannot be parsed to a Locale")
        if kind in found:
            raise LocaleError(f"'{tag}' cannot be parsed to a Locale")
        found[kind] = part

    return Locale(**found)
