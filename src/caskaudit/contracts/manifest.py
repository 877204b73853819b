"""
Manifest descriptor contracts for the cask audit engine.

A ManifestDescriptor is the structured, already-parsed view of one cask. It is
produced upstream by the manifest loader and is immutable for the duration of
an audit run. Artifacts form a closed union discriminated on ``kind``.

JSON shape (abridged):
    {
        "token": "example-app",
        "names": ["Example App"],
        "version": {"raw": "1.2.3,456"},
        "sha256": "e3b0...",
        "url": {"value": "https://example.com/app.dmg"},
        "homepage": "https://example.com/",
        "appcast": {"url": "https://example.com/feed.xml"},
        "artifacts": [{"kind": "app", "source": "Example.app"}],
        "tap": {"user": "Homebrew", "repo": "cask", "official": true}
    }
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Annotated, Any, Literal, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Reserved checksum / must_contain value meaning "do not verify"
NO_CHECK = "no_check"

# Raw version string used by the ``version :latest`` marker
LATEST = "latest"

# Tap exempt from version-designation and prerelease policy
VERSIONS_TAP = "homebrew/cask-versions"


class ManifestError(Exception):
    """Base exception for manifest operations."""


class ManifestValidationError(ManifestError):
    """Raised when a manifest payload does not match the contract."""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ManifestVersion(_Frozen):
    """
    Declared version.

    Attributes:
        raw: Version string as written in the manifest.
        latest: True when the manifest uses the ``:latest`` marker.
    """

    raw: str = ""
    latest: bool = False

    def __str__(self) -> str:
        return LATEST if self.latest else self.raw


class SourceURL(_Frozen):
    """Download URL with its fetch options."""

    value: str = Field(..., min_length=1)
    using: str | None = Field(default=None, description="Download strategy that bypasses fetching")
    user_agent: str | None = None

    def __str__(self) -> str:
        return self.value


class ReleaseFeed(_Frozen):
    """Release feed (appcast) declaration."""

    url: str = ""
    must_contain: str | None = None

    def __str__(self) -> str:
        return self.url


class TapInfo(_Frozen):
    """Repository that owns the manifest."""

    user: str
    repo: str
    official: bool = False

    @property
    def name(self) -> str:
        """Tap name in ``user/repo`` form, lowercased."""
        return f"{self.user}/{self.repo}".lower()


class AppArtifact(_Frozen):
    kind: Literal["app"] = "app"
    source: str
    target: str | None = None


class GenericArtifact(_Frozen):
    """``artifact`` stanza: copies ``source`` to an explicit ``target``."""

    kind: Literal["artifact"] = "artifact"
    source: str
    target: str

    @property
    def target_is_absolute(self) -> bool:
        return PurePosixPath(self.target).is_absolute()


class PkgArtifact(_Frozen):
    kind: Literal["pkg"] = "pkg"
    path: str
    allow_untrusted: bool = False


class InstallerArtifact(_Frozen):
    kind: Literal["installer"] = "installer"
    manual: str | None = None
    script: str | None = None


class UninstallArtifact(_Frozen):
    kind: Literal["uninstall"] = "uninstall"
    directives: dict[str, Any] = Field(default_factory=dict)


class ZapArtifact(_Frozen):
    kind: Literal["zap"] = "zap"
    directives: dict[str, Any] = Field(default_factory=dict)


class PreflightBlock(_Frozen):
    """Block artifact holding ``preflight`` and/or ``uninstall_preflight``."""

    kind: Literal["preflight_block"] = "preflight_block"
    directives: frozenset[str] = frozenset()


class PostflightBlock(_Frozen):
    """Block artifact holding ``postflight`` and/or ``uninstall_postflight``."""

    kind: Literal["postflight_block"] = "postflight_block"
    directives: frozenset[str] = frozenset()


Artifact = Annotated[
    Union[
        AppArtifact,
        GenericArtifact,
        PkgArtifact,
        InstallerArtifact,
        UninstallArtifact,
        ZapArtifact,
        PreflightBlock,
        PostflightBlock,
    ],
    Field(discriminator="kind"),
]

# Artifacts that only clean up and never install anything
CLEANUP_ARTIFACTS: tuple[type[BaseModel], ...] = (UninstallArtifact, ZapArtifact)


class ManifestDescriptor(_Frozen):
    """
    Structured description of one cask.

    Attributes:
        token: Unique cask token (e.g., "example-app").
        names: Human-readable names.
        desc: One-line description.
        version: Declared version, or None when the stanza is missing.
        sha256: Hex digest, NO_CHECK, or None when the stanza is missing.
        url: Download URL.
        homepage: Project homepage.
        appcast: Release feed.
        languages: Declared locale tags.
        artifacts: Ordered artifact stanzas.
        tap: Owning tap, if known.
        auto_updates: Whether the app updates itself.
        sourcefile_path: Path of the manifest source file, if loaded from disk.
    """

    token: str
    names: tuple[str, ...] = ()
    desc: str | None = None
    version: ManifestVersion | None = None
    sha256: str | None = None
    url: SourceURL | None = None
    homepage: str | None = None
    appcast: ReleaseFeed | None = None
    languages: tuple[str, ...] = ()
    artifacts: tuple[Artifact, ...] = ()
    tap: TapInfo | None = None
    auto_updates: bool = False
    sourcefile_path: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> Any:
        """Accept a bare string for the version stanza."""
        if isinstance(v, str):
            if v == ":latest":
                return {"raw": LATEST, "latest": True}
            return {"raw": v}
        return v

    @field_validator("url", mode="before")
    @classmethod
    def coerce_url(cls, v: Any) -> Any:
        """Accept a bare string for the url stanza."""
        if isinstance(v, str):
            return {"value": v}
        return v

    @field_validator("appcast", mode="before")
    @classmethod
    def coerce_appcast(cls, v: Any) -> Any:
        """Accept a bare string for the appcast stanza."""
        if isinstance(v, str):
            return {"url": v}
        return v

    @property
    def is_latest(self) -> bool:
        return self.version is not None and self.version.latest

    @property
    def in_versions_tap(self) -> bool:
        return self.tap is not None and self.tap.name == VERSIONS_TAP

    def artifacts_of(self, *types: type[BaseModel]) -> list[Any]:
        """Return artifacts that are instances of any of ``types``, in order."""
        return [artifact for artifact in self.artifacts if isinstance(artifact, types)]

    def __str__(self) -> str:
        return self.token

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using orjson."""
        return orjson.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, data: bytes | str) -> ManifestDescriptor:
        """Deserialize from JSON.

        Raises:
            ManifestValidationError: If the payload is not valid JSON or
                does not match the contract.
        """
        if isinstance(data, str):
            data = data.encode()
        try:
            return cls.model_validate(orjson.loads(data))
        except orjson.JSONDecodeError as e:
            raise ManifestValidationError(f"Manifest is not valid JSON: {e}") from e
        except ValidationError as e:
            raise ManifestValidationError(str(e)) from e
