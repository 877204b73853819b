"""
Data contracts for the cask audit engine.

ManifestDescriptor is the input of every audit run; DiagnosticsReport is the
output.
"""

from caskaudit.contracts.diagnostics import (
    AuditStatus,
    Diagnostic,
    DiagnosticsReport,
    Severity,
)
from caskaudit.contracts.manifest import (
    CLEANUP_ARTIFACTS,
    LATEST,
    NO_CHECK,
    VERSIONS_TAP,
    AppArtifact,
    Artifact,
    GenericArtifact,
    InstallerArtifact,
    ManifestDescriptor,
    ManifestError,
    ManifestValidationError,
    ManifestVersion,
    PkgArtifact,
    PostflightBlock,
    PreflightBlock,
    ReleaseFeed,
    SourceURL,
    TapInfo,
    UninstallArtifact,
    ZapArtifact,
)

__all__ = [
    "CLEANUP_ARTIFACTS",
    "LATEST",
    "NO_CHECK",
    "VERSIONS_TAP",
    "AppArtifact",
    "Artifact",
    "AuditStatus",
    "Diagnostic",
    "DiagnosticsReport",
    "GenericArtifact",
    "InstallerArtifact",
    "ManifestDescriptor",
    "ManifestError",
    "ManifestValidationError",
    "ManifestVersion",
    "PkgArtifact",
    "PostflightBlock",
    "PreflightBlock",
    "ReleaseFeed",
    "Severity",
    "SourceURL",
    "TapInfo",
    "UninstallArtifact",
    "ZapArtifact",
]
