"""
Audit diagnostics and the per-manifest report.

A report is append-only and owned by the CheckRunner for one run. Diagnostics
keep check execution order; nothing is deduplicated or sorted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable


class Severity(str, Enum):
    """Severity of one finding."""

    ERROR = "error"
    WARNING = "warning"


class AuditStatus(str, Enum):
    """Terminal status of an audit run."""

    PASS = "passed"
    WARN = "warning"
    FAIL = "failed"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class Diagnostic:
    """
    Single audit finding.

    Attributes:
        severity: ERROR blocks the merge, WARNING is advisory.
        message: Human-readable description.
        check: Name of the check that produced it (stamped by the runner).
    """

    severity: Severity
    message: str
    check: str = ""

    @classmethod
    def error(cls, message: str, check: str = "") -> Diagnostic:
        return cls(Severity.ERROR, message, check)

    @classmethod
    def warning(cls, message: str, check: str = "") -> Diagnostic:
        return cls(Severity.WARNING, message, check)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "check": self.check,
        }


@dataclass
class DiagnosticsReport:
    """
    Ordered findings for one manifest.

    ``complete`` is False while the runner is still executing checks; an
    incomplete report without errors reports INCOMPLETE, never PASS.
    """

    token: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    complete: bool = True

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)

    @property
    def errors(self) -> list[str]:
        """Error messages in insertion order."""
        return [d.message for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[str]:
        """Warning messages in insertion order."""
        return [d.message for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def has_warnings(self) -> bool:
        return any(d.severity == Severity.WARNING for d in self.diagnostics)

    @property
    def status(self) -> AuditStatus:
        if self.has_errors:
            return AuditStatus.FAIL
        if not self.complete:
            return AuditStatus.INCOMPLETE
        if self.has_warnings:
            return AuditStatus.WARN
        return AuditStatus.PASS

    @property
    def success(self) -> bool:
        """True only for a completed run without findings."""
        return self.status == AuditStatus.PASS

    def summary(self) -> str:
        """Render the multi-line human-readable summary.

        Errors are listed before warnings, each group in insertion order.
        """
        lines = [f"audit for {self.token}: {self.status.value}"]
        lines.extend(f" - [error] {message}" for message in self.errors)
        lines.extend(f" - [warning] {message}" for message in self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "token": self.token,
            "status": self.status.value,
            "complete": self.complete,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using orjson."""
        return orjson.dumps(self.to_dict())
