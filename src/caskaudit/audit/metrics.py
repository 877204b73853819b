"""
Prometheus metrics for audit runs.

Labels stay low-cardinality: status and severity only. Tokens, URLs and
messages never become labels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_client.registry import CollectorRegistry

if TYPE_CHECKING:
    from caskaudit.contracts.diagnostics import DiagnosticsReport

# Labels that would explode cardinality
FORBIDDEN_LABELS = frozenset(
    {
        "token",
        "cask",
        "url",
        "homepage",
        "message",
        "version",
    }
)

REQUIRED_METRIC_NAMES = frozenset(
    {
        "caskaudit_audits",
        "caskaudit_diagnostics",
        "caskaudit_check_faults",
    }
)


class AuditMetricsExporter:
    """
    Counters for completed audits, emitted diagnostics and check faults.

    Usage:
        registry = CollectorRegistry()
        exporter = AuditMetricsExporter(registry=registry)
        runner = CheckRunner(metrics=exporter)
        # generate_latest(registry) -> bytes for a /metrics endpoint
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """
        Initialize metrics exporter.

        Args:
            registry: Prometheus CollectorRegistry. A private one is created if None.
        """
        self._registry = registry or CollectorRegistry()

        self._audits = Counter(
            "caskaudit_audits",
            "Completed audit runs by terminal status",
            ["status"],
            registry=self._registry,
        )
        self._diagnostics = Counter(
            "caskaudit_diagnostics",
            "Diagnostics emitted by severity",
            ["severity"],
            registry=self._registry,
        )
        self._check_faults = Counter(
            "caskaudit_check_faults",
            "Checks that raised and were converted to a synthetic error",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_report(self, report: DiagnosticsReport) -> None:
        """Count one finished report and its diagnostics."""
        self._audits.labels(status=report.status.value).inc()
        for diagnostic in report.diagnostics:
            self._diagnostics.labels(severity=diagnostic.severity.value).inc()

    def record_check_fault(self) -> None:
        self._check_faults.inc()
