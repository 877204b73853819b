"""
Cask audit engine.

Resolves configuration, runs the ordered checks against a manifest and
returns a DiagnosticsReport.
"""

from __future__ import annotations

from caskaudit.audit.checks import DEFAULT_CHECKS
from caskaudit.audit.context import AuditContext
from caskaudit.audit.download import DownloadError, Downloader
from caskaudit.audit.metrics import AuditMetricsExporter
from caskaudit.audit.runner import Check, CheckRunner, audit_manifest

__all__ = [
    "DEFAULT_CHECKS",
    "AuditContext",
    "AuditMetricsExporter",
    "Check",
    "CheckRunner",
    "DownloadError",
    "Downloader",
    "audit_manifest",
]
