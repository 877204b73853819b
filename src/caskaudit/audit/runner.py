"""
Check runner: executes audit checks in order and builds the report.

Checks run strictly sequentially so diagnostic order equals check order. A
check that raises is converted into exactly one synthetic error and the run
continues; the runner itself always returns a report. Cancellation is the one
exception: it propagates, and the report being built is left incomplete.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from typing import TYPE_CHECKING, Union

from caskaudit.audit.checks import DEFAULT_CHECKS
from caskaudit.audit.context import AuditContext
from caskaudit.config import AuditConfig
from caskaudit.contracts.diagnostics import Diagnostic, DiagnosticsReport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from caskaudit.audit.download import Downloader
    from caskaudit.audit.metrics import AuditMetricsExporter
    from caskaudit.contracts.manifest import ManifestDescriptor
    from caskaudit.registry.lookups import CoreRegistry, Denylist
    from caskaudit.remote.client import RemoteMetadataClient

logger = logging.getLogger(__name__)

CheckResult = Union[Iterable[Diagnostic], None]
Check = Callable[[AuditContext], Union[CheckResult, Awaitable[CheckResult]]]


def check_name(check: Check) -> str:
    return getattr(check, "__name__", type(check).__name__)


class CheckRunner:
    """
    Runs an ordered list of checks against one manifest.

    Usage:
        runner = CheckRunner()
        report = await runner.run(AuditContext(manifest, config=resolve_config(strict=True)))
        print(report.summary())
    """

    def __init__(
        self,
        checks: Sequence[Check] | None = None,
        metrics: AuditMetricsExporter | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            checks: Checks in execution order. Defaults to DEFAULT_CHECKS.
            metrics: Optional Prometheus exporter.
        """
        self._checks: tuple[Check, ...] = tuple(DEFAULT_CHECKS if checks is None else checks)
        self._metrics = metrics

    @property
    def checks(self) -> tuple[Check, ...]:
        return self._checks

    async def run(self, context: AuditContext) -> DiagnosticsReport:
        """
        Audit one manifest.

        Args:
            context: Manifest, configuration and collaborators.

        Returns:
            Completed DiagnosticsReport.
        """
        token = context.manifest.token
        report = DiagnosticsReport(token=token, complete=False)
        logger.info("Auditing cask", extra={"cask": token, "checks": len(self._checks)})

        for check in self._checks:
            report.extend(await self._run_check(check, context))

        report.complete = True
        if self._metrics is not None:
            self._metrics.record_report(report)

        logger.info(
            "Audit finished",
            extra={
                "cask": token,
                "status": report.status.value,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
            },
        )
        return report

    async def run_batch(
        self,
        contexts: Iterable[AuditContext],
        *,
        should_continue: Callable[[], bool] | None = None,
    ) -> list[DiagnosticsReport]:
        """
        Audit manifests one after another.

        ``should_continue`` is consulted before each manifest; returning False
        abandons the remaining manifests. Reports are only returned for
        manifests that were fully audited.
        """
        reports: list[DiagnosticsReport] = []
        for context in contexts:
            if should_continue is not None and not should_continue():
                logger.info("Batch audit abandoned", extra={"completed": len(reports)})
                break
            reports.append(await self.run(context))
        return reports

    async def _run_check(self, check: Check, context: AuditContext) -> list[Diagnostic]:
        name = check_name(check)
        try:
            result = check(context)
            if inspect.isawaitable(result):
                result = await result
            found = list(result) if result is not None else []
            for item in found:
                if not isinstance(item, Diagnostic):
                    raise TypeError(f"check {name} returned {type(item).__name__}, not Diagnostic")
            return [d if d.check else replace(d, check=name) for d in found]
        except Exception as e:
            logger.debug(
                "Check raised",
                exc_info=True,
                extra={"cask": context.manifest.token, "check": name},
            )
            if self._metrics is not None:
                self._metrics.record_check_fault()
            return [
                Diagnostic.error(
                    f"exception while auditing {context.manifest.token}: {e}",
                    check=name,
                )
            ]


async def audit_manifest(
    manifest: ManifestDescriptor,
    *,
    config: AuditConfig | None = None,
    client: RemoteMetadataClient | None = None,
    denylist: Denylist | None = None,
    core_registry: CoreRegistry | None = None,
    downloader: Downloader | None = None,
    runner: CheckRunner | None = None,
) -> DiagnosticsReport:
    """Convenience wrapper: build a context and run the default checks."""
    context = AuditContext(
        manifest=manifest,
        config=config or AuditConfig(),
        client=client,
        core_registry=core_registry,
        downloader=downloader,
    )
    if denylist is not None:
        context = replace(context, denylist=denylist)
    return await (runner or CheckRunner()).run(context)
