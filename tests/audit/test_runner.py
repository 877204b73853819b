"""Tests for the check runner and the audit entry point."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import Any

import pytest
from prometheus_client.registry import CollectorRegistry

from caskaudit.audit import DEFAULT_CHECKS, AuditContext, AuditMetricsExporter, CheckRunner, audit_manifest
from caskaudit.config import resolve_config
from caskaudit.contracts import AuditStatus, Diagnostic, ManifestDescriptor, Severity
from caskaudit.registry import StaticDenylist


def _manifest(**overrides: Any) -> ManifestDescriptor:
    fields: dict[str, Any] = {
        "token": "example-app",
        "names": ["Example App"],
        "version": ":latest",
        "sha256": "no_check",
        "url": "https://example.com/app.dmg",
        "homepage": "https://example.com/",
        "artifacts": [{"kind": "app", "source": "Example.app"}],
    }
    fields.update(overrides)
    return ManifestDescriptor.model_validate(fields)


def first_check(context: AuditContext) -> Iterator[Diagnostic]:
    yield Diagnostic.warning("first")


def exploding_check(context: AuditContext) -> Iterator[Diagnostic]:
    raise RuntimeError("boom")


async def async_check(context: AuditContext) -> list[Diagnostic]:
    await asyncio.sleep(0)
    return [Diagnostic.error("third")]


def silent_check(context: AuditContext) -> None:
    return None


class TestCheckRunner:
    """Tests for CheckRunner."""

    def test_default_checks(self) -> None:
        assert CheckRunner().checks == DEFAULT_CHECKS
        assert len(DEFAULT_CHECKS) == 28

    @pytest.mark.asyncio
    async def test_order_and_check_names(self) -> None:
        runner = CheckRunner(checks=[first_check, silent_check, async_check])

        report = await runner.run(AuditContext(_manifest()))

        assert [(d.message, d.check) for d in report.diagnostics] == [
            ("first", "first_check"),
            ("third", "async_check"),
        ]
        assert report.complete
        assert report.status == AuditStatus.FAIL

    @pytest.mark.asyncio
    async def test_faulting_check_is_contained(self) -> None:
        runner = CheckRunner(checks=[first_check, exploding_check, async_check])

        report = await runner.run(AuditContext(_manifest()))

        assert [d.message for d in report.diagnostics] == [
            "first",
            "exception while auditing example-app: boom",
            "third",
        ]
        fault = report.diagnostics[1]
        assert fault.severity == Severity.ERROR
        assert fault.check == "exploding_check"

    @pytest.mark.asyncio
    async def test_fault_in_async_check(self) -> None:
        async def broken(context: AuditContext) -> list[Diagnostic]:
            raise ValueError("bad payload")

        report = await CheckRunner(checks=[broken]).run(AuditContext(_manifest()))

        assert report.errors == ["exception while auditing example-app: bad payload"]

    @pytest.mark.asyncio
    async def test_non_diagnostic_result_is_contained(self) -> None:
        def returns_strings(context: AuditContext) -> list[Any]:
            return ["not a diagnostic"]

        report = await CheckRunner(checks=[returns_strings, first_check]).run(AuditContext(_manifest()))

        assert report.complete
        assert [d.check for d in report.diagnostics] == ["returns_strings", "first_check"]
        assert report.errors == [
            "exception while auditing example-app: check returns_strings returned str, not Diagnostic"
        ]
        assert report.warnings == ["first"]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self) -> None:
        async def cancelled(context: AuditContext) -> list[Diagnostic]:
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await CheckRunner(checks=[first_check, cancelled]).run(AuditContext(_manifest()))

    @pytest.mark.asyncio
    async def test_metrics_recorded(self) -> None:
        registry = CollectorRegistry()
        runner = CheckRunner(
            checks=[first_check, exploding_check],
            metrics=AuditMetricsExporter(registry=registry),
        )

        await runner.run(AuditContext(_manifest()))

        assert registry.get_sample_value("caskaudit_audits_total", {"status": "failed"}) == 1
        assert registry.get_sample_value("caskaudit_check_faults_total") == 1

    @pytest.mark.asyncio
    async def test_run_batch(self) -> None:
        runner = CheckRunner(checks=[first_check])
        contexts = [AuditContext(_manifest(token=f"app-{i}")) for i in range(3)]

        reports = await runner.run_batch(contexts)

        assert [r.token for r in reports] == ["app-0", "app-1", "app-2"]

    @pytest.mark.asyncio
    async def test_run_batch_abandoned(self) -> None:
        runner = CheckRunner(checks=[first_check])
        contexts = [AuditContext(_manifest(token=f"app-{i}")) for i in range(3)]
        budget = iter([True, False, True])

        reports = await runner.run_batch(contexts, should_continue=lambda: next(budget))

        assert [r.token for r in reports] == ["app-0"]


class TestAuditManifest:
    """End-to-end tests over the default checks without network access."""

    @pytest.mark.asyncio
    async def test_clean_latest_manifest_passes(self) -> None:
        report = await audit_manifest(_manifest(), config=resolve_config(strict=True))

        assert report.diagnostics == []
        assert report.status == AuditStatus.PASS
        assert report.summary() == "audit for example-app: passed"

    @pytest.mark.asyncio
    async def test_bad_token_warns(self) -> None:
        report = await audit_manifest(_manifest(token="My_App+"), config=resolve_config(strict=True))

        assert len(report.warnings) >= 3
        assert report.errors == []
        assert report.status == AuditStatus.WARN

    @pytest.mark.asyncio
    async def test_default_config_is_lenient(self) -> None:
        report = await audit_manifest(_manifest(token="My_App+"))
        assert report.status == AuditStatus.PASS

    @pytest.mark.asyncio
    async def test_broken_manifest_fails(self) -> None:
        manifest = ManifestDescriptor(token="broken", version="latest", sha256="abc")

        report = await audit_manifest(manifest)

        assert report.status == AuditStatus.FAIL
        assert "you should use version :latest instead of version 'latest'" in report.errors
        assert "sha256 string must be of 64 hexadecimal characters" in report.errors
        assert "a url stanza is required" in report.errors

    @pytest.mark.asyncio
    async def test_custom_denylist(self) -> None:
        manifest = _manifest(tap={"user": "Homebrew", "repo": "cask", "official": True})

        report = await audit_manifest(
            manifest, denylist=StaticDenylist({"example-app": "maintained upstream"})
        )

        assert report.errors == ["example-app is not allowed: maintained upstream"]
        assert report.diagnostics[0].check == "check_denylist"
