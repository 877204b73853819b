"""Tests for download and HTTPS availability checks."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, call

import pytest

from caskaudit.audit.checks.transport import check_download, check_https_availability
from caskaudit.audit.context import AuditContext
from caskaudit.audit.download import DownloadError, Downloader
from caskaudit.config import resolve_config
from caskaudit.contracts import ManifestDescriptor, Severity
from caskaudit.remote import BROWSER, RemoteMetadataClient


def _manifest(**overrides: Any) -> ManifestDescriptor:
    fields: dict[str, Any] = {
        "token": "example-app",
        "version": "1.0",
        "url": {"value": "https://example.com/app.dmg", "user_agent": "custom/1.0"},
        "homepage": "https://example.com/",
        "appcast": "https://example.com/feed.xml",
    }
    fields.update(overrides)
    return ManifestDescriptor.model_validate(fields)


@pytest.fixture
def downloader() -> AsyncMock:
    mock = AsyncMock(spec=Downloader)
    mock.download.return_value = Path("/tmp/example-app.dmg")
    return mock


@pytest.fixture
def client() -> AsyncMock:
    mock = AsyncMock(spec=RemoteMetadataClient)
    mock.check_reachability.return_value = None
    return mock


class TestDownload:
    """Tests for check_download."""

    @pytest.mark.asyncio
    async def test_download_and_verify(self, downloader: AsyncMock) -> None:
        context = AuditContext(
            _manifest(),
            config=resolve_config(download=True, quarantine=False),
            downloader=downloader,
        )

        assert await check_download(context) == []

        downloader.download.assert_awaited_once_with(context.manifest, quarantine=False)
        downloader.verify.assert_awaited_once_with(context.manifest, Path("/tmp/example-app.dmg"))

    @pytest.mark.asyncio
    async def test_download_failure(self, downloader: AsyncMock) -> None:
        downloader.download.side_effect = DownloadError("404 Not Found")
        context = AuditContext(
            _manifest(), config=resolve_config(download=True), downloader=downloader
        )

        diagnostics = await check_download(context)

        assert [d.message for d in diagnostics] == ["download not possible: 404 Not Found"]
        assert diagnostics[0].severity == Severity.ERROR
        downloader.verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_failure(self, downloader: AsyncMock) -> None:
        downloader.verify.side_effect = DownloadError("checksum mismatch")
        context = AuditContext(
            _manifest(), config=resolve_config(download=True), downloader=downloader
        )

        diagnostics = await check_download(context)

        assert [d.message for d in diagnostics] == ["download not possible: checksum mismatch"]

    @pytest.mark.asyncio
    async def test_disabled(self, downloader: AsyncMock) -> None:
        context = AuditContext(_manifest(), downloader=downloader)
        assert await check_download(context) == []
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_downloader(self) -> None:
        context = AuditContext(_manifest(), config=resolve_config(download=True))
        assert await check_download(context) == []


class TestHttpsAvailability:
    """Tests for check_https_availability."""

    @pytest.mark.asyncio
    async def test_probes_url_appcast_and_homepage(self, client: AsyncMock) -> None:
        context = AuditContext(_manifest(), config=resolve_config(online=True), client=client)

        assert await check_https_availability(context) == []

        assert client.check_reachability.await_args_list == [
            call("https://example.com/app.dmg", user_agents=["custom/1.0"]),
            call("https://example.com/feed.xml", check_content=True),
            call("https://example.com/", check_content=True, user_agents=[BROWSER]),
        ]

    @pytest.mark.asyncio
    async def test_appcast_skipped_without_appcast_flag(self, client: AsyncMock) -> None:
        context = AuditContext(
            _manifest(), config=resolve_config(download=True), client=client
        )

        await check_https_availability(context)

        probed = [c.args[0] for c in client.check_reachability.await_args_list]
        assert probed == ["https://example.com/app.dmg", "https://example.com/"]

    @pytest.mark.asyncio
    async def test_url_with_download_strategy_skipped(self, client: AsyncMock) -> None:
        manifest = _manifest(url={"value": "https://example.com/repo.git", "using": "git"})
        context = AuditContext(manifest, config=resolve_config(download=True), client=client)

        await check_https_availability(context)

        probed = [c.args[0] for c in client.check_reachability.await_args_list]
        assert probed == ["https://example.com/"]

    @pytest.mark.asyncio
    async def test_problems_become_errors(self, client: AsyncMock) -> None:
        client.check_reachability.side_effect = [
            "The URL https://example.com/app.dmg is not reachable (HTTP status code 404)",
            None,
            "The URL https://example.com/ redirects back to HTTP",
        ]
        context = AuditContext(_manifest(), config=resolve_config(online=True), client=client)

        diagnostics = await check_https_availability(context)

        assert [d.message for d in diagnostics] == [
            "The URL https://example.com/app.dmg is not reachable (HTTP status code 404)",
            "The URL https://example.com/ redirects back to HTTP",
        ]
        assert all(d.severity == Severity.ERROR for d in diagnostics)

    @pytest.mark.asyncio
    async def test_disabled(self, client: AsyncMock) -> None:
        context = AuditContext(_manifest(), client=client)
        assert await check_https_availability(context) == []
        client.check_reachability.assert_not_awaited()
