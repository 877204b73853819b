"""Tests for the release feed content check."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from caskaudit.audit.checks.appcast import check_appcast_contains_version, expected_feed_version
from caskaudit.audit.context import AuditContext
from caskaudit.config import resolve_config
from caskaudit.contracts import ManifestDescriptor, Severity
from caskaudit.remote import BROWSER_USER_AGENT, FEED_TIMEOUT_S, FetchResult, RemoteMetadataClient

FEED_URL = "https://example.com/feed.xml"


def _manifest(**overrides: Any) -> ManifestDescriptor:
    fields: dict[str, Any] = {
        "token": "example-app",
        "version": "2.4.1,2041",
        "appcast": FEED_URL,
    }
    fields.update(overrides)
    return ManifestDescriptor.model_validate(fields)


@pytest.fixture
def client() -> AsyncMock:
    """Remote client returning a feed that mentions 2.4.1."""
    mock = AsyncMock(spec=RemoteMetadataClient)
    mock.fetch_url_content.return_value = FetchResult(
        url=FEED_URL, ok=True, content="<item><version>2.4.1</version></item>", status=200
    )
    return mock


def _context(client: AsyncMock, manifest: ManifestDescriptor | None = None, **config: Any) -> AuditContext:
    config.setdefault("appcast", True)
    return AuditContext(
        manifest or _manifest(),
        config=resolve_config(**config),
        client=client,
    )


class TestExpectedFeedVersion:
    """Tests for expected_feed_version."""

    def test_leading_run_of_version(self) -> None:
        assert expected_feed_version(_manifest()) == "2.4.1"

    def test_must_contain_wins(self) -> None:
        manifest = _manifest(appcast={"url": FEED_URL, "must_contain": "2041"})
        assert expected_feed_version(manifest) == "2041"

    def test_no_version(self) -> None:
        assert expected_feed_version(_manifest(version=None)) is None


class TestAppcastContainsVersion:
    """Tests for check_appcast_contains_version."""

    @pytest.mark.asyncio
    async def test_feed_mentions_version(self, client: AsyncMock) -> None:
        assert await check_appcast_contains_version(_context(client)) == []

        client.fetch_url_content.assert_awaited_once_with(
            FEED_URL, timeout_s=FEED_TIMEOUT_S, user_agent=BROWSER_USER_AGENT
        )

    @pytest.mark.asyncio
    async def test_feed_missing_version(self, client: AsyncMock) -> None:
        client.fetch_url_content.return_value = FetchResult(
            url=FEED_URL, ok=True, content="<item>1.0</item>", status=200
        )

        diagnostics = await check_appcast_contains_version(_context(client))

        assert len(diagnostics) == 1
        assert diagnostics[0].severity == Severity.WARNING
        assert diagnostics[0].message == (
            f"appcast at URL '{FEED_URL}' does not contain the version number '2.4.1':\n"
            "<item>1.0</item>"
        )

    @pytest.mark.asyncio
    async def test_feed_offline(self, client: AsyncMock) -> None:
        client.fetch_url_content.return_value = FetchResult(
            url=FEED_URL, ok=False, error="too many redirects"
        )

        diagnostics = await check_appcast_contains_version(_context(client))

        assert [d.message for d in diagnostics] == [
            f"appcast at URL '{FEED_URL}' offline or looping"
        ]
        assert diagnostics[0].severity == Severity.ERROR

    @pytest.mark.asyncio
    async def test_must_contain_no_check_skips_fetch(self, client: AsyncMock) -> None:
        manifest = _manifest(appcast={"url": FEED_URL, "must_contain": "no_check"})

        assert await check_appcast_contains_version(_context(client, manifest)) == []
        client.fetch_url_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_without_appcast_flag(self, client: AsyncMock) -> None:
        assert await check_appcast_contains_version(_context(client, appcast=False)) == []
        client.fetch_url_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_feed(self, client: AsyncMock) -> None:
        manifest = _manifest(appcast=None)
        assert await check_appcast_contains_version(_context(client, manifest)) == []
        client.fetch_url_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_client(self) -> None:
        context = AuditContext(_manifest(), config=resolve_config(appcast=True))
        assert await check_appcast_contains_version(context) == []
