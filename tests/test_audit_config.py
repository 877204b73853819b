"""Tests for audit configuration resolution."""

from __future__ import annotations

import pytest

from caskaudit.config import AuditConfig, resolve_config


class TestResolveConfig:
    """Tests for the implication cascade."""

    def test_all_unset_resolves_false(self) -> None:
        config = resolve_config()
        assert config == AuditConfig()
        assert not any(
            [
                config.appcast,
                config.online,
                config.strict,
                config.new_cask,
                config.download,
                config.token_conflicts,
            ]
        )

    def test_new_cask_enables_everything(self) -> None:
        config = resolve_config(new_cask=True)
        assert config.new_cask
        assert config.online
        assert config.strict
        assert config.appcast
        assert config.download
        assert config.token_conflicts

    def test_new_cask_with_online_false(self) -> None:
        """Explicit online=False stops appcast and download but not strict."""
        config = resolve_config(new_cask=True, online=False)
        assert not config.online
        assert not config.appcast
        assert not config.download
        assert config.strict
        assert config.token_conflicts

    def test_online_only(self) -> None:
        config = resolve_config(online=True)
        assert config.appcast
        assert config.download
        assert not config.strict
        assert not config.token_conflicts
        assert not config.new_cask

    def test_strict_only(self) -> None:
        config = resolve_config(strict=True)
        assert config.token_conflicts
        assert not config.online
        assert not config.appcast

    def test_explicit_values_never_overwritten(self) -> None:
        config = resolve_config(new_cask=True, appcast=False, token_conflicts=False)
        assert config.online
        assert not config.appcast
        assert config.download
        assert config.strict
        assert not config.token_conflicts

    def test_quarantine_passed_through(self) -> None:
        assert resolve_config(quarantine=True).quarantine is True
        assert resolve_config().quarantine is None

    def test_path_separator(self) -> None:
        assert resolve_config().path_separator == "/"
        assert resolve_config(path_separator="\\").path_separator == "\\"


class TestAuditConfig:
    """Tests for AuditConfig validation."""

    @pytest.mark.parametrize("separator", ["", "//"])
    def test_invalid_path_separator(self, separator: str) -> None:
        with pytest.raises(ValueError, match="path_separator"):
            AuditConfig(path_separator=separator)

    def test_frozen(self) -> None:
        config = AuditConfig()
        with pytest.raises(AttributeError):
            config.strict = True  # type: ignore[misc]
