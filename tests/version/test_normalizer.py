"""Tests for version normalization."""

from __future__ import annotations

import pytest

from caskaudit.version import ConsumerKind, VersionComponents, normalize_version


class TestNormalizeVersion:
    """Tests for normalize_version."""

    def test_cask_splits_on_commas_and_colons(self) -> None:
        assert normalize_version(ConsumerKind.CASK, "1.0,100:1426778671") == (
            "1.0",
            "100",
            "1426778671",
        )

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2.19.0,1.8.0", ("2.19.0", "1.8.0")),
            ("0.17.0,20210111183933,226", ("0.17.0", "20210111183933", "226")),
        ],
    )
    def test_cask_compound_versions(self, raw: str, expected: tuple[str, ...]) -> None:
        assert normalize_version(ConsumerKind.CASK, raw) == expected

    def test_cask_single_component(self) -> None:
        assert normalize_version(ConsumerKind.CASK, "2.5.1") == ("2.5.1",)

    def test_cask_drops_empty_segments(self) -> None:
        """Leading, trailing and doubled delimiters produce no empty parts."""
        assert normalize_version(ConsumerKind.CASK, ",1.0,,2:") == ("1.0", "2")

    def test_cask_only_delimiters(self) -> None:
        assert normalize_version(ConsumerKind.CASK, ",:,") == ()

    def test_cask_empty_string(self) -> None:
        assert normalize_version(ConsumerKind.CASK, "") == ()

    def test_formula_is_opaque(self) -> None:
        """Formula versions keep delimiters as part of the version."""
        assert normalize_version(ConsumerKind.FORMULA, "1.0,100:1426778671") == (
            "1.0,100:1426778671",
        )

    def test_order_preserved(self) -> None:
        assert normalize_version(ConsumerKind.CASK, "c:b,a") == ("c", "b", "a")


class TestVersionComponents:
    """Tests for VersionComponents."""

    def test_create_and_str(self) -> None:
        components = VersionComponents.create(ConsumerKind.CASK, "3.1,42")
        assert components.versions == ("3.1", "42")
        assert str(components) == "3.1,42"

    @pytest.mark.parametrize("kind", list(ConsumerKind))
    def test_frozen(self, kind: ConsumerKind) -> None:
        components = VersionComponents.create(kind, "1.0")
        with pytest.raises(AttributeError):
            components.raw = "2.0"  # type: ignore[misc]
