"""Tests for version normalization and comparison."""

import pytest

from npm_report.core.versions import (
    IncomparableVersionError,
    Ordering,
    RangeExpression,
    SemVer,
    Unbounded,
    UnparsableVersion,
    compare,
    parse_version,
)


class TestExactVersions:
    """Test exact semantic versions."""

    @pytest.mark.parametrize("text", [
        "1.0.0",
        "0.0.8",
        "10.20.30",
        "1.0.0-alpha.1",
        "2.0.0-rc.1+build.5",
        "1.0.0+20130313144700",
    ])
    def test_render_and_reparse(self, text):
        """Test that rendering then parsing again yields an equal version."""
        version = parse_version(text)
        assert isinstance(version, SemVer)
        assert str(version) == text
        assert parse_version(str(version)) == version

    def test_leading_v_is_accepted(self):
        """Test that a 'v' prefix is dropped."""
        version = parse_version("v1.2.3")
        assert version == SemVer(1, 2, 3)
        assert str(version) == "1.2.3"

    def test_fields(self):
        """Test that components are split out."""
        version = SemVer.parse("3.4.5-beta.2+exp.sha")
        assert (version.major, version.minor, version.patch) == (3, 4, 5)
        assert version.prerelease == ("beta", "2")
        assert version.build == ("exp", "sha")
        assert version.is_prerelease

    def test_parse_rejects_ranges(self):
        """Test that SemVer.parse only takes exact versions."""
        with pytest.raises(ValueError):
            SemVer.parse("^1.2.3")


class TestOrdering:
    """Test semver precedence."""

    def test_numeric_components(self):
        """Test that components compare numerically, not lexically."""
        assert parse_version("1.0.0") < parse_version("1.2.0") < parse_version("2.0.0")
        assert parse_version("1.10.0") > parse_version("1.9.0")

    def test_prerelease_precedes_release(self):
        """Test that a pre-release sorts before its release."""
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0")

    def test_prerelease_identifiers(self):
        """Test the pre-release tie-break rules."""
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        versions = [parse_version(text) for text in ordered]
        assert sorted(reversed(versions)) == versions

    def test_build_metadata_ignored_for_order(self):
        """Test that build metadata does not affect precedence."""
        left, right = parse_version("1.0.0+a"), parse_version("1.0.0+b")
        assert compare(left, right) is Ordering.EQUAL
        assert left != right

    def test_compare(self):
        """Test the non-raising comparison."""
        assert compare(parse_version("1.0.0"), parse_version("1.0.1")) is Ordering.LESS
        assert compare(parse_version("2.0.0"), parse_version("1.0.1")) is Ordering.GREATER
        assert compare(parse_version("1.0.0"), parse_version("v1.0.0")) is Ordering.EQUAL


class TestNonExactVersions:
    """Test ranges, unbounded markers and unparsable values."""

    @pytest.mark.parametrize("text", [
        "^1.2.0",
        "~1.2.0",
        ">=1.0.0 <2.0.0",
        "1.2.3 - 2.3.4",
        "1.x",
        "1.2.*",
        "<0.2.1 || >=1.0.0 <1.2.3",
        ">= 1.2.3",
        "< 1",
        "^ 2.0.0",
    ])
    def test_ranges(self, text):
        """Test that ranges are kept as range expressions."""
        version = parse_version(text)
        assert isinstance(version, RangeExpression)
        assert str(version) == text

    def test_range_contains(self):
        """Test range membership."""
        caret = parse_version("^1.2.0")
        assert caret.contains(SemVer.parse("1.9.0"))
        assert not caret.contains(SemVer.parse("2.0.0"))

    def test_blank_after_comparator(self):
        """Test that a blank between comparator and operand keeps the range."""
        spaced = parse_version(">= 1.2.3 < 2")
        assert isinstance(spaced, RangeExpression)
        assert spaced.raw == ">= 1.2.3 < 2"
        assert spaced.contains(SemVer.parse("1.5.0"))
        assert not spaced.contains(SemVer.parse("1.2.2"))
        assert not spaced.contains(SemVer.parse("2.0.0"))

    @pytest.mark.parametrize("text", ["latest", "*", "LATEST"])
    def test_unbounded(self, text):
        """Test that 'latest' and '*' are an explicit marker, not an error."""
        version = parse_version(text)
        assert isinstance(version, Unbounded)
        assert str(version) == text

    @pytest.mark.parametrize("text", [
        "git+https://github.com/user/repo.git#abc123",
        "file:../local-package",
        "linked",
        "",
        "1.2.3-",
        "1.2.3+",
    ])
    def test_unparsable_keeps_text(self, text):
        """Test that garbage is preserved verbatim."""
        version = parse_version(text)
        assert isinstance(version, UnparsableVersion)
        assert version.raw == text

    def test_non_string_values(self):
        """Test that non-string JSON values never raise."""
        assert parse_version(1) == UnparsableVersion("1")
        assert parse_version(None) == UnparsableVersion("null")
        assert parse_version({"v": 1}) == UnparsableVersion('{"v": 1}')


class TestIncomparable:
    """Test comparisons with no defined order."""

    @pytest.mark.parametrize("other", ["^1.0.0", "latest", "file:../x"])
    def test_compare_reports_incomparable(self, other):
        """Test that compare never invents an order."""
        exact = parse_version("1.0.0")
        assert compare(exact, parse_version(other)) is Ordering.INCOMPARABLE
        assert compare(parse_version(other), exact) is Ordering.INCOMPARABLE

    def test_operators_raise(self):
        """Test that ordering operators refuse mixed types."""
        exact = parse_version("1.0.0")
        with pytest.raises(IncomparableVersionError):
            exact < parse_version("^1.0.0")
        with pytest.raises(IncomparableVersionError):
            parse_version("latest") > exact

    def test_incomparable_is_type_error(self):
        """Test that sorting mixed values fails like any unorderable sort."""
        with pytest.raises(TypeError):
            sorted([parse_version("1.0.0"), parse_version("file:../x")])
