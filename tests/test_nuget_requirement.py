"""Tests for NuGet version and requirement parsing."""

import pytest

from versioning.errors import RequirementParseError
from versioning.requirement import (
    NuGetRequirement,
    has_prerelease_token,
    parse_requirement_string,
    requirements_array,
)
from versioning.version import is_prerelease, is_valid_version, parse_version, release_core


def v(text):
    return parse_version(text)


class TestParseVersion:
    """Test NuGet version parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("1.0.0", "1.0.0"),
        ("1.2", "1.2.0"),
        ("3", "3.0.0"),
        ("2.0.0-beta", "2.0.0-beta"),
        ("2.0.0-rc.1", "2.0.0-rc.1"),
        ("1.0.0-beta.01", "1.0.0-beta.1"),
    ])
    def test_parses_common_forms(self, text, expected):
        """Test short, full and prerelease forms."""
        assert str(parse_version(text)) == expected

    def test_revision_segment_is_ordered(self):
        """Test the fourth segment takes part in precedence."""
        assert v("1.2.3.4").revision == 4
        assert str(v("1.2.3.4")) == "1.2.3.4"
        assert v("1.2.3") < v("1.2.3.4") < v("1.2.3.5") < v("1.2.4")
        assert v("1.2.3.0") == v("1.2.3")
        assert max([v("1.2.3.4"), v("1.2.3.5")]) == v("1.2.3.5")

    def test_build_metadata_is_ignored(self):
        """Test build metadata does not affect equality or order."""
        assert v("1.0.0+abc") == v("1.0.0")
        assert not v("1.0.0+abc") > v("1.0.0")

    def test_prerelease_labels_compare_case_insensitively(self):
        """Test label case does not matter."""
        assert v("1.0.0-Beta") == v("1.0.0-beta")
        assert v("1.0.0-ALPHA") < v("1.0.0-beta")

    def test_invalid_versions(self):
        """Test garbage is rejected."""
        assert not is_valid_version("latest")
        assert not is_valid_version("")
        assert not is_valid_version(None)
        with pytest.raises(ValueError):
            parse_version("abc")

    @pytest.mark.parametrize("text", ["1.0.0.0.1", "2.a", "1.0.0.beta"])
    def test_rejects_dotted_labels_and_extra_segments(self, text):
        """Test only a hyphen introduces a prerelease label."""
        assert not is_valid_version(text)

    def test_prerelease_ordering(self):
        """Test prereleases sort below their release."""
        assert v("2.0.0-alpha") < v("2.0.0-beta") < v("2.0.0")
        assert v("2.0.0-rc.2") < v("2.0.0-rc.10")
        assert v("2.0.0-1") < v("2.0.0-a")

    def test_release_core(self):
        """Test release core drops the prerelease label but keeps the revision."""
        assert is_prerelease(v("2.0.0-beta"))
        assert release_core(v("2.0.0-beta")) == v("2.0.0")
        assert release_core(v("2.0.0.1-beta")) == v("2.0.0.1")
        assert not is_prerelease(release_core(v("2.0.0.1-beta")))


class TestParseRequirementString:
    """Test parse_requirement_string heuristics."""

    def test_bracket_range_is_kept_whole(self):
        """Test interval notation is not split on its comma."""
        assert parse_requirement_string("[1.0,2.0)") == "[1.0,2.0)"

    def test_comparators_are_split(self):
        """Test comma separated clauses are split and stripped."""
        assert parse_requirement_string(">= 1.0, < 2.0") == [">= 1.0", "< 2.0"]

    def test_hyphen_detection(self):
        """Test prerelease-range tokens are detected by hyphen."""
        assert has_prerelease_token("1.0.0-beta")
        assert has_prerelease_token("[1.0.0-alpha,2.0.0)")
        assert not has_prerelease_token(">= 1.0, < 2.0")
        assert not has_prerelease_token(None)


class TestNuGetRequirement:
    """Test NuGetRequirement matching."""

    @pytest.mark.parametrize("requirement,inside,outside", [
        ("[1.1.0,1.1.0]", ["1.1.0"], ["1.0.0", "1.1.1"]),
        ("[1.0,2.0)", ["1.0.0", "1.9.9"], ["0.9.0", "2.0.0"]),
        ("(1.0,)", ["1.0.1", "9.0.0"], ["1.0.0"]),
        ("(,1.5]", ["1.0.0", "1.5.0"], ["1.5.1"]),
        ("[1.2.3]", ["1.2.3"], ["1.2.4"]),
        ("1.2.*", ["1.2.0", "1.2.9"], ["1.3.0", "1.1.9"]),
        ("*", ["0.0.1", "5.0.0"], []),
        (">= 1.0, < 2.0", ["1.0.0", "1.5.0"], ["2.0.0", "0.1.0"]),
        ("> 2.0.0-a", ["2.0.0-beta", "2.0.0"], ["1.9.0"]),
        ("[1.2.3.4]", ["1.2.3.4"], ["1.2.3.5", "1.2.3"]),
        ("!= 1.2.3.4", ["1.2.3.5"], ["1.2.3.4"]),
        ("[1.0.0-Beta]", ["1.0.0-beta"], ["1.0.0"]),
        ("~> 1.2.0", ["1.2.0", "1.2.7"], ["1.3.0"]),
        ("~> 1.2", ["1.2.0", "1.9.0"], ["2.0.0"]),
        ("!= 1.1.0", ["1.0.0"], ["1.1.0"]),
        ("1.1.0", ["1.1.0"], ["1.1.1"]),
    ])
    def test_satisfied_by(self, requirement, inside, outside):
        """Test range, wildcard and comparator forms."""
        req = NuGetRequirement(requirement)
        for text in inside:
            assert req.satisfied_by(v(text)), f"{text} should satisfy {requirement}"
        for text in outside:
            assert not req.satisfied_by(v(text)), f"{text} should not satisfy {requirement}"

    @pytest.mark.parametrize("requirement", ["[", "[,]", "(1.0]", ">= banana", "1.0,", "[1.0,abc)"])
    def test_malformed_requirements(self, requirement):
        """Test malformed input raises RequirementParseError."""
        with pytest.raises(RequirementParseError):
            NuGetRequirement(requirement)

    def test_shares_release_with(self):
        """Test release-core comparison across constraints."""
        req = requirements_array("[2.0.0-alpha,3.0.0)")[0]

        assert req.shares_release_with(v("2.0.0-rc"))
        assert req.shares_release_with(v("3.0.0-preview"))
        assert not req.shares_release_with(v("2.1.0-beta"))
