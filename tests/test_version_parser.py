"""Tests for version, package identifier and dependency parsing."""

import pytest

from common.errors import DependencyParseError, ErrorKind
from versioning.models import Dependency, PackageIdentity, Version
from versioning.parser import (
    is_valid_package_name,
    parse_dependency,
    parse_package_id,
    parse_requests,
    parse_version,
)


class TestVersion:
    """Tests for Version parsing and rendering."""

    def test_parse_branch(self):
        assert parse_version("1.2.3") == Version((1, 2, 3))

    def test_parse_tags(self):
        v = parse_version("0.4-beta-2007")
        assert v.branch == (0, 4)
        assert v.tags == ("beta", "2007")
        assert str(v) == "0.4-beta-2007"

    def test_render_is_stable(self):
        assert str(Version((1, 0))) == "1.0"
        assert str(Version((1, 0))) == str(Version((1, 0)))

    def test_ordering(self):
        assert parse_version("1.10") > parse_version("1.9")
        assert parse_version("2") > parse_version("1.99.99")

    @pytest.mark.parametrize("text", ["", "a.b", "1..2", "1.2.", "-1"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_version(text)


class TestPackageIdentity:
    """Tests for canonical package identifiers."""

    def test_canonical_string(self):
        pkg = PackageIdentity("foo", Version((1, 2)))
        assert str(pkg) == "foo-1.2"

    def test_parse_hyphenated_name(self):
        pkg = parse_package_id("haskell-src-exts-1.0.1")
        assert pkg.name == "haskell-src-exts"
        assert pkg.version == Version((1, 0, 1))

    def test_parse_with_tags(self):
        pkg = parse_package_id("foo-1.0-rc1")
        assert pkg == PackageIdentity("foo", Version((1, 0), ("rc1",)))
        assert str(pkg) == "foo-1.0-rc1"

    def test_parse_numeric_suffix_in_name(self):
        pkg = parse_package_id("base64-string-0.1")
        assert pkg.name == "base64-string"

    def test_rejects_missing_version(self):
        with pytest.raises(ValueError):
            parse_package_id("foo")

    def test_name_rules(self):
        assert is_valid_package_name("foo-bar2")
        assert not is_valid_package_name("foo-1")
        assert not is_valid_package_name("foo_bar")


class TestParseDependency:
    """Tests for dependency expressions."""

    def test_bare_name(self):
        dep = parse_dependency("foo")
        assert dep == Dependency("foo")
        assert dep.version_range.is_any()
        assert str(dep) == "foo"

    def test_parenthesised_range(self):
        dep = parse_dependency("foo (>= 1.2 && < 2)")
        assert dep.name == "foo"
        assert dep.version_range.contains(parse_version("1.2"))
        assert dep.version_range.contains(parse_version("1.9.9"))
        assert not dep.version_range.contains(parse_version("2.0"))
        assert not dep.version_range.contains(parse_version("1.1"))

    def test_unparenthesised_range(self):
        dep = parse_dependency("foo-bar >= 0.3")
        assert dep.name == "foo-bar"
        assert dep.version_range.contains(parse_version("0.3"))

    def test_disjunction(self):
        dep = parse_dependency("foo (< 1 || >= 3)")
        assert dep.version_range.contains(parse_version("0.9"))
        assert dep.version_range.contains(parse_version("3.1"))
        assert not dep.version_range.contains(parse_version("2"))

    def test_wildcard(self):
        dep = parse_dependency("foo == 1.2.*")
        assert dep.version_range.contains(parse_version("1.2.7"))
        assert not dep.version_range.contains(parse_version("1.3"))

    def test_any(self):
        assert parse_dependency("foo -any").version_range.is_any()

    @pytest.mark.parametrize("text, name", [
        ("foo>=1.0", "foo"),
        ("foo-bar>= 1", "foo-bar"),
        ("foo(>=1.0)", "foo"),
        ("foo==1.0", "foo"),
    ])
    def test_range_without_space(self, text, name):
        dep = parse_dependency(text)
        assert dep.name == name
        assert dep.version_range.contains(parse_version("1.0"))
        assert not dep.version_range.contains(parse_version("0.9"))

    def test_trailing_zeros_are_significant(self):
        exact = parse_dependency("foo == 1.0").version_range
        assert exact.contains(parse_version("1.0"))
        assert not exact.contains(parse_version("1.0.0"))
        assert not parse_dependency("foo <= 1.0").version_range.contains(parse_version("1.0.0"))
        assert parse_dependency("foo > 1.0").version_range.contains(parse_version("1.0.0"))

    def test_wildcard_includes_its_prefix(self):
        dep = parse_dependency("foo == 1.2.*")
        assert dep.version_range.contains(parse_version("1.2"))
        assert not dep.version_range.contains(parse_version("1"))

    def test_tags_ignored_in_range_checks(self):
        assert parse_dependency("foo >= 1.0").version_range.contains(parse_version("1.0-beta"))

    @pytest.mark.parametrize("text", [
        "not a valid dep!!",
        "",
        "foo!",
        "foo_bar",
        "foo >=",
        "foo (>= 1.2 &&)",
        "foo ~> 1.0",
        "foo > 1.*",
        "123",
    ])
    def test_rejects_malformed(self, text):
        with pytest.raises(DependencyParseError) as excinfo:
            parse_dependency(text)
        assert excinfo.value.kind == ErrorKind.DEPENDENCY_PARSE

    def test_parse_requests_fails_on_first_bad_entry(self):
        with pytest.raises(DependencyParseError) as excinfo:
            parse_requests(["foo", "bad dep!!", "bar"])
        assert excinfo.value.text == "bad dep!!"

    def test_parse_requests_keeps_order(self):
        deps = parse_requests(["b", "a"])
        assert [d.dependency.name for d in deps] == ["b", "a"]
        assert all(d.options == () for d in deps)
