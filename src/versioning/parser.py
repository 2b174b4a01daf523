"""Parsing utilities for versions, package identifiers and dependencies.

Dependency expressions follow the package-description syntax::

    foo
    foo >= 1.2
    foo>=1.2
    foo (>= 1.2 && < 2) || == 3.0.*

The whole string must be consumed; leftovers are a parse error.
"""

import re
from typing import List, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet

from common.errors import DependencyParseError
from .models import Dependency, PackageIdentity, UnresolvedDependency, Version, VersionRange

_NAME_COMPONENT = r"[A-Za-z0-9]*[A-Za-z][A-Za-z0-9]*"
_NAME_RE = re.compile(rf"^{_NAME_COMPONENT}(?:-{_NAME_COMPONENT})*$")
_VERSION_RE = re.compile(r"^(\d+(?:\.\d+)*)((?:-[A-Za-z0-9]+)*)$")
_DEPENDENCY_RE = re.compile(rf"^\s*({_NAME_COMPONENT}(?:-{_NAME_COMPONENT})*)(.*?)\s*$")
_CLAUSE_RE = re.compile(r"^(>=|<=|==|>|<)\s*(\d+(?:\.\d+)*)(\.\*)?$")
_ANY_CLAUSE = "-any"
# A range may follow the name without a separating space.
_RANGE_START = "<>=("


def is_valid_package_name(name: str) -> bool:
    """Names are hyphen-separated alphanumeric components, none purely numeric."""
    return bool(_NAME_RE.match(name))


def parse_version(text: str) -> Version:
    """Parse ``1.2.3`` or ``1.2.3-tag1-tag2`` into a ``Version``."""
    match = _VERSION_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid version: {text!r}")
    branch = tuple(int(part) for part in match.group(1).split("."))
    tags = tuple(tag for tag in match.group(2).split("-") if tag)
    return Version(branch=branch, tags=tags)


def parse_package_id(text: str) -> PackageIdentity:
    """Parse the canonical ``name-version`` string.

    The split happens at the leftmost hyphen whose suffix is a version; name
    components can never be purely numeric, so this is unambiguous.
    """
    text = text.strip()
    for index, char in enumerate(text):
        if char != "-":
            continue
        name, rest = text[:index], text[index + 1:]
        if is_valid_package_name(name) and _VERSION_RE.match(rest):
            return PackageIdentity(name=name, version=parse_version(rest))
    raise ValueError(f"Invalid package identifier: {text!r}")


def _parse_clause(clause: str, source: str) -> str:
    match = _CLAUSE_RE.match(clause)
    if not match:
        raise DependencyParseError(source, f"bad version constraint {clause!r}")
    operator, number, wildcard = match.groups()
    if wildcard and operator != "==":
        raise DependencyParseError(source, f"wildcard only allowed with '==': {clause!r}")
    return f"{operator}{number}{wildcard or ''}"


def _strip_parens(text: str) -> str:
    if text.startswith("(") and text.endswith(")") and "(" not in text[1:-1] and ")" not in text[1:-1]:
        return text[1:-1].strip()
    return text


def parse_version_range(text: str, source: str = "") -> VersionRange:
    """Parse a range expression such as ``>= 1.2 && < 2 || == 3.*``."""
    source = source or text
    stripped = _strip_parens(text.strip())
    if not stripped or stripped == _ANY_CLAUSE:
        return VersionRange()

    alternatives: List[SpecifierSet] = []
    rendered: List[str] = []
    for disjunct in stripped.split("||"):
        clauses = [clause.strip() for clause in _strip_parens(disjunct.strip()).split("&&")]
        if any(not clause for clause in clauses):
            raise DependencyParseError(source, "empty version constraint")
        if clauses == [_ANY_CLAUSE]:
            return VersionRange()
        specs = [_parse_clause(clause, source) for clause in clauses]
        try:
            alternatives.append(SpecifierSet(",".join(specs)))
        except InvalidSpecifier as exc:
            raise DependencyParseError(source, str(exc)) from exc
        rendered.append(" && ".join(clauses))
    return VersionRange(raw=" || ".join(rendered), alternatives=tuple(alternatives))


def parse_dependency(text: str) -> Dependency:
    """Parse a dependency expression; the whole string must be consumed."""
    if not isinstance(text, str):
        raise DependencyParseError(str(text), "not a string")
    match = _DEPENDENCY_RE.match(text)
    if not match:
        raise DependencyParseError(text)
    name, rest = match.group(1), match.group(2)
    if rest and not rest[0].isspace() and rest[0] not in _RANGE_START:
        # e.g. "foo!" or "foo_bar": the name itself is malformed.
        raise DependencyParseError(text, "invalid package name")
    return Dependency(name=name, version_range=parse_version_range(rest, text))


def parse_unresolved(text: str) -> UnresolvedDependency:
    """Parse a requested name into an unresolved-dependency descriptor."""
    return UnresolvedDependency(dependency=parse_dependency(text))


def parse_requests(texts: List[str]) -> Tuple[UnresolvedDependency, ...]:
    """Parse every request up front; the first malformed one raises."""
    return tuple(parse_unresolved(text) for text in texts)
