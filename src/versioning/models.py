"""Data models for versions, package identities and dependencies."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

from packaging.specifiers import Specifier, SpecifierSet

if TYPE_CHECKING:
    from repository.models import Repository

_COMPARATORS = {
    "==": operator.eq,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}


def _clause_matches(spec: Specifier, branch: Tuple[int, ...]) -> bool:
    bound = spec.version
    if bound.endswith(".*"):
        prefix = tuple(int(part) for part in bound[:-2].split("."))
        return branch[:len(prefix)] == prefix
    return _COMPARATORS[spec.operator](branch, tuple(int(part) for part in bound.split(".")))


@dataclass(frozen=True, order=True)
class Version:
    """Dotted numeric version with optional tags, e.g. ``1.2.3-beta``."""
    branch: Tuple[int, ...]
    tags: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.branch) + "".join(f"-{tag}" for tag in self.tags)


@dataclass(frozen=True, order=True)
class PackageIdentity:
    """A package name pinned to one version."""
    name: str
    version: Version

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


@dataclass(frozen=True)
class VersionRange:
    """Disjunction of specifier sets; no alternatives means any version."""
    raw: str = "-any"
    alternatives: Tuple[SpecifierSet, ...] = field(default=(), compare=False)

    def contains(self, version: Version) -> bool:
        """Check the numeric branch against each alternative.

        Branches compare as integer tuples, so ``1.0`` and ``1.0.0`` differ;
        ``packaging`` would pad them to equal.
        """
        if not self.alternatives:
            return True
        return any(
            all(_clause_matches(spec, version.branch) for spec in specs)
            for specs in self.alternatives
        )

    def is_any(self) -> bool:
        return not self.alternatives

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Dependency:
    """A package name constrained by a version range."""
    name: str
    version_range: VersionRange = field(default_factory=VersionRange)

    def accepts(self, pkg: PackageIdentity) -> bool:
        return pkg.name == self.name and self.version_range.contains(pkg.version)

    def __str__(self) -> str:
        if self.version_range.is_any():
            return self.name
        return f"{self.name} ({self.version_range})"


@dataclass(frozen=True)
class UnresolvedDependency:
    """Requested dependency before resolution, with per-request options."""
    dependency: Dependency
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedPackage:
    """Resolution outcome for one dependency.

    Exactly one of ``installed`` or ``package``/``repo`` is set.
    """
    dependency: Dependency
    installed: Optional[PackageIdentity] = None
    package: Optional[PackageIdentity] = None
    repo: Optional[Repository] = None
