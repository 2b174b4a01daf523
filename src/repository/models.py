"""Repository model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Repository:
    """A configured package source.

    ``name`` is the repository id used as the cache sub-directory; ``url`` is
    the base for package and index URLs, stored without a trailing slash.
    """

    name: str
    url: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", self.url.rstrip("/"))

    def __str__(self) -> str:
        return f"{self.name} ({self.url})"

    @classmethod
    def from_spec(cls, spec: str) -> "Repository":
        """Build from a ``NAME=URL`` command-line value."""
        name, sep, url = spec.partition("=")
        if not sep or not name.strip() or not url.strip():
            raise ValueError(f"Repository must be given as NAME=URL, got {spec!r}")
        return cls(name=name.strip(), url=url.strip())
