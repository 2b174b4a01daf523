"""Shared fixtures: repository index archives on disk and a recording reporter."""

import io
import os
import tarfile

import pytest

from fetch.reporter import Reporter


def write_index(path, entries):
    """Write a gzipped index tarball listing ``name-version`` style entries.

    Args:
        path: Destination file.
        entries: Iterable of (name, version) tuples.
    """
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with tarfile.open(path, "w:gz") as archive:
        for name, version in entries:
            body = f"name: {name}\nversion: {version}\n".encode("utf-8")
            info = tarfile.TarInfo(name=f"{name}/{version}/{name}.cabal")
            info.size = len(body)
            archive.addfile(info, io.BytesIO(body))
    return path


class RecordingReporter(Reporter):
    """Keep notifications in memory as ``(kind, payload)`` tuples."""

    def __init__(self):
        self.events = []

    def message(self, level, text):
        self.events.append(("message", text))

    def pkg_is_present(self, pkg):
        self.events.append(("present", pkg))

    def downloading_pkg(self, pkg):
        self.events.append(("downloading", pkg))

    def kinds(self):
        return [kind for kind, _ in self.events]


@pytest.fixture
def make_index():
    return write_index
