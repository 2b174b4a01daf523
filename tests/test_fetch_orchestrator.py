"""End-to-end tests for the batch fetch orchestrator."""

import os
from unittest.mock import patch

import pytest

from conftest import RecordingReporter
from common.errors import DependencyParseError, DownloadFailedError, InvalidStatusError
from fetch.fetcher import fetch, is_fetched
from fetch.models import FetchConfig
from repository.layout import index_file, package_file
from repository.models import Repository
from versioning.models import Dependency, PackageIdentity, ResolvedPackage, UnresolvedDependency, Version
from versioning.parser import parse_package_id

REPO_URL = "http://repo.example.com/archive"


@pytest.fixture
def repo():
    return Repository(name="example", url=REPO_URL)


@pytest.fixture
def cfg(tmp_path, repo):
    return FetchConfig(cache_dir=str(tmp_path / "cache"), repos=[repo])


def _available(name, version, repo):
    pkg = PackageIdentity(name, Version(version))
    return ResolvedPackage(dependency=Dependency(name), package=pkg, repo=repo)


def _write_to_dest(uri, dest_path, **kwargs):
    with open(dest_path, "wb") as fh:
        fh.write(b"tarball")
    return dest_path


class TestFetchWithStubbedResolver:
    """Orchestration with the resolver and transport replaced."""

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_missing_package_is_downloaded(self, mock_resolve, mock_download, cfg, repo):
        mock_resolve.return_value = [_available("foo", (1, 0), repo)]
        mock_download.side_effect = _write_to_dest
        reporter = RecordingReporter()

        paths = fetch(cfg, ["foo"], reporter)

        mock_resolve.assert_called_once_with(
            cfg, cfg.installed, (UnresolvedDependency(Dependency("foo")),)
        )
        pkg = PackageIdentity("foo", Version((1, 0)))
        expected_path = package_file(cfg, pkg, repo)
        mock_download.assert_called_once_with(
            f"{REPO_URL}/foo/1.0/foo-1.0.tar.gz", expected_path, timeout=cfg.timeout
        )
        assert paths == [expected_path]
        assert os.path.isfile(expected_path)
        assert ("downloading", pkg) in reporter.events
        assert ("present", pkg) not in reporter.events

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_cached_package_is_reported_and_skipped(self, mock_resolve, mock_download, cfg, repo):
        mock_resolve.return_value = [_available("foo", (1, 0), repo)]
        pkg = PackageIdentity("foo", Version((1, 0)))
        path = package_file(cfg, pkg, repo)
        os.makedirs(os.path.dirname(path))
        with open(path, "wb") as fh:
            fh.write(b"cached")
        reporter = RecordingReporter()

        paths = fetch(cfg, ["foo"], reporter)

        assert paths == []
        mock_download.assert_not_called()
        assert reporter.events == [("present", pkg)]

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_malformed_name_aborts_before_resolution(self, mock_resolve, mock_download, cfg):
        reporter = RecordingReporter()

        with pytest.raises(DependencyParseError):
            fetch(cfg, ["foo", "not a valid dep!!"], reporter)

        mock_resolve.assert_not_called()
        mock_download.assert_not_called()
        assert reporter.events == []

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_every_target_gets_a_presence_notice(self, mock_resolve, mock_download, cfg, repo):
        cached = _available("cached", (1,), repo)
        missing = _available("missing", (2,), repo)
        mock_resolve.return_value = [cached, missing]
        cached_path = package_file(cfg, cached.package, repo)
        os.makedirs(os.path.dirname(cached_path))
        open(cached_path, "wb").close()
        mock_download.side_effect = _write_to_dest
        reporter = RecordingReporter()

        fetch(cfg, ["cached", "missing"], reporter)

        assert reporter.events[0] == ("present", cached.package)
        assert reporter.events[1] == ("message", "'missing-2' is not present.")
        assert ("downloading", missing.package) in reporter.events
        assert mock_download.call_count == 1

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_first_failure_stops_the_batch(self, mock_resolve, mock_download, cfg, repo):
        first = _available("first", (1,), repo)
        second = _available("second", (1,), repo)
        mock_resolve.return_value = [first, second]
        mock_download.side_effect = InvalidStatusError("http://x", 404)

        with pytest.raises(DownloadFailedError) as excinfo:
            fetch(cfg, ["first", "second"], RecordingReporter())

        assert excinfo.value.package == first.package
        assert mock_download.call_count == 1
        assert not is_fetched(cfg, second.package, repo)

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_downloads_follow_resolver_order(self, mock_resolve, mock_download, cfg, repo):
        mock_resolve.return_value = [_available("b", (1,), repo), _available("a", (1,), repo)]
        mock_download.side_effect = _write_to_dest

        fetch(cfg, ["a", "b"], RecordingReporter())

        urls = [c[0][0] for c in mock_download.call_args_list]
        assert urls == [f"{REPO_URL}/b/1/b-1.tar.gz", f"{REPO_URL}/a/1/a-1.tar.gz"]

    @patch("fetch.fetcher.download_uri_to_path")
    @patch("fetch.fetcher.resolve_dependencies")
    def test_installed_packages_are_not_fetched(self, mock_resolve, mock_download, cfg):
        mock_resolve.return_value = [
            ResolvedPackage(dependency=Dependency("base"), installed=parse_package_id("base-3.0")),
        ]

        assert fetch(cfg, ["base"], RecordingReporter()) == []
        mock_download.assert_not_called()


class TestFetchFromLocalMirror:
    """Full pipeline against a file: repository and a real index."""

    def test_fetch_then_refetch(self, tmp_path, make_index):
        mirror = tmp_path / "mirror"
        tarball = mirror / "foo" / "1.1" / "foo-1.1.tar.gz"
        tarball.parent.mkdir(parents=True)
        tarball.write_bytes(b"foo sources")
        repo = Repository(name="local", url=mirror.as_uri())
        cfg = FetchConfig(cache_dir=str(tmp_path / "cache"), repos=[repo])
        make_index(index_file(cfg, repo), [("foo", "1.0"), ("foo", "1.1")])

        first = fetch(cfg, ["foo >= 1"], RecordingReporter())

        pkg = PackageIdentity("foo", Version((1, 1)))
        assert first == [package_file(cfg, pkg, repo)]
        with open(first[0], "rb") as fh:
            assert fh.read() == b"foo sources"

        reporter = RecordingReporter()
        with patch("fetch.fetcher.download_uri_to_path") as mock_download:
            second = fetch(cfg, ["foo >= 1"], reporter)
        assert second == []
        mock_download.assert_not_called()
        assert reporter.events == [("present", pkg)]
