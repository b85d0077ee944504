"""Tests for repository field normalization."""

from registry.npm.models import PackageSource, RepositoryForm
from registry.npm.source import get_package_source, parse_repository


class TestParseRepository:
    """Test classification of raw repository fields."""

    def test_string_form(self):
        ref = parse_repository("https://github.com/owner/repo")
        assert ref.form is RepositoryForm.STRING
        assert ref.url == "https://github.com/owner/repo"

    def test_object_form(self):
        ref = parse_repository({"type": "git", "url": "git://x/y", "directory": "pkg"})
        assert ref.form is RepositoryForm.OBJECT
        assert ref.url == "git://x/y"
        assert ref.directory == "pkg"

    def test_absent_and_unknown_shapes(self):
        for raw in (None, "", 42, ["a"], True):
            assert parse_repository(raw).form is RepositoryForm.ABSENT

    def test_object_with_non_string_fields(self):
        ref = parse_repository({"url": 12, "directory": ""})
        assert ref.form is RepositoryForm.OBJECT
        assert ref.url is None
        assert ref.directory is None


class TestGetPackageSource:
    """Test source URL and directory derivation."""

    def test_string_repository(self):
        source = get_package_source("https://gitlab.com/owner/repo")
        assert source == PackageSource(source_url="https://gitlab.com/owner/repo")

    def test_object_repository_with_directory(self):
        source = get_package_source({"url": "https://github.com/owner/repo", "directory": "packages/a"})
        assert source.source_url == "https://github.com/owner/repo"
        assert source.source_directory == "packages/a"

    def test_directory_without_url(self):
        source = get_package_source({"directory": "packages/a"})
        assert source.source_url is None
        assert source.source_directory == "packages/a"

    def test_github_tree_url_is_truncated(self):
        """Deep GitHub links become the repo URL plus a directory."""
        source = get_package_source("https://github.com/owner/repo/tree/master/packages/sub")
        assert source.source_url == "https://github.com/owner/repo"
        assert source.source_directory == "packages/sub"

    def test_github_tree_url_keeps_explicit_directory(self):
        source = get_package_source({
            "url": "https://github.com/owner/repo/tree/master/packages/sub",
            "directory": "explicit/dir",
        })
        assert source.source_url == "https://github.com/owner/repo"
        assert source.source_directory == "explicit/dir"

    def test_short_github_url_untouched(self):
        url = "https://github.com/owner/repo/tree/master"
        source = get_package_source(url)
        assert source.source_url == url
        assert source.source_directory is None

    def test_non_github_deep_url_untouched(self):
        url = "https://gitlab.com/owner/repo/-/tree/master/packages/sub"
        source = get_package_source(url)
        assert source.source_url == url
        assert source.source_directory is None

    def test_unknown_shape_yields_empty_source(self):
        assert get_package_source(["not", "a", "repo"]) == PackageSource()
        assert get_package_source(None) == PackageSource()
