"""Tests for mapping packument versions onto releases."""

from registry.npm.models import NpmDependency
from registry.npm.releases import map_releases

from conftest import make_packument


def _dep(**kwargs):
    fields = {"name": "foobar", "registry_url": "https://registry.npmjs.org/"}
    fields.update(kwargs)
    return NpmDependency(**fields)


class TestMapReleases:
    """Test Release construction from the version map."""

    def test_preserves_registry_order(self):
        packument = make_packument(versions={"2.0.0": {}, "1.0.0": {}, "10.0.0": {}})
        releases = map_releases(packument, _dep())
        assert [r.version for r in releases] == ["2.0.0", "1.0.0", "10.0.0"]

    def test_copies_version_fields(self):
        releases = map_releases(make_packument(), _dep(source_url="https://github.com/renovateapp/dummy"))
        first, second = releases
        assert first.git_ref == "abc123"
        assert first.dependencies == {"left-pad": "^1.0.0"}
        assert first.release_timestamp == "2018-05-06T07:21:53+02:00"
        assert second.dev_dependencies == {"jest": "^27.0.0"}
        assert second.dependencies is None

    def test_missing_time_entry(self):
        packument = make_packument(time={"0.0.1": "2018-05-06T07:21:53+02:00"})
        releases = map_releases(packument, _dep())
        assert releases[1].release_timestamp is None
        assert "releaseTimestamp" not in releases[1].to_dict()

    def test_deprecated_versions_flagged(self):
        packument = make_packument(versions={
            "1.0.0": {"deprecated": "use 2.x"},
            "1.0.1": {"deprecated": ""},
            "2.0.0": {},
        })
        releases = map_releases(packument, _dep())
        assert releases[0].is_deprecated is True
        assert releases[1].is_deprecated is None
        assert releases[2].is_deprecated is None

    def test_same_source_omits_override(self):
        """A release inheriting the package source carries no override keys."""
        dep = _dep(source_url="https://github.com/renovateapp/dummy")
        releases = map_releases(make_packument(), dep)
        assert releases[0].source_url is None
        assert "sourceUrl" not in releases[0].to_dict()
        assert "sourceDirectory" not in releases[0].to_dict()

    def test_different_source_is_override(self):
        packument = make_packument(versions={
            "1.0.0": {"repository": "https://github.com/old/repo"},
            "2.0.0": {"repository": {"url": "https://github.com/new/repo", "directory": "pkg"}},
        })
        dep = _dep(source_url="https://github.com/new/repo")
        releases = map_releases(packument, dep)
        assert releases[0].source_url == "https://github.com/old/repo"
        assert releases[1].source_url is None
        assert releases[1].source_directory == "pkg"

    def test_non_mapping_time_ignored(self):
        packument = make_packument(time=["2018-05-06T07:21:53+02:00"])
        releases = map_releases(packument, _dep())
        assert [r.release_timestamp for r in releases] == [None, None]
