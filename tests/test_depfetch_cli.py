"""Tests for the depfetch command line entry point."""

import json
from unittest.mock import patch

import pytest

import depfetch
from common.errors import HttpError
from constants import Constants, ExitCodes

from conftest import FakeFetch, make_packument


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for attr in ("NPM_CACHE_MINUTES", "NPM_PUBLIC_SCOPES", "REGISTRY_URL_NPM", "CACHE_DIR"):
        monkeypatch.setattr(Constants, attr, getattr(Constants, attr))
    for var in (Constants.ENV_CONFIG, Constants.ENV_CACHE_NPM_MINUTES, Constants.ENV_CACHE_DIR):
        monkeypatch.delenv(var, raising=False)


class TestMain:
    """Test end-to-end CLI runs with a stubbed fetcher."""

    @patch("registry.npm.client.get_json")
    def test_outputs_json(self, mock_get_json, tmp_path):
        mock_get_json.side_effect = FakeFetch(body=make_packument())
        out = tmp_path / "out.json"
        code = depfetch.main(["-p", "foobar", "--cache-dir", str(tmp_path / "cache"), "-o", str(out)])
        assert code == ExitCodes.SUCCESS.value
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["foobar"]["sourceUrl"] == "https://github.com/renovateapp/dummy"
        assert [r["version"] for r in data["foobar"]["releases"]] == ["0.0.1", "0.0.2"]

    @patch("registry.npm.client.get_json")
    def test_missing_package_is_null(self, mock_get_json, capsys):
        mock_get_json.side_effect = HttpError("missing", status_code=404)
        code = depfetch.main(["-p", "missing-pkg", "--no-persistent-cache"])
        assert code == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out) == {"missing-pkg": None}

    @patch("registry.npm.client.get_json")
    def test_host_failure_exit_code(self, mock_get_json):
        mock_get_json.side_effect = HttpError("boom", status_code=500, name="HTTPError")
        code = depfetch.main(["-p", "foobar", "--no-persistent-cache", "-q"])
        assert code == ExitCodes.CONNECTION_ERROR.value

    @patch("registry.npm.client.get_json")
    def test_persistent_cache_reused_across_runs(self, mock_get_json, tmp_path):
        fetch = FakeFetch(body=make_packument())
        mock_get_json.side_effect = fetch
        argv = ["-p", "foobar", "--cache-dir", str(tmp_path / "cache"), "-q"]
        assert depfetch.main(argv) == ExitCodes.SUCCESS.value
        assert depfetch.main(argv) == ExitCodes.SUCCESS.value
        assert len(fetch.calls) == 1

    @patch("registry.npm.client.get_json")
    def test_load_list(self, mock_get_json, tmp_path, capsys):
        mock_get_json.side_effect = FakeFetch(body=make_packument())
        listing = tmp_path / "packages.txt"
        listing.write_text("foobar\n# comment\n\nfoobar  # duplicate\n", encoding="utf-8")
        code = depfetch.main(["-l", str(listing), "--no-persistent-cache"])
        assert code == ExitCodes.SUCCESS.value
        assert list(json.loads(capsys.readouterr().out)) == ["foobar"]

    def test_missing_list_file(self, tmp_path):
        code = depfetch.main(["-l", str(tmp_path / "nope.txt")])
        assert code == ExitCodes.FILE_ERROR.value
