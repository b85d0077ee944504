"""Shared fixtures for npm datasource tests."""

import copy

import pytest

from common.http_client import JsonResponse


def make_packument(**overrides):
    """Build a small packument shaped like registry.npmjs.org responses."""
    packument = {
        "name": "foobar",
        "homepage": "https://example.com/foobar",
        "repository": {"type": "git", "url": "https://github.com/renovateapp/dummy"},
        "dist-tags": {"latest": "0.0.2"},
        "versions": {
            "0.0.1": {
                "gitHead": "abc123",
                "dependencies": {"left-pad": "^1.0.0"},
                "repository": {"type": "git", "url": "https://github.com/renovateapp/dummy"},
            },
            "0.0.2": {
                "gitHead": "def456",
                "devDependencies": {"jest": "^27.0.0"},
            },
        },
        "time": {
            "0.0.1": "2018-05-06T07:21:53+02:00",
            "0.0.2": "2018-05-07T07:21:53+02:00",
        },
    }
    packument.update(overrides)
    return packument


class FakeFetch:
    """Records calls and replays a fixed body or raises a fixed error."""

    def __init__(self, body=None, error=None, authorization=None):
        self.body = body
        self.error = error
        self.authorization = authorization
        self.calls = []

    def __call__(self, url, headers=None, **kwargs):
        self.calls.append({"url": url, "headers": dict(headers or {})})
        if self.error is not None:
            raise self.error
        if self.authorization is None:
            authorized = any(k.lower() == "authorization" for k in (headers or {}))
        else:
            authorized = self.authorization
        return JsonResponse(body=copy.deepcopy(self.body), authorization=authorized)


@pytest.fixture
def packument():
    return make_packument()


@pytest.fixture
def fake_fetch(packument):
    return FakeFetch(body=packument)
