"""Tests for npm lookup failure classification."""

import pytest

from common.errors import ExternalHostError, HttpError
from common.logging_utils import REDACTED
from registry.npm.errors import classify_error
from registry.npm.models import LookupStatus

PUBLIC = "registry.npmjs.org"
PRIVATE = "npm.example.com"


def _classify(err, host=PUBLIC):
    return classify_error(err, host, "foobar", f"https://{host}/foobar")


class TestClassifyError:
    """Test the failure decision table."""

    @pytest.mark.parametrize("status", [401, 402, 403, 404])
    @pytest.mark.parametrize("host", [PUBLIC, PRIVATE])
    def test_benign_status_codes(self, status, host):
        result = _classify(HttpError("fail", status_code=status, name="HTTPError"), host)
        assert result.status is LookupStatus.NOT_FOUND
        assert result.error is None

    def test_dns_failure_is_not_found(self):
        result = _classify(HttpError("dns", code="ENOTFOUND"))
        assert result.status is LookupStatus.NOT_FOUND

    def test_public_registry_server_error_is_host_failure(self):
        err = HttpError("boom", status_code=500, name="HTTPError")
        result = _classify(err)
        assert result.status is LookupStatus.HOST_FAILURE
        assert isinstance(result.error, ExternalHostError)
        assert result.error.err is err
        assert result.error.host_type == "npm"

    def test_third_party_registry_server_error_is_not_found(self):
        result = _classify(HttpError("boom", status_code=500), PRIVATE)
        assert result.status is LookupStatus.NOT_FOUND

    def test_unexpected_exception_on_public_registry(self):
        result = _classify(ValueError("bad shape"))
        assert result.status is LookupStatus.HOST_FAILURE

    def test_parse_error_body_redacted(self):
        err = HttpError("parse", status_code=200, name="ParseError", body="<html>" + "x" * 5000)
        result = _classify(err)
        assert result.status is LookupStatus.HOST_FAILURE
        assert result.error.err.body == REDACTED

    def test_parse_error_body_kept_on_third_party(self):
        err = HttpError("parse", status_code=200, name="ParseError", body="<html>")
        _classify(err, PRIVATE)
        assert err.body == "<html>"

    def test_other_error_body_not_redacted(self):
        err = HttpError("boom", status_code=500, name="HTTPError", body="server says no")
        _classify(err)
        assert err.body == "server says no"
