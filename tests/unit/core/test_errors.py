# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for structured errors and failure-detail extraction."""

import pytest
import requests

from BulkDelete.core._error_codes import HTTP_404, HTTP_429, VALIDATION_BATCH_IN_PROGRESS
from BulkDelete.core.errors import (
    BatchInProgressError,
    BulkDeleteError,
    ConfigurationError,
    HttpError,
    ParsedError,
    parse_api_error,
    pluck_error_detail,
)


def _response(status, body=None, reason="Error"):
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    if body is not None:
        import json

        resp._content = json.dumps(body).encode("utf-8")
    else:
        resp._content = b"<html>oops</html>"
    return resp


class TestStructuredErrors:
    def test_http_error_subcode_and_transient(self):
        err = HttpError("Throttled", 429, body={"detail": "slow down"}).to_dict()
        assert err["code"] == "http_error"
        assert err["subcode"] == HTTP_429
        assert err["is_transient"] is True
        assert err["source"] == "server"
        assert err["details"]["body"] == {"detail": "slow down"}

    def test_http_404_not_transient(self):
        err = HttpError("Not found", 404)
        assert err.subcode == HTTP_404
        assert err.is_transient is False

    def test_configuration_error(self):
        err = ConfigurationError("missing")
        assert isinstance(err, BulkDeleteError)
        assert err.code == "configuration_error"
        assert err.source == "client"

    def test_batch_in_progress(self):
        err = BatchInProgressError()
        assert err.code == "validation_error"
        assert err.subcode == VALIDATION_BATCH_IN_PROGRESS

    def test_timestamp_is_utc(self):
        assert BulkDeleteError("x", code="c").timestamp.endswith("Z")


class TestParseApiError:
    def test_http_error_with_detail_body(self):
        parsed = parse_api_error(HttpError("HTTP 400", 400, body={"detail": "Object is protected"}))
        assert parsed.detail == "Object is protected"
        assert parsed.status_code == 400

    def test_http_error_without_body(self):
        parsed = parse_api_error(HttpError("HTTP 502", 502))
        assert parsed.detail == "HTTP 502"
        assert parsed.code == "http_502"

    def test_validation_body(self):
        parsed = parse_api_error({"non_field_errors": ["a", "b"], "name": ["This field is required."]})
        assert parsed.detail is None
        assert parsed.non_field_errors == ["a", "b"]
        assert parsed.field_errors == {"name": ["This field is required."]}

    def test_error_envelope(self):
        parsed = parse_api_error({"error": {"code": "0x80040217", "message": "Record does not exist"}})
        assert parsed.detail == "Record does not exist"
        assert parsed.code == "0x80040217"

    def test_requests_response_json(self):
        parsed = parse_api_error(_response(403, {"detail": "Permission denied"}))
        assert parsed.detail == "Permission denied"
        assert parsed.status_code == 403

    def test_requests_response_non_json_uses_reason(self):
        parsed = parse_api_error(_response(500, reason="Internal Server Error"))
        assert parsed.detail == "Internal Server Error"
        assert parsed.status_code == 500

    def test_requests_http_error(self):
        err = requests.HTTPError("boom", response=_response(409, {"detail": "Conflict"}))
        assert parse_api_error(err).detail == "Conflict"

    def test_requests_http_error_without_response(self):
        assert parse_api_error(requests.HTTPError("no response")).detail == "no response"

    def test_plain_exception(self):
        assert parse_api_error(RuntimeError("disk full")).detail == "disk full"

    def test_empty_exception(self):
        assert parse_api_error(RuntimeError()) == ParsedError()

    def test_string(self):
        assert parse_api_error("nope").detail == "nope"

    def test_opaque_value(self):
        assert parse_api_error(object()) == ParsedError()


class TestPluckErrorDetail:
    def test_prefers_detail(self):
        parsed = ParsedError(detail="d", non_field_errors=["n"], field_errors={"f": ["x"]})
        assert pluck_error_detail(parsed) == "d"

    def test_non_field_errors_joined(self):
        assert pluck_error_detail(ParsedError(non_field_errors=["a", "b"])) == "a; b"

    def test_first_field_error(self):
        parsed = ParsedError(field_errors={"name": ["required", "too short"], "pk": ["bad"]})
        assert pluck_error_detail(parsed) == "name: required"

    def test_generic_fallback(self):
        assert pluck_error_detail(ParsedError()) == "An unknown error occurred."

    @pytest.mark.parametrize("value", [None, 42, RuntimeError()])
    def test_fallback_through_parse(self, value):
        assert pluck_error_detail(parse_api_error(value)) == "An unknown error occurred."
