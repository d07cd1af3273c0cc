"""
Unit tests for the access log.
"""

import json
import logging

from tinyhttpd.core.access_log import AccessLog, RequestLog
from tinyhttpd.http.request import HTTPRequest
from tinyhttpd.http.response import ResponseBuilder
from tinyhttpd.http.status_codes import HTTPStatus


def make_entry(**overrides) -> RequestLog:
    fields = dict(
        connection_id="1a2b3c4d",
        method="GET",
        path="/echo/abc",
        version="HTTP/1.1",
        client_ip="127.0.0.1",
        user_agent="curl/7",
        status_code=200,
        content_length=3,
        duration_ms=0.456,
        timestamp="18/Oct/2026:10:00:00 +0000",
    )
    fields.update(overrides)
    return RequestLog(**fields)


class TestRequestLog:
    """Tests for RequestLog formatting."""

    def test_to_text(self):
        assert make_entry().to_text() == (
            '127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] '
            '"GET /echo/abc HTTP/1.1" 200 3 0.46ms'
        )

    def test_to_dict_rounds_duration(self):
        data = make_entry().to_dict()
        assert data["duration_ms"] == 0.46
        assert data["connection_id"] == "1a2b3c4d"


class TestAccessLog:
    """Tests for AccessLog class."""

    def test_text_record(self, caplog):
        request = HTTPRequest("GET", "/", client_address=("10.0.0.1", 1234))
        response = ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()

        with caplog.at_level(logging.INFO, logger="tinyhttpd.access"):
            entry = AccessLog().record("abcd1234", request, response, 1.0)

        assert entry.user_agent == "-"
        assert entry.status_code == 404
        assert caplog.records[-1].getMessage().startswith("10.0.0.1 - - [")

    def test_json_record(self, caplog):
        request = HTTPRequest("POST", "/files/a", headers=["User-Agent: t\r\n"])
        response = ResponseBuilder().status(HTTPStatus.CREATED).build()

        with caplog.at_level(logging.INFO, logger="tinyhttpd.access"):
            AccessLog(log_format="json").record("abcd1234", request, response, 2.5)

        data = json.loads(caplog.records[-1].getMessage())
        assert data["method"] == "POST"
        assert data["status_code"] == 201
        assert data["user_agent"] == "t"
