"""
Unit tests for the header accessor.
"""

import pytest

from tinyhttpd.errors import InvalidContentLength, MissingHeader
from tinyhttpd.http.headers import (
    accepted_encodings,
    content_length,
    is_close_requested,
    lookup,
)


class TestLookup:
    """Tests for lookup()."""

    def test_value_extracted(self):
        assert lookup(["Host: example.com\r\n"], "Host") == "example.com"

    def test_first_match_wins(self):
        headers = ["Accept: a\r\n", "Accept: b\r\n"]
        assert lookup(headers, "Accept") == "a"

    def test_substring_match(self):
        """A name found anywhere in a line matches that line."""
        headers = ["X-Forwarded-Host: proxy\r\n", "Host: origin\r\n"]
        assert lookup(headers, "Host") == "X-Forwarded-Host: proxy"

    def test_case_sensitive(self):
        assert lookup(["user-agent: curl\r\n"], "User-Agent") is None

    def test_empty_value(self):
        assert lookup(["User-Agent: \r\n"], "User-Agent") == ""

    def test_missing(self):
        assert lookup([], "Host") is None


class TestConnectionHeader:
    """Tests for is_close_requested()."""

    @pytest.mark.parametrize("value", ["close", "Close", "CLOSE"])
    def test_close(self, value: str):
        assert is_close_requested([f"Connection: {value}\r\n"])

    def test_keep_alive(self):
        assert not is_close_requested(["Connection: keep-alive\r\n"])

    def test_absent(self):
        assert not is_close_requested(["Host: a\r\n"])


class TestAcceptedEncodings:
    """Tests for accepted_encodings()."""

    def test_gzip_only(self):
        assert accepted_encodings(["Accept-Encoding: gzip\r\n"]) == "gzip"

    def test_filters_unsupported(self):
        headers = ["Accept-Encoding: deflate, gzip, br\r\n"]
        assert accepted_encodings(headers) == "gzip"

    def test_nothing_supported(self):
        assert accepted_encodings(["Accept-Encoding: br\r\n"]) == ""

    def test_absent(self):
        assert accepted_encodings([]) == ""

    def test_split_on_comma_space_only(self):
        """Tokens are separated by ", "; "deflate,gzip" is one token."""
        assert accepted_encodings(["Accept-Encoding: deflate,gzip\r\n"]) == ""

    def test_duplicates_kept(self):
        assert accepted_encodings(["Accept-Encoding: gzip, gzip\r\n"]) == "gzip, gzip"


class TestContentLength:
    """Tests for content_length()."""

    def test_valid(self):
        assert content_length(["Content-Length: 42\r\n"]) == 42

    def test_zero(self):
        assert content_length(["Content-Length: 0\r\n"]) == 0

    def test_missing(self):
        with pytest.raises(MissingHeader) as exc_info:
            content_length(["Host: a\r\n"])
        assert exc_info.value.status_code == 400
        assert exc_info.value.name == "Content-Length"

    @pytest.mark.parametrize("line", [
        "Content-Length: abc\r\n",
        "Content-Length:\r\n",
        "Content-Length:5\r\n",
        "Content-Length: -1\r\n",
    ])
    def test_invalid(self, line: str):
        with pytest.raises(InvalidContentLength) as exc_info:
            content_length([line])
        assert exc_info.value.status_code == 400

    def test_substring_match(self):
        """Any line containing "Content-Length" is taken, prefixed or not."""
        headers = ["X-Content-Length: 7\r\n", "Content-Length: 3\r\n"]
        assert content_length(headers) == 7
