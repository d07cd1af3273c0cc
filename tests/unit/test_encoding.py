"""
Unit tests for the gzip content encoder.
"""

import gzip

import pytest

from tinyhttpd.errors import EncodingError
from tinyhttpd.http.encoding import gzip_encode


class TestGzipEncode:
    """Tests for gzip_encode()."""

    def test_decompresses_to_input(self):
        assert gzip.decompress(gzip_encode(b"abc")) == b"abc"

    def test_gzip_magic(self):
        """Output is a gzip member, not a raw deflate stream."""
        assert gzip_encode(b"abc")[:2] == b"\x1f\x8b"

    def test_empty_input(self):
        encoded = gzip_encode(b"")
        assert len(encoded) > 0
        assert gzip.decompress(encoded) == b""

    def test_repetitive_input_shrinks(self):
        data = b"a" * 10_000
        assert len(gzip_encode(data)) < len(data)

    def test_invalid_level(self):
        with pytest.raises(EncodingError) as exc_info:
            gzip_encode(b"abc", level=42)
        assert exc_info.value.status_code == 500

    def test_non_bytes(self):
        with pytest.raises(EncodingError):
            gzip_encode("abc")  # type: ignore[arg-type]
