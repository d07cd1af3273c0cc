"""
=============================================================================
CONTENT ENCODER
=============================================================================

Compresses response bodies for clients that sent Accept-Encoding: gzip.

    Request:   Accept-Encoding: gzip
    Response:  Content-Encoding: gzip
               Content-Length: <size AFTER compression>

Content-Length must describe the bytes actually sent, so callers compress
first and measure second.

Only /echo/ bodies are compressed. gzip output is never smaller than ~20
bytes (header + trailer), so short echoes grow; the client asked for gzip,
so it gets gzip.

=============================================================================
"""

import gzip
import zlib
import logging

from ..errors import EncodingError


logger = logging.getLogger(__name__)

# Same default level as the gzip command line tool.
DEFAULT_LEVEL = 6


def gzip_encode(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """
    Compress `data` into a complete gzip member.

    Args:
        data: Raw body bytes.
        level: Compression level, 0 (store) to 9 (smallest).

    Returns:
        gzip-framed bytes that gzip.decompress() turns back into `data`.

    Raises:
        EncodingError: Compression failed.
    """
    try:
        return gzip.compress(data, compresslevel=level)
    except (zlib.error, ValueError, TypeError) as e:
        logger.error(f"gzip compression failed: {e}")
        raise EncodingError(f"gzip compression failed: {e}") from e
