"""
=============================================================================
HEADER ACCESSOR
=============================================================================

Looks up values in the raw header lines of one request.

Headers are kept exactly as they arrived, one string per line, CRLF
included:

    request.headers == [
        "Host: localhost:4221\r\n",
        "User-Agent: curl/8.4.0\r\n",
        "Accept-Encoding: deflate, gzip\r\n",
    ]

=============================================================================
MATCHING RULES
=============================================================================

A lookup for NAME scans the lines in arrival order and takes the FIRST
line that CONTAINS name anywhere in its text. It is a substring test, not
a "starts with NAME:" test:

    lookup(headers, "Content-Length")

        "X-Content-Length: 9\r\n"   ← matches (substring)
        "Content-Length: 5\r\n"     ← never reached

The value is the matched line with trailing CR/LF removed and the
"NAME: " prefix removed when the line starts with it. A line matched
only by substring keeps its full text:

        "Content-Length: 5\r\n"     → "5"
        "X-Content-Length: 9\r\n"   → "X-Content-Length: 9"

The lines are never sorted, so the scan is linear. Requests carry a
handful of headers; a scan per lookup is cheaper than building a map.

=============================================================================
ENCODING NEGOTIATION
=============================================================================

    Accept-Encoding: deflate, gzip, br
                     ───────  ────  ──
                        │       │    │
                        ✗       ✓    ✗     (only "gzip" is supported)

    accepted_encodings(...) → "gzip"

Tokens are split on ", ", filtered against SUPPORTED_ENCODINGS after
trimming spaces, and joined back with ", " in their original order.

=============================================================================
"""

from typing import List, Optional

from ..errors import InvalidContentLength, MissingHeader


SUPPORTED_ENCODINGS = ("gzip",)


def lookup(headers: List[str], name: str) -> Optional[str]:
    """
    Get the value of the first header line containing `name`.

    Args:
        headers: Raw header lines in arrival order.
        name: Header name, matched case-sensitively as a substring.

    Returns:
        The header value, or None if no line contains `name`.
    """
    prefix = f"{name}: "
    for line in headers:
        if name in line:
            value = line.rstrip("\r\n")
            if value.startswith(prefix):
                value = value[len(prefix):]
            return value
    return None


def is_close_requested(headers: List[str]) -> bool:
    """True when the client sent `Connection: close` (any case)."""
    value = lookup(headers, "Connection")
    return value is not None and value.lower() == "close"


def accepted_encodings(headers: List[str]) -> str:
    """
    Negotiate the response encoding.

    Returns:
        The supported encodings the client listed, joined with ", ",
        or "" when the header is absent or none are supported.
    """
    value = lookup(headers, "Accept-Encoding")
    if not value:
        return ""

    accepted = [
        token for token in value.split(", ")
        if token.strip(" ") in SUPPORTED_ENCODINGS
    ]
    return ", ".join(accepted)


def content_length(headers: List[str]) -> int:
    """
    Parse the request's declared body length.

    The number is the second whitespace-separated field of the matched
    line ("Content-Length: 5\\r\\n" → "5").

    Raises:
        MissingHeader: No line contains "Content-Length".
        InvalidContentLength: The field is missing, not a number, or negative.
    """
    for line in headers:
        if "Content-Length" in line:
            break
    else:
        raise MissingHeader("Content-Length")

    fields = line.split()
    try:
        length = int(fields[1])
    except (IndexError, ValueError):
        raise InvalidContentLength(f"Invalid Content-Length: {line.rstrip()!r}")

    if length < 0:
        raise InvalidContentLength(f"Negative Content-Length: {length}")
    return length
