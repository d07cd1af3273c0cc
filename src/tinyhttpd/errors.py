"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure inside the server is one of a small set of exceptions.
Each exception carries the HTTP status it maps to, so the code that
catches it never needs a lookup table:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        EXCEPTION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   TinyHTTPError                                                      │
    │    ├── HTTPParseError          (raised while reading a request)      │
    │    │    ├── MalformedRequestLine   400, then close                   │
    │    │    ├── EmptyRequest           close silently                    │
    │    │    └── ReadError              close silently                    │
    │    ├── HandlerError            (raised while handling a request)     │
    │    │    ├── MissingHeader          400                               │
    │    │    ├── InvalidContentLength   400                               │
    │    │    ├── FileNotFound           404                               │
    │    │    ├── StoreIOError           500                               │
    │    │    └── EncodingError          500                               │
    │    └── SetupError              (bootstrap, process exits 1)          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

WHO CATCHES WHAT:

    HTTPParseError  → Session     (400 or silent close, then CLOSING)
    HandlerError    → Router      (empty-bodied error response)
    SetupError      → __main__    (log + exit status 1)

Nothing is retried. Every failure either downgrades the current response
to an error status or ends the connection.

=============================================================================
"""

from typing import Optional


class TinyHTTPError(Exception):
    """Base class for every error raised by tinyhttpd."""


# =============================================================================
# PARSE ERRORS
# =============================================================================

class HTTPParseError(TinyHTTPError):
    """
    Raised when a request cannot be read off the connection.

    status_code is the status to answer with before closing, or None when
    the connection must be closed without any response.
    """

    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class MalformedRequestLine(HTTPParseError):
    """Request line has fewer than three whitespace-separated fields."""

    status_code = 400  # Bad Request


class EmptyRequest(HTTPParseError):
    """The peer closed an idle connection (no request bytes at all)."""


class ReadError(HTTPParseError):
    """The stream ended or failed in the middle of a request."""


# =============================================================================
# HANDLER ERRORS
# =============================================================================

class HandlerError(TinyHTTPError):
    """
    Raised by a route handler to downgrade the response to an error.

    The router turns these into an empty-bodied response carrying
    status_code. The connection stays open unless the client asked to
    close it.
    """

    status_code: int = 500


class MissingHeader(HandlerError):
    """A header the handler depends on is absent."""

    status_code = 400  # Bad Request

    def __init__(self, name: str):
        super().__init__(f"Missing header: {name}")
        self.name = name


class InvalidContentLength(HandlerError):
    """Content-Length is present but is not a non-negative integer."""

    status_code = 400  # Bad Request


class FileNotFound(HandlerError):
    """The file store has no entry under the requested name."""

    status_code = 404  # Not Found


class StoreIOError(HandlerError):
    """Reading or writing a file store entry failed for any other reason."""

    status_code = 500  # Internal Server Error


class EncodingError(HandlerError):
    """The content encoder could not compress the response body."""

    status_code = 500  # Internal Server Error


# =============================================================================
# SETUP ERRORS
# =============================================================================

class SetupError(TinyHTTPError):
    """Fatal bootstrap failure (bind, base directory). Exits with status 1."""
