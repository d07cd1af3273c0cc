"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered request, on its own logger so it can be routed or
silenced separately from the diagnostic logs:

    logging.getLogger("tinyhttpd.access").setLevel(logging.WARNING)  # off

Two formats:

    text   127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /echo/abc HTTP/1.1" 200 3 0.41ms
    json   {"connection_id": "1a2b3c4d", "method": "GET", "path": "/echo/abc", ...}

Requests that never get a response (a peer that hangs up mid-body, for
instance) are not access-logged.

=============================================================================
"""

import json
import time
import logging
from dataclasses import dataclass

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("tinyhttpd.access")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    connection_id:  Id of the Connection the request arrived on
    method, path,
    version:        From the request line
    client_ip:      Peer address
    user_agent:     User-Agent value, "-" if absent
    status_code:    Response status
    content_length: Response body size in bytes
    duration_ms:    Parse-complete to response-written
    timestamp:      When the response was written
    """

    connection_id: str
    method: str
    path: str
    version: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "connection_id": self.connection_id,
            "method": self.method,
            "path": self.path,
            "version": self.version,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache common log format, plus the duration."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.version}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLog:
    """
    Emits RequestLog entries on the "tinyhttpd.access" logger.

        access_log = AccessLog(log_format="json")
        access_log.record(conn.id, request, response, duration_ms)
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def record(
        self,
        connection_id: str,
        request: HTTPRequest,
        response: HTTPResponse,
        duration_ms: float,
    ) -> RequestLog:
        """Build the entry for one exchange, log it and return it."""
        entry = RequestLog(
            connection_id=connection_id,
            method=request.method,
            path=request.path,
            version=request.version,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return entry
