"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log record per handled connection, emitted after the response is
written (or after the write fails).

=============================================================================
FORMATS
=============================================================================

    text (Apache-style, for humans and regex-based tools):

        127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /index.html" 200 5 0.42ms

    json (for log aggregators):

        {"client_ip": "127.0.0.1", "method": "GET", "path": "/index.html",
         "status_code": 200, "content_length": 5, "duration_ms": 0.42,
         "timestamp": "19/Oct/2026:10:00:00 +0000"}

Requests whose line could not be parsed are logged with "-" for both the
method and the path. Records go to the ``fileserver.access`` logger, so
they can be routed or silenced independently of the server's own logs.

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional


logger = logging.getLogger("fileserver.access")

LOG_FORMATS = ("text", "json")


@dataclass
class RequestLog:
    """
    Structured log entry for one request.

    Fields:
        client_ip:      Client's IP address ("-" if unknown)
        method:         Request method, "-" if unparseable
        path:           Request target, "-" if unparseable
        status_code:    Status sent (or attempted)
        content_length: Response body size in bytes
        duration_ms:    Time from accept to response written
        timestamp:      When the request finished
    """

    client_ip: str
    method: str
    path: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format as an Apache-style access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLog:
    """
    Writes RequestLog entries to the access logger.

    Usage:
        access_log = AccessLog(log_format="json")
        access_log.record(
            client_ip="127.0.0.1", method="GET", path="/index.html",
            status_code=200, content_length=5, started_at=start,
        )
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level the access records are logged at.
        """
        if log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {log_format!r}")

        self.log_format = log_format
        self.log_level = log_level

    def record(
        self,
        client_ip: str,
        method: Optional[str],
        path: Optional[str],
        status_code: int,
        content_length: int,
        started_at: float,
    ) -> RequestLog:
        """
        Build and emit the log entry for one request.

        Args:
            started_at: time.time() when the connection was accepted.

        Returns:
            The entry that was logged.
        """
        entry = RequestLog(
            client_ip=client_ip,
            method=method or "-",
            path=path or "-",
            status_code=int(status_code),
            content_length=content_length,
            duration_ms=(time.time() - started_at) * 1000,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return entry
