"""
=============================================================================
ACCESS LOG
=============================================================================

One entry per handled connection, written to the ``minihttp.access``
logger so it can be routed separately from diagnostic logs:

    logging.getLogger("minihttp.access").addHandler(file_handler)

Text format:

    127.0.0.1 - - [2026-10-17T09:30:00+00:00] "GET /echo/abc HTTP/1.1" 200 3 0.41ms

JSON format:

    {"client_ip": "127.0.0.1", "method": "GET", "path": "/echo/abc", ...}

=============================================================================
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from .http.request import HTTPRequest
from .http.response import HTTPResponse

logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    ``method``, ``path`` and ``version`` are "-" when the request could
    not be parsed.
    """

    client_ip: str
    method: str
    path: str
    version: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    @classmethod
    def build(
        cls,
        client_address: tuple,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        duration_ms: float,
    ) -> "RequestLog":
        if request is not None:
            method = getattr(request.method, "value", str(request.method))
            path = request.path
            version = request.version
            user_agent = request.user_agent or "-"
        else:
            method = path = version = user_agent = "-"

        return cls(
            client_ip=client_address[0] if client_address else "-",
            method=method,
            path=path,
            version=version,
            user_agent=user_agent,
            status_code=int(response.status_code),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.version}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """Emit an entry. 5xx responses are logged at WARNING, the rest at INFO."""
    message = json.dumps(entry.to_dict()) if log_format == "json" else entry.to_text()
    level = logging.WARNING if entry.status_code >= 500 else logging.INFO
    logger.log(level, message)
