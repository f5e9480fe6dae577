"""
=============================================================================
EMISSION LOGGING
=============================================================================

One log line per emitted response, plus logging setup.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT FORMAT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ [17/Oct/2026:10:55:36 +0000] redirect 302 Found text/plain 14 0.21ms│
    │ ───────────────────────────────────────────────────────────────────│
    │ Timestamp                    Operation Status  Type   Bytes Duration│
    └─────────────────────────────────────────────────────────────────────┘

    JSON FORMAT (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"operation": "download", "status_code": 200, "reason": "OK",      │
    │  "content_type": "application/pdf", "body_bytes": 52311,           │
    │  "duration_ms": 4.87, "timestamp": "17/Oct/2026:10:55:36 +0000"}   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
LOGGER NAMES
=============================================================================

    httpreply.access    one line per emission (this module)
    httpreply.*         module loggers: debug detail, warnings, errors

    Configure them like any other logger:
        logging.getLogger("httpreply.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass

from .config import ResponseConfig


logger = logging.getLogger("httpreply.access")


@dataclass
class EmissionLog:
    """
    Structured log entry for one emitted response.

    operation:    send, stream, redirect or download
    status_code:  status emitted
    reason:       reason phrase emitted
    content_type: Content-Type header emitted ("-" if none)
    body_bytes:   body bytes written to the transport
    duration_ms:  time spent in the emitting call
    timestamp:    when the emission finished
    """

    operation: str
    status_code: int
    reason: str
    content_type: str
    body_bytes: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "status_code": self.status_code,
            "reason": self.reason,
            "content_type": self.content_type,
            "body_bytes": self.body_bytes,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        return (
            f'[{self.timestamp}] {self.operation} {self.status_code} {self.reason} '
            f'{self.content_type} {self.body_bytes} {self.duration_ms:.2f}ms'
        )


def log_emission(entry: EmissionLog, log_format: str = "text") -> None:
    """Write ``entry`` to the access logger. Error statuses log at WARNING."""
    level = logging.WARNING if entry.status_code >= 500 else logging.INFO

    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def timestamp() -> str:
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")


def configure_logging(config: ResponseConfig) -> None:
    """Configure the root handler and the ``httpreply`` logger level."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpreply").setLevel(level)
