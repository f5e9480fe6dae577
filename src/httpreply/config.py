"""
=============================================================================
RESPONSE CONFIGURATION
=============================================================================

Defaults shared by every ResponseBuilder.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m httpreply --log-level DEBUG json '{}'           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTPREPLY_CHARSET=ISO-8859-1 python -m httpreply ...      │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")
REDIRECT_CODES = (301, 302, 303, 307, 308)


@dataclass
class ResponseConfig:
    """
    Configuration for response building and emission.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    CONTENT
    - default_content_type, default_charset, json_indent

    EMISSION
    - chunk_size, http_version

    NAVIGATION
    - redirect_code, back_fallback

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    default_content_type: str = "text/html"
    """Content type used when the caller never sets one."""

    default_charset: Optional[str] = "UTF-8"
    """
    Charset appended to textual content types and used to encode str
    content. None means "no charset suffix" (str content is then
    encoded as UTF-8).
    """

    json_indent: int = 4
    """Indentation for json() output (pretty printed)."""

    # ─────────────────────────────────────────────────────────────────────
    # EMISSION
    # ─────────────────────────────────────────────────────────────────────

    chunk_size: int = 8192
    """
    Bytes per read for download() and the size hint passed to stream()
    producers (8 KB default).
    """

    http_version: str = "HTTP/1.1"
    """Version used in rendered status lines (str(response))."""

    # ─────────────────────────────────────────────────────────────────────
    # NAVIGATION
    # ─────────────────────────────────────────────────────────────────────

    redirect_code: int = 302
    """Default status for redirect() and back()."""

    back_fallback: str = "/"
    """Target for back() when the request had no Referer."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Emission log format: 'json' or 'text'.
    JSON is better for log aggregators, text for humans.
    """

    @classmethod
    def from_env(cls) -> "ResponseConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPREPLY_CONTENT_TYPE  Default content type (default: text/html)
        HTTPREPLY_CHARSET       Default charset, "none" for no charset
                                (default: UTF-8)
        HTTPREPLY_CHUNK_SIZE    Download/stream chunk size (default: 8192)
        HTTPREPLY_LOG_LEVEL     Logging level (default: INFO)
        HTTPREPLY_LOG_FORMAT    text or json (default: text)

        =====================================================================
        """
        charset: Optional[str] = os.getenv("HTTPREPLY_CHARSET", "UTF-8")
        if charset is not None and charset.lower() in ("", "none"):
            charset = None

        return cls(
            default_content_type=os.getenv("HTTPREPLY_CONTENT_TYPE", "text/html"),
            default_charset=charset,
            chunk_size=int(os.getenv("HTTPREPLY_CHUNK_SIZE", "8192")),
            log_level=os.getenv("HTTPREPLY_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTPREPLY_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once, eagerly, when a builder is constructed, so a bad
        setting fails at startup rather than on the first download.
        """
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

        if self.redirect_code not in REDIRECT_CODES:
            raise ValueError(f"redirect_code must be one of {REDIRECT_CODES}, got {self.redirect_code}")

        if "/" not in self.default_content_type:
            raise ValueError(f"Invalid default_content_type: {self.default_content_type!r}")

        if self.json_indent < 0:
            raise ValueError("json_indent must be >= 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")
