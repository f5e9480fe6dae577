"""
=============================================================================
HTTP RESPONSE PROTOCOL PIECES
=============================================================================

Everything needed to describe one outgoing HTTP response, independent of
where it is written.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  status_codes.py   Status registry (closed allow-list + phrases)    │
    │  headers.py        Ordered, case-insensitive header store           │
    │  mime_types.py     Charset allow-list and file type sniffing        │
    │  request.py        RequestContext (TLS flag, Referer)               │
    │  urls.py           Redirect target validation and sanitizing        │
    │  response.py       ResponseBuilder and the Terminal result          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HTTP RESPONSE FORMAT (RFC 7230)
=============================================================================

    HTTP/1.1 200 OK\\r\\n
    Content-Type: text/html; charset=UTF-8\\r\\n
    Content-Length: 13\\r\\n
    \\r\\n
    <h1>Hi</h1>

Key points:
- Lines end with CRLF (\\r\\n), not just \\n
- Headers and body separated by an empty line
- Header names are case-insensitive ("Content-Type" = "content-type")
- Content-Length counts bytes, not characters

=============================================================================
"""

from .status_codes import HTTPStatus, is_registered, reason_phrase
from .headers import HeaderStore
from .mime_types import get_mime_type, should_include_charset, sniff_mime_type
from .request import RequestContext
from .urls import is_valid_redirect_target, sanitize_url, upgrade_scheme
from .response import ResponseBuilder, Terminal, SECURITY_HEADERS

__all__ = [
    # Status registry
    "HTTPStatus",
    "is_registered",
    "reason_phrase",

    # Headers
    "HeaderStore",

    # MIME types
    "get_mime_type",
    "should_include_charset",
    "sniff_mime_type",

    # Request facts
    "RequestContext",

    # Redirect URLs
    "is_valid_redirect_target",
    "sanitize_url",
    "upgrade_scheme",

    # Response building
    "ResponseBuilder",
    "Terminal",
    "SECURITY_HEADERS",
]
