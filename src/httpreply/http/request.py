"""
=============================================================================
REQUEST CONTEXT
=============================================================================

The two inbound-request facts a response needs:

    ┌──────────┬────────────────────────────────────────────────────────┐
    │ secure   │ Was the request received over TLS?                     │
    │          │ → redirect() upgrades http:// targets to https://      │
    ├──────────┼────────────────────────────────────────────────────────┤
    │ referer  │ The Referer header, if any                             │
    │          │ → back() redirects here, else to a fallback            │
    └──────────┴────────────────────────────────────────────────────────┘

The context is passed to the ResponseBuilder explicitly instead of being
read from process-wide globals (CGI environment variables). That keeps
the builder deterministic under test:

    ResponseBuilder(transport, RequestContext(secure=True))

Helpers build a context from the usual sources:

    RequestContext.from_environ(environ)     # WSGI / CGI environ dict
    RequestContext.from_headers(headers)     # parsed request headers

=============================================================================
"""

from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class RequestContext:
    """Read-only request facts consumed by ResponseBuilder."""

    secure: bool = False
    referer: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "RequestContext":
        """
        Build a context from a WSGI or CGI environment.

        TLS is detected from ``HTTPS`` (any value except "off" or empty,
        the CGI convention) or from ``wsgi.url_scheme == "https"``.
        """
        https = str(environ.get("HTTPS", "")).lower()
        secure = (https not in ("", "off")) or environ.get("wsgi.url_scheme") == "https"
        referer = environ.get("HTTP_REFERER") or None
        return cls(secure=secure, referer=referer)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], secure: bool = False) -> "RequestContext":
        """
        Build a context from request headers.

        Header names are matched case-insensitively. TLS state cannot be
        read from headers (a client can forge X-Forwarded-Proto), so it
        is passed in by the server that terminated the connection.
        """
        referer = None
        for name, value in headers.items():
            if name.lower() == "referer":
                referer = value or None
                break
        return cls(secure=secure, referer=referer)
