"""
=============================================================================
HTTPREPLY - SERVER-SIDE HTTP RESPONSE BUILDER
=============================================================================

Accumulate a status code, headers and a body for one outgoing response,
then emit it exactly once to a transport.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Handler code                                                       │
    │       │                                                              │
    │       │  .set_status_code() .header() .set_content() .json() ...     │
    │       ▼                                                              │
    │   ┌──────────────────────────────────────────────┐                   │
    │   │              ResponseBuilder                  │                  │
    │   │  ┌────────────┐ ┌────────────┐ ┌───────────┐ │                   │
    │   │  │  Status    │ │  Header    │ │  Content  │ │                   │
    │   │  │  Registry  │ │  Store     │ │  + type   │ │                   │
    │   │  └────────────┘ └────────────┘ └───────────┘ │                   │
    │   └───────────────────────┬──────────────────────┘                   │
    │                           │  send() / stream() / redirect() /        │
    │                           │  download()   (exactly once)             │
    │                           ▼                                          │
    │   ┌──────────────────────────────────────────────┐                   │
    │   │  Transport: Buffer | Socket | CGI            │                   │
    │   └──────────────────────────────────────────────┘                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    from httpreply import ResponseBuilder, RequestContext, BufferTransport

    transport = BufferTransport()
    response = ResponseBuilder(transport, RequestContext(secure=True))
    response.with_success({"id": 42}, "Created").send()

    print(transport.getvalue().decode())

=============================================================================
"""

__version__ = "1.0.0"

from .http import (
    HTTPStatus,
    HeaderStore,
    RequestContext,
    ResponseBuilder,
    Terminal,
)
from .core import Transport, BufferTransport, SocketTransport, CGITransport
from .config import ResponseConfig
from .access_log import configure_logging
from .errors import (
    ResponseError,
    InvalidStatusCode,
    HeadersAlreadySent,
    InvalidRedirectTarget,
    ResourceError,
    ResourceNotFound,
    ResourceSizeUnknown,
    ResourceOpenFailed,
    ResourceReadFailed,
)

__all__ = [
    "__version__",
    "HTTPStatus",
    "HeaderStore",
    "RequestContext",
    "ResponseBuilder",
    "Terminal",
    "Transport",
    "BufferTransport",
    "SocketTransport",
    "CGITransport",
    "ResponseConfig",
    "configure_logging",
    "ResponseError",
    "InvalidStatusCode",
    "HeadersAlreadySent",
    "InvalidRedirectTarget",
    "ResourceError",
    "ResourceNotFound",
    "ResourceSizeUnknown",
    "ResourceOpenFailed",
    "ResourceReadFailed",
]
