"""
=============================================================================
RESPONSE ERRORS
=============================================================================

Exception taxonomy for the response builder.

=============================================================================
WHICH ERRORS PROPAGATE?
=============================================================================

    ┌────────────────────────┬───────────────────────────────────────────┐
    │  Exception             │  Raised by                                │
    ├────────────────────────┼───────────────────────────────────────────┤
    │  InvalidStatusCode     │  set_status_code(), set_response()        │
    │  HeadersAlreadySent    │  send(), stream(), redirect(), download() │
    │  InvalidRedirectTarget │  redirect(), back()                       │
    │  ResourceNotFound      │  download() - before any header is sent   │
    │  ResourceSizeUnknown   │  download() - before any header is sent   │
    │  ResourceOpenFailed    │  download() - after headers were sent     │
    │  ResourceReadFailed    │  download() - mid-stream, handle closed   │
    └────────────────────────┴───────────────────────────────────────────┘

Two failures are NOT raised:

    1. JSON encode errors   → converted into a 500 error envelope
    2. str(response) errors → converted into an "Error generating ..." string

Everything else reaches the caller. Nothing is retried.

=============================================================================
"""

from typing import Optional


class ResponseError(Exception):
    """Base class for every error raised by the response builder."""


class InvalidStatusCode(ResponseError, ValueError):
    """
    Raised when a status code is not in the status registry.

    Also a ValueError, so callers validating user input can catch it
    with a plain ``except ValueError``.
    """

    def __init__(self, code: int):
        super().__init__(f"Invalid HTTP status code: {code}")
        self.code = code


class HeadersAlreadySent(ResponseError):
    """
    Raised when a response is emitted a second time.

    ``origin`` names the operation (or transport location) that
    committed the headers first, when known.
    """

    def __init__(self, origin: Optional[str] = None):
        if origin:
            message = f"Headers already sent by {origin}"
        else:
            message = "Headers already sent"
        super().__init__(message)
        self.origin = origin


class InvalidRedirectTarget(ResponseError, ValueError):
    """Raised when a redirect target is neither an absolute URL nor a path."""

    def __init__(self, url: Optional[str]):
        super().__init__(f"Invalid redirect URL: {url!r}")
        self.url = url


class ResourceError(ResponseError):
    """Base class for download failures. Carries the offending path."""

    message = "Resource error"

    def __init__(self, path: str):
        super().__init__(f"{self.message}: {path}")
        self.path = path


class ResourceNotFound(ResourceError):
    message = "File not found or not readable"


class ResourceSizeUnknown(ResourceError):
    message = "Unable to determine file size"


class ResourceOpenFailed(ResourceError):
    message = "Unable to open file"


class ResourceReadFailed(ResourceError):
    message = "Error reading file"
