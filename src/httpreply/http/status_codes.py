"""
=============================================================================
HTTP STATUS REGISTRY
=============================================================================

The closed set of status codes a response may carry, with reason phrases.

=============================================================================
A CLOSED ALLOW-LIST, NOT A RANGE
=============================================================================

Any integer in [100, 599] is syntactically a status code, but this
registry only knows the codes listed below. set_status_code() rejects
everything else:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  1xx   │ 100 101 102                                               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  2xx   │ 200 201 202 203 204 205 206                               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  3xx   │ 300 301 302 303 304 307 308                               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ 400 401 402 403 404 405 406 409 410 422 429               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ 500 501 502 503 504 505                                   │
    └────────┴───────────────────────────────────────────────────────────┘

    set_status_code(209)  → InvalidStatusCode   (in range, not registered)
    set_status_code(418)  → InvalidStatusCode
    set_response(209, "Custom")  → accepted     (unchecked setter, range only)

=============================================================================
INTERVIEW QUESTIONS ABOUT STATUS CODES
=============================================================================

Q: "Why reject a code like 209 if HTTP allows it?"
A: "Clients treat unknown codes as the x00 of their class, so 209
   behaves like 200 anyway. Rejecting it catches typos (290 vs 209)
   at the call site instead of in a browser."

Q: "What's the difference between 302 and 307?"
A: "Browsers historically turned a 302 after POST into a GET.
   307 forbids that: the method and body are preserved."

=============================================================================
"""

from enum import IntEnum
from typing import Optional


class HTTPStatus(IntEnum):
    """
    Registered HTTP status codes.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.FOUND == 302
        True
        >>> HTTPStatus.FOUND.phrase
        'Found'
    """

    # 1xx Informational
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101
    PROCESSING = 102

    # 2xx Success
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NON_AUTHORITATIVE_INFORMATION = 203
    NO_CONTENT = 204
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206

    # 3xx Redirection
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307    # Like 302 but preserves HTTP method
    PERMANENT_REDIRECT = 308    # Like 301 but preserves HTTP method

    # 4xx Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    CONFLICT = 409
    GONE = 410
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line (e.g. "Not Found")."""
        return _STATUS_PHRASES[self]

    @property
    def is_informational(self) -> bool:
        return 100 <= self < 200

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx. Handy for choosing a log level."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.CONTINUE: "Continue",
    HTTPStatus.SWITCHING_PROTOCOLS: "Switching Protocols",
    HTTPStatus.PROCESSING: "Processing",

    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NON_AUTHORITATIVE_INFORMATION: "Non-Authoritative Information",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.RESET_CONTENT: "Reset Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",

    HTTPStatus.MULTIPLE_CHOICES: "Multiple Choices",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.PAYMENT_REQUIRED: "Payment Required",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}

# Bounds for the unchecked setter (set_response)
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599


def is_registered(code: int) -> bool:
    """Return True if ``code`` is in the registry."""
    return code in _STATUS_PHRASES


def reason_phrase(code: int) -> Optional[str]:
    """
    Look up the reason phrase for ``code``.

    Returns None for codes outside the registry; callers decide whether
    that is an error (set_status_code) or acceptable (set_response).
    """
    if not is_registered(code):
        return None
    return HTTPStatus(code).phrase
