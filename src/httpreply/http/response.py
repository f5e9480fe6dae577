"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Accumulates status, headers and content for one outgoing response, then
emits it to a Transport exactly once.

=============================================================================
RESPONSE STATE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ResponseBuilder                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  status_code / reason   200 "OK"       (registry-validated)         │
    │  headers                HeaderStore    (ordered, last write wins)   │
    │  content                str | bytes | None                          │
    │  content_type/charset   "text/html" / "UTF-8"                       │
    │  secure                 from RequestContext, read once              │
    │  sent_by                None until emitted                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
EMISSION ORDER (send)
=============================================================================

    1. Already sent?                  → HeadersAlreadySent
    2. transport.set_status(code, reason)
    3. No Content-Type header set?    → synthesize from content_type
                                        (+ "; charset=..." for text types)
    4. Add X-Content-Type-Options, X-Frame-Options, X-XSS-Protection
       (a value the caller already set for one of these is kept)
    5. transport.write_header() for every header, in insertion order
    6. content not None?              → transport.write_body(encoded content)

=============================================================================
TERMINAL OPERATIONS
=============================================================================

redirect(), back(), download() and stream() emit the response and return
a Terminal. The caller must stop handling the request once it has one;
nothing more may be written for this response:

    def handler(request, response):
        if not request.user:
            return response.redirect("/login")     # Terminal
        ...

=============================================================================
FAILURE POLICY
=============================================================================

Errors propagate, with two deliberate exceptions:

    json(data)      unencodable data → 500 {"error": true, "message": ...}
    str(response)   any failure      → "Error generating response: ..."

=============================================================================
INTERVIEW QUESTIONS ABOUT RESPONSES
=============================================================================

Q: "Why does Content-Length use the encoded byte length?"
A: "The header counts octets on the wire. "é" is one character but two
   bytes in UTF-8; sending Content-Length: 1 would make the client cut
   the body short and read the next byte as the start of a new response."

Q: "Why can a response only be sent once?"
A: "Once the status line and headers are on the wire they can't be
   recalled. A second send would either write a second head into the
   body or silently drop the change, so it's an error instead."

=============================================================================
"""

import codecs
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

from ..access_log import EmissionLog, log_emission, timestamp
from ..config import ResponseConfig
from ..core.transport import BufferTransport, Transport
from ..errors import (
    HeadersAlreadySent,
    InvalidRedirectTarget,
    InvalidStatusCode,
    ResourceNotFound,
    ResourceOpenFailed,
    ResourceReadFailed,
    ResourceSizeUnknown,
)
from .headers import HeaderStore
from .mime_types import should_include_charset, sniff_mime_type
from .request import RequestContext
from .status_codes import (
    HTTPStatus,
    MAX_STATUS_CODE,
    MIN_STATUS_CODE,
    is_registered,
    reason_phrase,
)
from .urls import is_valid_redirect_target, sanitize_url, upgrade_scheme


logger = logging.getLogger(__name__)


# Added to every emitted response unless the caller set the same name
SECURITY_HEADERS = (
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "SAMEORIGIN"),
    ("X-XSS-Protection", "1; mode=block"),
)

JSON_ENCODE_ERROR = "Failed to encode JSON response"

REDIRECT_BODY = "Redirecting..."

Content = Union[str, bytes]

# stream() producer: called with a size hint, returns the next chunk.
# An empty or falsy return ends the stream.
Producer = Callable[[int], Optional[Content]]

_KEEP = object()


@dataclass(frozen=True)
class Terminal:
    """
    Result of a terminal operation.

    The response has been emitted; the caller must not write to it again.
    """

    operation: str
    status_code: int
    body_bytes: int = 0


class ResponseBuilder:
    """
    Fluent builder for one HTTP response.

    Mutators return ``self`` so calls chain:

        (ResponseBuilder(transport)
            .set_status_code(201)
            .header("X-Request-Id", "a1b2")
            .set_content("created")
            .send())

    Args:
        transport: Where the response is written.
        context: Inbound request facts (TLS, Referer). Defaults to a
                 non-secure request without a Referer.
        config: Defaults for content type, charset, chunk size, ...
    """

    def __init__(
        self,
        transport: Transport,
        context: Optional[RequestContext] = None,
        config: Optional[ResponseConfig] = None,
    ):
        self.config = config or ResponseConfig()
        self.config.validate()

        self.transport = transport
        self.context = context or RequestContext()
        self.secure = self.context.secure

        self._status_code = int(HTTPStatus.OK)
        self._reason: Optional[str] = None     # Overrides the registry phrase
        self._headers = HeaderStore()
        self._content: Optional[Content] = None
        self._body: Optional[bytes] = None     # content as emitted
        self._content_type = self.config.default_content_type
        self._charset = self.config.default_charset
        self._sent_by: Optional[str] = None

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason(self) -> str:
        """Reason phrase: the override from set_response(), else the registry's."""
        if self._reason is not None:
            return self._reason
        return reason_phrase(self._status_code) or "Unknown"

    def set_status_code(self, code: int) -> "ResponseBuilder":
        """
        Set the status code, validated against the status registry.

        Raises:
            InvalidStatusCode: ``code`` is not registered (e.g. 209, 418).
        """
        if not is_registered(code):
            raise InvalidStatusCode(code)

        self._status_code = int(code)
        self._reason = None
        return self

    def set_response(self, code: int, reason: str) -> "ResponseBuilder":
        """
        Set status code and reason phrase without consulting the registry.

        Only the numeric range [100, 599] is enforced, so unregistered
        codes such as 209 are accepted here.

        Raises:
            InvalidStatusCode: ``code`` is outside [100, 599].
        """
        if not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
            raise InvalidStatusCode(code)

        self._status_code = int(code)
        self._reason = reason
        return self

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Set a header, replacing any earlier value for ``name``.

        Values are passed through untouched. Callers must not put CR/LF
        from untrusted input in them.
        """
        self._headers.set(name, value)
        return self

    @property
    def headers(self) -> HeaderStore:
        return self._headers

    def get_headers(self) -> Dict[str, str]:
        """All headers set so far, in emission order."""
        return self._headers.get_all()

    def no_cache(self) -> "ResponseBuilder":
        """
        Mark the response as non-cacheable.

        Sets all three for maximum compatibility:
        - Cache-Control (HTTP/1.1)
        - Pragma (HTTP/1.0 fallback)
        - Expires: 0 (already expired)
        """
        return (self
            .header("Cache-Control", "no-cache, no-store, must-revalidate, private")
            .header("Pragma", "no-cache")
            .header("Expires", "0"))

    # =========================================================================
    # CONTENT
    # =========================================================================

    @property
    def content(self) -> Optional[Content]:
        return self._content

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def charset(self) -> Optional[str]:
        return self._charset

    def set_content(self, content: Optional[Content]) -> "ResponseBuilder":
        """
        Set the response body.

        Text is encoded once, here, with the current charset, and
        Content-Length is set to that byte length. The same bytes are
        emitted later even if the charset changes in between. A manual
        Content-Length header set afterwards wins.

        Args:
            content: Text, raw bytes, or None for no body.
        """
        if isinstance(content, bytearray):
            content = bytes(content)

        if content is not None and not isinstance(content, (str, bytes)):
            raise TypeError(f"content must be str, bytes or None, not {type(content).__name__}")

        self._content = content
        self._body = self._encode(content) if content is not None else None

        if self._body is not None:
            self.header("Content-Length", str(len(self._body)))

        return self

    def set_content_type(self, content_type: str, charset: Any = _KEEP) -> "ResponseBuilder":
        """
        Set the content type used when no Content-Type header is set.

        Args:
            content_type: MIME type, e.g. "text/csv".
            charset: New charset; None clears it. Omit to keep the
                     current one.
        """
        self._content_type = content_type
        if charset is not _KEEP:
            self._charset = charset
        return self

    def _text_encoding(self) -> str:
        if self._charset:
            try:
                return codecs.lookup(self._charset).name
            except LookupError:
                logger.warning(f"Unknown charset {self._charset!r}, encoding as UTF-8")
        return "utf-8"

    def _encode(self, content: Content) -> bytes:
        if isinstance(content, str):
            return content.encode(self._text_encoding())
        return content

    def _synthesized_content_type(self) -> str:
        content_type = self._content_type
        if self._charset is not None and should_include_charset(content_type):
            content_type += f"; charset={self._charset}"
        return content_type

    # =========================================================================
    # JSON CONVENIENCE
    # =========================================================================

    def json(self, data: Any, status: int = 200) -> "ResponseBuilder":
        """
        Set a pretty-printed JSON body with Content-Type application/json.

        Non-ASCII characters are written as-is (ensure_ascii=False).

        Unencodable data (sets, objects, NaN, circular references) does
        not raise. The response becomes a 500 error envelope instead:

            {"error": true, "message": "Failed to encode JSON response"}
        """
        try:
            content = json.dumps(
                data,
                indent=self.config.json_indent,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning(f"JSON encoding failed, sending error response: {e}")
            return self.with_error(JSON_ENCODE_ERROR, HTTPStatus.INTERNAL_SERVER_ERROR)

        return (self
            .set_status_code(status)
            .set_content_type("application/json", self.config.default_charset)
            .set_content(content))

    def with_error(self, message: str, code: int = 400) -> "ResponseBuilder":
        """JSON error envelope: ``{"error": true, "message": ...}``."""
        return self.json({"error": True, "message": message}, code)

    def with_success(self, data: Any = None, message: str = "Success") -> "ResponseBuilder":
        """JSON success envelope: ``{"success": true, "message": ..., "data": ...}``."""
        return self.json({"success": True, "message": message, "data": data})

    # =========================================================================
    # EMISSION
    # =========================================================================

    @property
    def is_sent(self) -> bool:
        return self._sent_by is not None

    @property
    def sent_by(self) -> Optional[str]:
        """Name of the operation that emitted this response, if any."""
        return self._sent_by

    def _ensure_not_sent(self) -> None:
        if self._sent_by is not None:
            raise HeadersAlreadySent(self._sent_by)
        if self.transport.headers_sent():
            raise HeadersAlreadySent(self.transport.sent_origin)

    def _emit(self, transport: Transport) -> int:
        """
        Write status, headers and content. Returns body bytes written.

        Builder state is left untouched, so rendering with to_bytes()
        first does not change what a later send() emits.
        """
        transport.set_status(self._status_code, self.reason)

        for name, value in self._emitted_headers():
            transport.write_header(name, value)

        if self._body is None:
            return 0

        transport.write_body(self._body)
        return len(self._body)

    def _emitted_headers(self) -> List[Tuple[str, str]]:
        """Caller headers, then a synthesized Content-Type, then security headers."""
        headers = list(self._headers.items())

        if "Content-Type" not in self._headers:
            headers.append(("Content-Type", self._synthesized_content_type()))

        for name, value in SECURITY_HEADERS:
            if name not in self._headers:
                headers.append((name, value))

        return headers

    def _emitted_content_type(self) -> str:
        return self._headers.get("Content-Type") or self._synthesized_content_type()

    def _send(self, operation: str) -> int:
        self._ensure_not_sent()
        self._sent_by = operation
        logger.debug(f"Emitting {self._status_code} {self.reason} via {operation}")
        return self._emit(self.transport)

    def send(self) -> None:
        """
        Emit the response to the transport.

        Raises:
            HeadersAlreadySent: This response (or the transport) was
                                already emitted.
        """
        started = time.perf_counter()
        body_bytes = self._send("send")
        self._log("send", started, body_bytes)

    def stream(self, callback: Producer, buffer_size: Optional[int] = None) -> Terminal:
        """
        Emit the head, then stream the body from a producer.

        ``callback(buffer_size)`` is called repeatedly; every truthy chunk
        is written and flushed. The first empty/None chunk ends the stream.
        The content should be None when calling this.

            def produce(size):
                return next(rows, None)

            response.set_content_type("text/csv").stream(produce)

        Raises:
            HeadersAlreadySent: Already emitted.
        """
        started = time.perf_counter()
        buffer_size = buffer_size or self.config.chunk_size

        written = self._send("stream")

        self.transport.end_buffering()
        self.transport.flush()

        while True:
            data = callback(buffer_size)
            if not data:
                break
            chunk = self._encode(data)
            self.transport.write_body(chunk)
            self.transport.flush()
            written += len(chunk)

        return self._finish("stream", started, written)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def redirect(self, url: str, code: Optional[int] = None) -> Terminal:
        """
        Emit a redirect to ``url``.

        =====================================================================
        STEPS
        =====================================================================

        1. Target must be an absolute URL or start with "/"
        2. Secure request + http:// target → rewritten to https://
        3. Characters illegal in a URL are stripped
        4. Status (default 302), Location, text/plain "Redirecting..."
        5. Emit

        =====================================================================

        Raises:
            InvalidRedirectTarget: Malformed target.
            InvalidStatusCode: ``code`` not registered.
            HeadersAlreadySent: Already emitted.
        """
        started = time.perf_counter()

        if not is_valid_redirect_target(url):
            raise InvalidRedirectTarget(url)

        self._ensure_not_sent()

        if self.secure:
            upgraded = upgrade_scheme(url)
            if upgraded != url:
                logger.debug(f"Upgrading redirect target to HTTPS: {upgraded}")
                url = upgraded

        location = sanitize_url(url)

        (self
            .set_status_code(code if code is not None else self.config.redirect_code)
            .header("Location", location)
            .header("Content-Type", "text/plain")
            .set_content(REDIRECT_BODY))

        written = self._send("redirect")
        return self._finish("redirect", started, written)

    def back(self, fallback: Optional[str] = None) -> Terminal:
        """
        Redirect to the request's Referer, or to ``fallback`` without one.

        ``fallback`` defaults to the configured back_fallback ("/").
        """
        target = self.context.referer
        if not target:
            target = fallback if fallback is not None else self.config.back_fallback
        return self.redirect(target)

    # =========================================================================
    # DOWNLOAD
    # =========================================================================

    def download(
        self,
        filepath: Union[str, os.PathLike],
        filename: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ) -> Terminal:
        """
        Emit a file as an attachment, streamed in chunks.

        =====================================================================
        HEADERS
        =====================================================================

            Content-Type: <sniffed>            (no charset)
            Content-Disposition: attachment; filename*=UTF-8''<encoded>
            Content-Length: <file size>
            X-Content-Type-Options: nosniff
            Content-Security-Policy: default-src 'none'

        The filename uses RFC 5987 encoding so non-ASCII names survive:
            "résumé.pdf" → filename*=UTF-8''r%C3%A9sum%C3%A9.pdf

        =====================================================================

        Args:
            filepath: File to send.
            filename: Name offered to the client (default: basename).
            chunk_size: Bytes per read (default: config.chunk_size).

        Raises:
            ResourceNotFound: Missing or unreadable (nothing emitted yet).
            ResourceSizeUnknown: Size query failed (nothing emitted yet).
            ResourceOpenFailed: Open failed after the head was emitted.
            ResourceReadFailed: Read failed mid-stream; file is closed.
            HeadersAlreadySent: Already emitted.
        """
        started = time.perf_counter()
        path = os.fspath(filepath)

        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            raise ResourceNotFound(path)

        self._ensure_not_sent()

        filename = filename or os.path.basename(path)
        encoded_filename = quote(filename, safe="")
        mime_type = sniff_mime_type(path)

        try:
            filesize = os.path.getsize(path)
        except OSError as e:
            raise ResourceSizeUnknown(path) from e

        chunk_size = chunk_size or self.config.chunk_size

        # Body comes from the file, not from content
        self._content = None
        self._body = None

        (self
            .set_content_type(mime_type, None)
            .header("Content-Disposition", f"attachment; filename*=UTF-8''{encoded_filename}")
            .header("Content-Length", str(filesize))
            .header("X-Content-Type-Options", "nosniff")
            .header("Content-Security-Policy", "default-src 'none'"))

        self._send("download")

        try:
            handle = open(path, "rb")
        except OSError as e:
            logger.error(f"Unable to open {path} after sending headers: {e}")
            raise ResourceOpenFailed(path) from e

        written = 0
        with handle:
            while True:
                try:
                    chunk = handle.read(chunk_size)
                except OSError as e:
                    logger.error(f"Read failed for {path} after {written} bytes: {e}")
                    raise ResourceReadFailed(path) from e

                if not chunk:
                    break

                self.transport.write_body(chunk)
                self.transport.flush()
                written += len(chunk)

        return self._finish("download", started, written)

    # =========================================================================
    # RENDERING
    # =========================================================================

    def to_bytes(self) -> bytes:
        """
        Render the full response (status line, headers, body) in memory.

        The live transport is not touched and the response is not marked
        as sent, but the same precondition applies as for send().
        """
        self._ensure_not_sent()
        capture = BufferTransport(http_version=self.config.http_version)
        self._emit(capture)
        return capture.getvalue()

    def __str__(self) -> str:
        try:
            return self.to_bytes().decode(self._text_encoding(), errors="replace")
        except Exception as e:
            return f"Error generating response: {e}"

    def __repr__(self) -> str:
        state = f"sent by {self._sent_by}" if self._sent_by else "pending"
        return f"<ResponseBuilder {self._status_code} {self.reason} ({state})>"

    # =========================================================================
    # LOGGING
    # =========================================================================

    def _finish(self, operation: str, started: float, body_bytes: int) -> Terminal:
        self._log(operation, started, body_bytes)
        return Terminal(operation=operation, status_code=self._status_code, body_bytes=body_bytes)

    def _log(self, operation: str, started: float, body_bytes: int) -> None:
        log_emission(
            EmissionLog(
                operation=operation,
                status_code=self._status_code,
                reason=self.reason,
                content_type=self._emitted_content_type(),
                body_bytes=body_bytes,
                duration_ms=(time.perf_counter() - started) * 1000,
                timestamp=timestamp(),
            ),
            self.config.log_format,
        )
