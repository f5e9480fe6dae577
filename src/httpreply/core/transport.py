"""
=============================================================================
TRANSPORTS
=============================================================================

A Transport is the only thing a ResponseBuilder writes to. It hides where
the bytes go (a socket, stdout, a test buffer) behind five primitives:

    ┌────────────────────────┬────────────────────────────────────────────┐
    │  set_status(code, txt) │  status line for this exchange             │
    │  write_header(n, v)    │  one header line (same name replaces)      │
    │  write_body(data)      │  body bytes; commits the head first        │
    │  headers_sent()        │  has the head left the building?           │
    │  flush()               │  push buffered bytes out; commits the head │
    └────────────────────────┴────────────────────────────────────────────┘

plus end_buffering(), which switches off an output buffer for streaming.

=============================================================================
HEAD COMMIT
=============================================================================

Status and headers are held back until the first body write or flush,
then written in one piece. After that the head is "sent" and any attempt
to change it raises HeadersAlreadySent:

    set_status(200)          pending
    write_header(...)        pending
    write_body(b"...")  ───► HEAD COMMITTED ───► body bytes
    write_header(...)        HeadersAlreadySent

=============================================================================
IMPLEMENTATIONS
=============================================================================

    BufferTransport   in-memory; tests and str(response)
    SocketTransport   HTTP/1.1 over a connected socket (sendall)
    CGITransport      CGI "Status:" output to a binary stream (stdout)

=============================================================================
INTERVIEW INSIGHT
=============================================================================

Q: "Why inject the transport instead of writing to the socket directly?"
A: "The emission rules (order, single send, charset) are the interesting
   part. With a fake transport they can be tested without a network,
   and the same builder can run under a socket server, CGI or WSGI."

=============================================================================
"""

import logging
import socket
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from ..errors import HeadersAlreadySent
from ..http.headers import HeaderStore
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Capability interface consumed by ResponseBuilder.

    ``sent_origin`` describes what committed the head, once it has been
    committed. It is carried by HeadersAlreadySent.
    """

    sent_origin: Optional[str] = None

    @abstractmethod
    def set_status(self, code: int, reason: str) -> None:
        ...

    @abstractmethod
    def write_header(self, name: str, value: str) -> None:
        ...

    @abstractmethod
    def write_body(self, data: bytes) -> None:
        ...

    @abstractmethod
    def headers_sent(self) -> bool:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    def end_buffering(self) -> None:
        """Disable any output buffer. Transports without one just flush."""
        self.flush()


class WireTransport(Transport):
    """
    Shared head/body bookkeeping for byte-oriented transports.

    Subclasses implement ``_write_raw()`` and may override
    ``_render_head()`` and ``_flush_raw()``.

    Args:
        buffer_size: Body bytes to hold back before writing.
                     0 disables the output buffer.
        http_version: Version for the status line.
    """

    def __init__(self, buffer_size: int = 0, http_version: str = "HTTP/1.1"):
        self.buffer_size = buffer_size
        self.http_version = http_version
        self.status_code = int(HTTPStatus.OK)
        self.reason = HTTPStatus.OK.phrase
        self.headers = HeaderStore()
        self.bytes_written = 0              # Body bytes accepted so far
        self.sent_origin: Optional[str] = None
        self._committed = False
        self._pending = bytearray()

    # =========================================================================
    # HEAD
    # =========================================================================

    def set_status(self, code: int, reason: str) -> None:
        self._ensure_open()
        self.status_code = code
        self.reason = reason

    def write_header(self, name: str, value: str) -> None:
        self._ensure_open()
        self.headers.set(name, value)

    def headers_sent(self) -> bool:
        return self._committed

    def _ensure_open(self) -> None:
        if self._committed:
            raise HeadersAlreadySent(self.sent_origin)

    def _render_head(self) -> bytes:
        lines = [f"{self.http_version} {self.status_code} {self.reason}"]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")
        return ("\r\n".join(lines) + "\r\n").encode("utf-8")

    def _commit(self, origin: str) -> None:
        if self._committed:
            return
        self._committed = True
        self.sent_origin = f"{type(self).__name__}.{origin}"
        logger.debug(
            f"Committing head: {self.status_code} {self.reason} "
            f"({len(self.headers)} headers) via {origin}"
        )
        self._write_raw(self._render_head())

    # =========================================================================
    # BODY
    # =========================================================================

    def write_body(self, data: bytes) -> None:
        self._commit("write_body")
        self.bytes_written += len(data)

        if self.buffer_size <= 0:
            self._write_raw(data)
            return

        self._pending += data
        if len(self._pending) >= self.buffer_size:
            self._drain()

    def flush(self) -> None:
        self._commit("flush")
        self._drain()
        self._flush_raw()

    def end_buffering(self) -> None:
        self.flush()
        self.buffer_size = 0

    def _drain(self) -> None:
        if self._pending:
            data = bytes(self._pending)
            self._pending.clear()
            self._write_raw(data)

    @abstractmethod
    def _write_raw(self, data: bytes) -> None:
        ...

    def _flush_raw(self) -> None:
        pass


class BufferTransport(WireTransport):
    """
    Transport that captures the response in memory.

    Used for str(response) and as a test double:

        transport = BufferTransport()
        ResponseBuilder(transport).set_content("hi").send()
        transport.getvalue()   # b"HTTP/1.1 200 OK\\r\\n...\\r\\n\\r\\nhi"
    """

    def __init__(self, buffer_size: int = 0, http_version: str = "HTTP/1.1"):
        super().__init__(buffer_size, http_version)
        self._output = bytearray()
        self._head_end = 0
        self.flush_count = 0

    def _commit(self, origin: str) -> None:
        first = not self._committed
        super()._commit(origin)
        if first:
            self._head_end = len(self._output)

    def _write_raw(self, data: bytes) -> None:
        self._output += data

    def _flush_raw(self) -> None:
        self.flush_count += 1

    @property
    def body(self) -> bytes:
        """Body bytes written so far (head excluded)."""
        if not self._committed:
            return b""
        return bytes(self._output[self._head_end:]) + bytes(self._pending)

    def getvalue(self) -> bytes:
        """
        The full response: head, blank line, body.

        A response whose head was never committed (send() without a body)
        is rendered from the pending status and headers.
        """
        if not self._committed:
            return self._render_head()
        return bytes(self._output) + bytes(self._pending)


class SocketTransport(WireTransport):
    """
    Transport writing an HTTP/1.1 response to a connected socket.

    Uses sendall() so partial sends are retried by the OS layer. Send
    failures are logged and re-raised; the caller owns the connection.

    Supports ``with`` for automatic close:

        with SocketTransport(client_socket) as transport:
            ResponseBuilder(transport).json({"ok": True})
    """

    def __init__(
        self,
        sock: socket.socket,
        buffer_size: int = 0,
        http_version: str = "HTTP/1.1",
    ):
        super().__init__(buffer_size, http_version)
        self.socket = sock
        self.closed = False

    def _write_raw(self, data: bytes) -> None:
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"Send failed after {self.bytes_written} body bytes: {e}")
            raise

    def close(self) -> None:
        """
        Commit anything pending, then shut the socket down.

        A response that never wrote a body (e.g. a 204) still gets its
        head sent here.
        """
        if self.closed:
            return

        try:
            self.flush()
        finally:
            self.closed = True
            try:
                self.socket.shutdown(socket.SHUT_WR)
            except OSError:
                pass  # Peer already gone
            self.socket.close()

    def __enter__(self) -> "SocketTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CGITransport(WireTransport):
    """
    Transport writing CGI output to a binary stream.

    CGI responses use a ``Status:`` header instead of a status line; the
    web server in front turns it into the real one:

        Status: 302 Found
        Location: /login
        Content-Type: text/plain

        Redirecting...
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = 0):
        super().__init__(buffer_size)
        self.stream = stream

    def _render_head(self) -> bytes:
        lines = [f"Status: {self.status_code} {self.reason}"]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")
        return ("\r\n".join(lines) + "\r\n").encode("utf-8")

    def _write_raw(self, data: bytes) -> None:
        self.stream.write(data)

    def _flush_raw(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        """Commit the head if nothing has been written yet."""
        self.flush()
