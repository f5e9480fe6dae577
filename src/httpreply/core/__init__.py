"""
Transports: where an emitted response ends up.

    BufferTransport   in memory
    SocketTransport   connected TCP socket
    CGITransport      CGI output stream (stdout)
"""

from .transport import (
    Transport,
    WireTransport,
    BufferTransport,
    SocketTransport,
    CGITransport,
)

__all__ = [
    "Transport",
    "WireTransport",
    "BufferTransport",
    "SocketTransport",
    "CGITransport",
]
