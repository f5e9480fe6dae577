"""
pytest configuration and fixtures.
"""

import socket
from pathlib import Path
from typing import Generator, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpreply import BufferTransport, RequestContext, ResponseBuilder, ResponseConfig


@pytest.fixture
def transport() -> BufferTransport:
    """In-memory transport capturing everything written."""
    return BufferTransport()


@pytest.fixture
def response(transport: BufferTransport) -> ResponseBuilder:
    """Builder for a plain (non-TLS) request without a Referer."""
    return ResponseBuilder(transport)


@pytest.fixture
def secure_response(transport: BufferTransport) -> ResponseBuilder:
    """Builder for a request that arrived over TLS."""
    return ResponseBuilder(transport, RequestContext(secure=True))


@pytest.fixture
def small_chunks() -> ResponseConfig:
    """Config with a tiny chunk size so downloads take several reads."""
    return ResponseConfig(chunk_size=4)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A small text file to download."""
    path = tmp_path / "report.txt"
    path.write_bytes(b"line one\nline two\n")
    return path


@pytest.fixture
def socket_pair() -> Generator[Tuple[socket.socket, socket.socket], None, None]:
    """Connected (server_side, client_side) sockets."""
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    for sock in (server_side, client_side):
        try:
            sock.close()
        except OSError:
            pass
