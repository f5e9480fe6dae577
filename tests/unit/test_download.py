"""
Unit tests for file downloads.
"""

import os
from pathlib import Path

import pytest

from httpreply import (
    BufferTransport,
    HeadersAlreadySent,
    ResourceNotFound,
    ResourceOpenFailed,
    ResourceReadFailed,
    ResourceSizeUnknown,
    ResponseBuilder,
    Terminal,
)
from httpreply.http import response as response_module


class FailingFile:
    """File double whose second read() fails."""

    def __init__(self):
        self.reads = 0
        self.closed = False

    def read(self, size):
        self.reads += 1
        if self.reads == 1:
            return b"abcd"
        raise OSError("disk on fire")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True
        return False


class TestDownload:
    """Tests for download()."""

    def test_download_headers_and_body(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test a complete download."""
        result = response.download(str(sample_file))

        assert result == Terminal(operation="download", status_code=200, body_bytes=18)
        assert transport.headers.get("Content-Type") == "text/plain"
        assert transport.headers.get("Content-Disposition") == "attachment; filename*=UTF-8''report.txt"
        assert transport.headers.get("Content-Length") == "18"
        assert transport.headers.get("X-Content-Type-Options") == "nosniff"
        assert transport.headers.get("Content-Security-Policy") == "default-src 'none'"
        assert transport.body == sample_file.read_bytes()

    def test_download_accepts_path_objects(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test os.PathLike paths."""
        response.download(sample_file)
        assert transport.body == sample_file.read_bytes()

    def test_download_in_chunks(self, transport, sample_file: Path, small_chunks):
        """Test that the file is written and flushed chunk by chunk."""
        response = ResponseBuilder(transport, config=small_chunks)
        response.download(sample_file)

        # 18 bytes in 4-byte reads
        assert transport.flush_count == 5
        assert transport.body == sample_file.read_bytes()

    def test_download_chunk_size_argument(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test a per-call chunk size."""
        response.download(sample_file, chunk_size=9)

        assert transport.flush_count == 2

    def test_download_filename_is_encoded(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test RFC 5987 encoding of the offered filename."""
        response.download(sample_file, "résumé 2024.pdf")

        assert (transport.headers.get("Content-Disposition")
                == "attachment; filename*=UTF-8''r%C3%A9sum%C3%A9%202024.pdf")

    def test_download_filename_cannot_inject(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test that quotes and newlines in the filename are escaped."""
        response.download(sample_file, 'a";\r\nX-Evil: 1')

        disposition = transport.headers.get("Content-Disposition")
        assert "\r" not in disposition and "\n" not in disposition
        assert '"' not in disposition

    def test_download_sniffs_magic_bytes(self, response: ResponseBuilder, transport, tmp_path: Path):
        """Test that file content beats a misleading extension."""
        path = tmp_path / "image.txt"
        path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)

        response.download(path)

        assert transport.headers.get("Content-Type") == "image/png"

    def test_download_never_adds_charset(self, response: ResponseBuilder, transport, tmp_path: Path):
        """Test that downloaded text files carry no charset."""
        path = tmp_path / "data.csv"
        path.write_text("a,b\n1,2\n")

        response.download(path)

        assert transport.headers.get("Content-Type") == "text/csv"

    def test_download_replaces_content(self, response: ResponseBuilder, transport, sample_file: Path):
        """Test that earlier content is not emitted."""
        response.set_content("stale body")
        response.download(sample_file)

        assert transport.body == sample_file.read_bytes()
        assert transport.headers.get("Content-Length") == "18"

    def test_download_empty_file(self, response: ResponseBuilder, transport, tmp_path: Path):
        """Test an empty file."""
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")

        result = response.download(path)

        assert result.body_bytes == 0
        assert transport.headers.get("Content-Length") == "0"

    def test_download_is_terminal(self, response: ResponseBuilder, sample_file: Path):
        """Test that nothing can be sent after a download."""
        response.download(sample_file)

        assert response.sent_by == "download"
        with pytest.raises(HeadersAlreadySent):
            response.send()


class TestDownloadErrors:
    """Tests for download() failures."""

    def test_missing_file(self, response: ResponseBuilder, transport, tmp_path: Path):
        """Test that a missing file raises before anything is emitted."""
        missing = tmp_path / "missing.pdf"

        with pytest.raises(ResourceNotFound) as exc_info:
            response.download(missing)

        assert exc_info.value.path == str(missing)
        assert str(exc_info.value) == f"File not found or not readable: {missing}"
        assert not response.is_sent
        assert not transport.headers_sent()

    def test_directory(self, response: ResponseBuilder, tmp_path: Path):
        """Test that a directory is not downloadable."""
        with pytest.raises(ResourceNotFound):
            response.download(tmp_path)

    def test_unreadable_file(self, response: ResponseBuilder, sample_file: Path, monkeypatch):
        """Test that an unreadable file is reported as not found."""
        monkeypatch.setattr(os, "access", lambda path, mode: False)

        with pytest.raises(ResourceNotFound):
            response.download(sample_file)

        assert not response.is_sent

    def test_size_failure(self, response: ResponseBuilder, sample_file: Path, monkeypatch):
        """Test that a failed size query raises before emission."""
        def fail(path):
            raise OSError("stat failed")

        monkeypatch.setattr(os.path, "getsize", fail)

        with pytest.raises(ResourceSizeUnknown) as exc_info:
            response.download(sample_file)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert not response.is_sent

    def test_open_failure(self, response: ResponseBuilder, sample_file: Path, monkeypatch, caplog):
        """Test that an open failure after the head is reported."""
        def fail(path, mode="r"):
            raise PermissionError("denied")

        monkeypatch.setattr(response_module, "open", fail, raising=False)

        with caplog.at_level("ERROR", logger="httpreply"):
            with pytest.raises(ResourceOpenFailed) as exc_info:
                response.download(sample_file)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert response.is_sent
        assert any("Unable to open" in r.getMessage() for r in caplog.records)

    def test_read_failure_closes_file(self, response: ResponseBuilder, transport, sample_file: Path, monkeypatch):
        """Test that a mid-stream read failure closes the file and raises."""
        handle = FailingFile()
        monkeypatch.setattr(response_module, "open", lambda path, mode="r": handle, raising=False)

        with pytest.raises(ResourceReadFailed):
            response.download(sample_file)

        assert handle.closed
        assert transport.body == b"abcd"

    def test_download_after_send(self, response: ResponseBuilder, sample_file: Path):
        """Test that downloading on a sent response fails."""
        response.send()

        with pytest.raises(HeadersAlreadySent):
            response.download(sample_file)

    def test_download_on_committed_transport(self, sample_file: Path):
        """Test that a transport committed elsewhere is detected."""
        transport = BufferTransport()
        transport.flush()

        with pytest.raises(HeadersAlreadySent):
            ResponseBuilder(transport).download(sample_file)
