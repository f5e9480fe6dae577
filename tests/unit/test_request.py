"""
Unit tests for the request context.
"""

import dataclasses

import pytest

from httpreply import RequestContext, ResponseBuilder


class TestRequestContext:
    """Tests for RequestContext."""

    def test_defaults(self):
        """Test a plain request without a Referer."""
        context = RequestContext()

        assert context.secure is False
        assert context.referer is None

    def test_is_read_only(self):
        """Test that the context cannot be modified."""
        context = RequestContext()

        with pytest.raises(dataclasses.FrozenInstanceError):
            context.secure = True

    @pytest.mark.parametrize("environ, secure", [
        ({}, False),
        ({"HTTPS": ""}, False),
        ({"HTTPS": "off"}, False),
        ({"HTTPS": "OFF"}, False),
        ({"HTTPS": "on"}, True),
        ({"HTTPS": "1"}, True),
        ({"wsgi.url_scheme": "https"}, True),
        ({"wsgi.url_scheme": "http"}, False),
    ])
    def test_from_environ_secure(self, environ, secure):
        """Test TLS detection from a CGI/WSGI environment."""
        assert RequestContext.from_environ(environ).secure is secure

    def test_from_environ_referer(self):
        """Test Referer extraction."""
        context = RequestContext.from_environ({"HTTP_REFERER": "https://example.com/a"})
        assert context.referer == "https://example.com/a"

    def test_from_environ_empty_referer(self):
        """Test that an empty Referer counts as missing."""
        assert RequestContext.from_environ({"HTTP_REFERER": ""}).referer is None

    def test_from_headers(self):
        """Test building from parsed request headers."""
        context = RequestContext.from_headers({"Host": "example.com", "referer": "/prev"}, secure=True)

        assert context.secure is True
        assert context.referer == "/prev"

    def test_from_headers_without_referer(self):
        """Test headers without a Referer."""
        assert RequestContext.from_headers({"Host": "example.com"}).referer is None

    def test_secure_read_at_construction(self, transport):
        """Test that the builder captures the TLS flag once."""
        response = ResponseBuilder(transport, RequestContext(secure=True))
        assert response.secure is True
