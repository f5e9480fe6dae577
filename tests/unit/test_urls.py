"""
Unit tests for URL helpers.
"""

import pytest

from httpreply.http.urls import (
    is_absolute_url,
    is_valid_redirect_target,
    sanitize_url,
    upgrade_scheme,
)


class TestURLValidation:
    """Tests for is_absolute_url() and is_valid_redirect_target()."""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/path?q=1#top",
        "https://user:pw@example.com:8443/",
        "http://[::1]:8080/",
        "ftp://files.example.com/a.txt",
        "mailto:someone@example.com",
        "urn:isbn:0451450523",
    ])
    def test_absolute(self, url):
        """Test well-formed absolute URLs."""
        assert is_absolute_url(url)

    @pytest.mark.parametrize("url", [
        "",
        "/relative",
        "example.com",
        "http://",
        "https:///path",
        "javascript:alert(1)",
        "http://exa mple.com",
        "http://example.com/\n",
        "http://exämple.com/",
        "http://[::1/",
        "1http://example.com",
    ])
    def test_not_absolute(self, url):
        """Test malformed or relative URLs."""
        assert not is_absolute_url(url)

    def test_redirect_targets(self):
        """Test that paths starting with / are accepted as targets."""
        assert is_valid_redirect_target("/")
        assert is_valid_redirect_target("/login?next=/")
        assert is_valid_redirect_target("https://example.com")

        assert not is_valid_redirect_target("login")
        assert not is_valid_redirect_target(None)
        assert not is_valid_redirect_target(b"/bytes")


class TestURLRewriting:
    """Tests for upgrade_scheme() and sanitize_url()."""

    def test_upgrade(self):
        """Test http → https."""
        assert upgrade_scheme("http://example.com/a") == "https://example.com/a"
        assert upgrade_scheme("Http://example.com") == "https://example.com"

    def test_upgrade_leaves_others(self):
        """Test that only http:// is rewritten."""
        assert upgrade_scheme("https://example.com") == "https://example.com"
        assert upgrade_scheme("/path") == "/path"
        assert upgrade_scheme("ftp://example.com") == "ftp://example.com"

    def test_sanitize_keeps_url_characters(self):
        """Test that legal URL characters survive."""
        url = "https://example.com/a-b_c.d~e/%20?x=1&y=[2]#frag"
        assert sanitize_url(url) == url

    def test_sanitize_strips_illegal_characters(self):
        """Test that whitespace, control and non-ASCII characters are removed."""
        assert sanitize_url("/a b\tc\r\nd") == "/abcd"
        assert sanitize_url("/café") == "/caf"
